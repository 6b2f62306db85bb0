# reelsync/infrastructure/rng/rng_provider.py
import logging
from typing import Optional, Dict, Any

from .strategies.mersenne_rng import MersenneTwisterRNG
from .strategies.numpy_rng import NumpyRNG
from .strategies.rng_strategy import RNGStrategy


class RNGProvider:
    """
    Creates RNG strategies by name.
    Unseeded strategies are shared per name; seeded ones are always fresh.
    """
    STRATEGIES = {
        "mersenne": MersenneTwisterRNG,
        "numpy": NumpyRNG,
    }
    
    def __init__(self):
        self.logger = logging.getLogger("infrastructure.rng")
        self._shared = {}  # strategy name -> unseeded instance
        
    def get_rng(self, strategy_name: str, seed: Optional[int] = None) -> RNGStrategy:
        """
        Get an RNG strategy instance.
        
        Args:
            strategy_name: "mersenne" or "numpy"
            seed: Optional seed; seeded strategies are never cached
            
        Returns:
            RNG strategy instance
            
        Raises:
            ValueError: If the strategy name is unknown
        """
        name = strategy_name.lower()
        if name not in self.STRATEGIES:
            self.logger.error(f"Unknown RNG strategy: {strategy_name}")
            raise ValueError(f"Unknown RNG strategy: {strategy_name}")
            
        if seed is None and name in self._shared:
            return self._shared[name]
            
        self.logger.debug(f"Creating {name} RNG with seed: {seed}")
        strategy = self.STRATEGIES[name](seed)
        
        if seed is None:
            self._shared[name] = strategy
            
        return strategy
    
    def create_from_config(self, config: Dict[str, Any]) -> RNGStrategy:
        """
        Build a strategy from an ``rng`` config section,
        e.g. ``{"strategy": "numpy", "seed": 12345}``.
        """
        return self.get_rng(config.get("strategy", "mersenne"), config.get("seed"))
