# reelsync/infrastructure/rng/strategies/rng_strategy.py
from typing import Protocol


class RNGStrategy(Protocol):
    """Interface a reel uses to pick its landing position."""
    
    def get_random_int(self, min_val: int, max_val: int) -> int:
        """
        Draw an integer from the closed range [min_val, max_val].
        
        Args:
            min_val: Lowest value that may be returned
            max_val: Highest value that may be returned
        """
        ...
