# reelsync/infrastructure/rng/strategies/mersenne_rng.py
import random
from typing import Optional


class MersenneTwisterRNG:
    """
    Strategy backed by a private ``random.Random`` (Mersenne Twister) instance.
    """
    def __init__(self, seed_value: Optional[int] = None):
        """
        Args:
            seed_value: Seed for reproducible landing positions
        """
        # Own instance so reels never share the module-level generator
        self._random = random.Random(seed_value)
        self.seed_value = seed_value
    
    def get_random_int(self, min_val: int, max_val: int) -> int:
        return self._random.randint(min_val, max_val)
    
    def __repr__(self) -> str:
        return f"MersenneTwisterRNG(seed={self.seed_value})"
