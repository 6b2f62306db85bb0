# reelsync/infrastructure/rng/strategies/numpy_rng.py
import numpy as np
from typing import Optional


class NumpyRNG:
    """
    Strategy backed by ``numpy.random.RandomState``.
    """
    def __init__(self, seed_value: Optional[int] = None):
        """
        Args:
            seed_value: Seed for reproducible landing positions
        """
        self.seed_value = seed_value
        self.rng = np.random.RandomState(seed_value)
    
    def get_random_int(self, min_val: int, max_val: int) -> int:
        """
        Draw an integer from [min_val, max_val].
        
        NumPy's upper bound is exclusive, hence the ``+ 1``.
        """
        return int(self.rng.randint(min_val, max_val + 1))
    
    def __repr__(self) -> str:
        return f"NumpyRNG(seed={self.seed_value})"
