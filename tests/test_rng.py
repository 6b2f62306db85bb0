# tests/test_rng.py
import os
import sys
import unittest

import numpy as np

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from reelsync.infrastructure.rng.rng_provider import RNGProvider
from reelsync.infrastructure.rng.strategies.mersenne_rng import MersenneTwisterRNG
from reelsync.infrastructure.rng.strategies.numpy_rng import NumpyRNG


class TestRNGStrategies(unittest.TestCase):
    """Both strategies honour the same contract."""

    def strategies(self, seed=12345):
        return [MersenneTwisterRNG(seed_value=seed), NumpyRNG(seed_value=seed)]

    def test_range_is_inclusive(self):
        for rng in self.strategies():
            values = [rng.get_random_int(0, 4) for _ in range(2000)]
            self.assertEqual(set(values), {0, 1, 2, 3, 4}, repr(rng))

    def test_returns_python_int(self):
        for rng in self.strategies():
            self.assertIs(type(rng.get_random_int(0, 9)), int)

    def test_seed_reproducibility(self):
        for first, second in zip(self.strategies(7), self.strategies(7)):
            self.assertEqual([first.get_random_int(0, 99) for _ in range(20)],
                             [second.get_random_int(0, 99) for _ in range(20)])

    def test_landing_distribution_is_roughly_uniform(self):
        for rng in self.strategies():
            counts = np.bincount([rng.get_random_int(0, 9) for _ in range(20000)], minlength=10)
            expected = 2000
            chi2 = np.sum((counts - expected) ** 2 / expected)
            # 9 degrees of freedom, p=0.001 critical value is ~27.9
            self.assertLess(chi2, 27.9, repr(rng))


class TestRNGProvider(unittest.TestCase):
    """Test cases for the strategy factory."""

    def setUp(self):
        self.provider = RNGProvider()

    def test_get_rng(self):
        self.assertIsInstance(self.provider.get_rng("mersenne"), MersenneTwisterRNG)
        self.assertIsInstance(self.provider.get_rng("NumPy"), NumpyRNG)

    def test_unseeded_instances_are_shared(self):
        self.assertIs(self.provider.get_rng("mersenne"), self.provider.get_rng("mersenne"))

    def test_seeded_instances_are_fresh(self):
        self.assertIsNot(self.provider.get_rng("numpy", 1), self.provider.get_rng("numpy", 1))

    def test_unknown_strategy(self):
        with self.assertRaises(ValueError):
            self.provider.get_rng("dice")

    def test_create_from_config(self):
        rng = self.provider.create_from_config({"strategy": "numpy", "seed": 5})
        self.assertIsInstance(rng, NumpyRNG)
        self.assertEqual(rng.seed_value, 5)

        self.assertIsInstance(self.provider.create_from_config({}), MersenneTwisterRNG)


if __name__ == "__main__":
    unittest.main()
