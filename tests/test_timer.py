# tests/test_timer.py
import asyncio
import os
import sys
import time
import unittest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from reelsync.infrastructure.timing.timer_manager import TimerManager, timer_manager


class TestTimerManager(unittest.IsolatedAsyncioTestCase):
    """Test cases for the delay utility."""

    async def test_zero_scale_does_not_wait(self):
        timer = TimerManager(time_scale=0)

        start = time.monotonic()
        await timer.start_timer(10_000)

        self.assertLess(time.monotonic() - start, 1.0)

    async def test_waits_roughly_the_duration(self):
        timer = TimerManager()

        start = time.monotonic()
        await timer.start_timer(50)

        self.assertGreaterEqual(time.monotonic() - start, 0.04)

    async def test_timers_run_concurrently(self):
        timer = TimerManager(time_scale=0.5)

        start = time.monotonic()
        await asyncio.gather(timer.start_timer(100), timer.start_timer(100), timer.start_timer(100))

        self.assertLess(time.monotonic() - start, 0.14)

    async def test_negative_duration(self):
        with self.assertRaises(ValueError):
            await TimerManager().start_timer(-1)

    def test_negative_scale(self):
        with self.assertRaises(ValueError):
            TimerManager(time_scale=-1)
        with self.assertRaises(ValueError):
            TimerManager().set_time_scale(-0.5)

    def test_shared_instance(self):
        self.assertIsInstance(timer_manager, TimerManager)
        self.assertEqual(timer_manager.time_scale, 1.0)


if __name__ == "__main__":
    unittest.main()
