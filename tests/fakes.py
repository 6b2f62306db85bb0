# tests/fakes.py
"""Test doubles for the reel contract and the timer."""
import asyncio
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from reelsync.domain.machine.entities.reel_manager import ReelManager


class VirtualTimer:
    """Advances a virtual clock instead of sleeping."""
    def __init__(self):
        self.now = 0
        self.calls = []

    async def start_timer(self, duration):
        self.calls.append(duration)
        self.now += duration
        await asyncio.sleep(0)


class FailingTimer(VirtualTimer):
    async def start_timer(self, duration):
        raise RuntimeError("timer broke")


class FakeReel:
    """
    Records every call. Settle handles resolve immediately unless
    ``auto_settle`` is off, in which case the test resolves ``settle_future``.
    """
    def __init__(self, symbols=(), timer=None):
        self.symbols = list(symbols)
        self.timer = timer
        self.x = None
        self.start_calls = 0
        self.stop_signal_times = []
        self.symbol_queries = 0
        self.settle_future = None
        self.auto_settle = True
        self.start_error = None
        self.stop_error = None
        self.settle_error = None
        self.symbols_error = None

    def start_spin(self):
        if self.start_error:
            raise self.start_error
        self.start_calls += 1

    def stop_spin(self):
        if self.stop_error:
            raise self.stop_error

        self.stop_signal_times.append(self.timer.now if self.timer else None)
        future = asyncio.get_running_loop().create_future()

        if self.settle_error:
            future.set_exception(self.settle_error)
        elif self.auto_settle:
            future.set_result(None)

        self.settle_future = future
        return future

    async def get_active_symbol_ids(self):
        self.symbol_queries += 1
        if self.symbols_error:
            raise self.symbols_error
        return list(self.symbols)


def build_manager(symbol_sets, timer=None, **kwargs):
    """Create a ReelManager over FakeReels showing ``symbol_sets``."""
    timer = timer or VirtualTimer()
    reels = [FakeReel(symbols, timer) for symbols in symbol_sets]
    kwargs.setdefault("reel_width", 100)

    manager = ReelManager(
        len(reels), 3, kwargs.pop("reel_width"), 50,
        reel_factory=lambda index, symbols_per_reel, symbol_height: reels[index],
        timer=timer,
        **kwargs
    )
    return manager, reels, timer


async def drain(iterations=25):
    """Let pending callbacks and tasks run."""
    for _ in range(iterations):
        await asyncio.sleep(0)
