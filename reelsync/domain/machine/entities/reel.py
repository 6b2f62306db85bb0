# reelsync/domain/machine/entities/reel.py
import asyncio
import logging
from typing import Any, Awaitable, Hashable, List, Optional, Protocol, Sequence

from reelsync.infrastructure.rng.strategies.mersenne_rng import MersenneTwisterRNG
from reelsync.infrastructure.timing.timer_manager import timer_manager


# Strip used when no symbols are configured for a reel
DEFAULT_STRIP = [0, 1, 2, 3, 4, 5, 6, 7, 8, 9]


class ReelContract(Protocol):
    """What a reel manager needs from each reel it drives."""

    def start_spin(self) -> None:
        """Begin spinning. Fire-and-forget."""
        ...

    def stop_spin(self) -> Awaitable[Any]:
        """
        Signal the reel to stop and return a handle that resolves once the
        reel has settled. The signal itself is issued before returning.
        """
        ...

    def get_active_symbol_ids(self) -> Awaitable[List[Hashable]]:
        """Resolve to the symbol identifiers currently in the viewport."""
        ...


class Reel:
    """
    A single reel: a circular strip of symbol IDs seen through a window of
    ``window_size`` rows. Landing positions come from the RNG strategy and
    settling takes ``settle_time`` time-units on the timer.
    """
    def __init__(self, symbols: Sequence[Hashable], window_size: int = 3, symbol_height: int = 0,
                 reel_id: str = "", rng=None, timer=None, settle_time: int = 0):
        """
        Initialize a reel.

        Args:
            symbols: Symbol IDs in strip order
            window_size: Number of visible rows
            symbol_height: Height of one symbol, used for layout only
            reel_id: Optional identifier for the reel
            rng: RNG strategy choosing landing positions
            timer: Timer used for the settle delay
            settle_time: Time-units between the stop signal and settling
        """
        self.id = reel_id
        self.symbols = list(symbols)
        self.length = len(self.symbols)
        self.window_size = window_size
        self.symbol_height = symbol_height
        self.rng = rng if rng is not None else MersenneTwisterRNG()
        self.timer = timer if timer is not None else timer_manager
        self.settle_time = settle_time

        self.position = 0
        self.x = 0
        self.spinning = False
        self._settle_task: Optional[asyncio.Task] = None

        self.logger = logging.getLogger(f"domain.machine.reel.{reel_id or 'anonymous'}")

    @property
    def height(self) -> int:
        """Height of the visible window."""
        return self.window_size * self.symbol_height

    @property
    def settling(self) -> bool:
        return self._settle_task is not None

    def get_symbols_at_position(self, position: int, window_size: Optional[int] = None) -> List[Hashable]:
        """
        Get the symbols visible in the window at the given position.
        Handles wrapping around the reel.

        Args:
            position: Starting position on the strip
            window_size: Number of symbols to return (default: the reel's window)

        Returns:
            List of visible symbols
        """
        if window_size is None:
            window_size = self.window_size

        if self.length == 0:
            return []

        return [self.symbols[(position + i) % self.length] for i in range(window_size)]

    def start_spin(self) -> None:
        """Start spinning. Ignored while already spinning or settling."""
        if self.spinning:
            return

        self.spinning = True
        self.logger.debug(f"Reel {self.id} spinning")

    def stop_spin(self) -> asyncio.Future:
        """
        Signal the reel to stop.

        The landing position is chosen immediately; the returned task resolves
        after ``settle_time`` time-units. A reel that is already settling
        returns its pending task, and an idle reel returns a resolved future.
        Must be called from a running event loop.
        """
        if self._settle_task is not None:
            return self._settle_task

        if not self.spinning:
            done = asyncio.get_running_loop().create_future()
            done.set_result(None)
            return done

        if self.length:
            self.position = self.rng.get_random_int(0, self.length - 1)
        self.logger.debug(f"Reel {self.id} stopping at position {self.position}")

        self._settle_task = asyncio.ensure_future(self._settle())
        return self._settle_task

    async def _settle(self) -> None:
        try:
            await self.timer.start_timer(self.settle_time)
        finally:
            self.spinning = False
            self._settle_task = None

        self.logger.debug(f"Reel {self.id} settled on {self.get_symbols_at_position(self.position)}")

    async def get_active_symbol_ids(self) -> List[Hashable]:
        """Return the symbol IDs visible at the current position."""
        return self.get_symbols_at_position(self.position)

    def __len__(self) -> int:
        """Return the length of the strip."""
        return self.length

    def __repr__(self) -> str:
        return f"Reel(id={self.id}, length={self.length}, window={self.window_size})"
