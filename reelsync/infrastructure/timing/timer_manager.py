# reelsync/infrastructure/timing/timer_manager.py
import asyncio
import logging
from typing import Union


class TimerManager:
    """
    Delay utility used for the stop cadence and reel settle animations.
    One time-unit is one millisecond, multiplied by ``time_scale``.
    """
    def __init__(self, time_scale: float = 1.0):
        """
        Initialize the timer manager.
        
        Args:
            time_scale: Multiplier applied to every duration (0 resolves on the next loop iteration)
        """
        if time_scale < 0:
            raise ValueError(f"time_scale must be non-negative, got {time_scale}")
            
        self.time_scale = time_scale
        self.logger = logging.getLogger("infrastructure.timing")
        
    async def start_timer(self, duration: Union[int, float]) -> None:
        """
        Resolve after the given number of time-units has elapsed.
        
        Args:
            duration: Delay in time-units (milliseconds before scaling)
            
        Raises:
            ValueError: If duration is negative
        """
        if duration < 0:
            raise ValueError(f"Timer duration must be non-negative, got {duration}")
            
        seconds = duration * self.time_scale / 1000.0
        self.logger.debug(f"Timer started: {duration} units ({seconds:.3f}s)")
        await asyncio.sleep(seconds)
        
    def set_time_scale(self, time_scale: float):
        """Change the scale applied to subsequent timers."""
        if time_scale < 0:
            raise ValueError(f"time_scale must be non-negative, got {time_scale}")
        self.time_scale = time_scale
        return self


# Shared instance
timer_manager = TimerManager()
