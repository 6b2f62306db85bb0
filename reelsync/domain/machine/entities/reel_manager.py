# reelsync/domain/machine/entities/reel_manager.py
import asyncio
import logging
from enum import Enum, auto
from typing import Any, Callable, Dict, Hashable, List, Optional, Sequence, Tuple

from .reel import DEFAULT_STRIP, Reel, ReelContract
from .spin_outcome import SpinOutcome
from ..services.victory_evaluation import VictoryEvaluator
from ...events.spin_events import SpinEvent, SpinEventType
from reelsync.infrastructure.timing.timer_manager import timer_manager


# Time-units between consecutive stop signals
DEFAULT_STOP_DELAY = 250

# (reel index, symbols per reel, symbol height) -> reel
ReelFactory = Callable[[int, int, int], ReelContract]


class ManagerState(Enum):
    IDLE = auto()
    SPINNING = auto()
    STOPPING = auto()   # stop sequence or victory check in flight


class ReelManagerError(Exception):
    """Base class for reel manager errors."""
    pass


class CollaboratorFailure(ReelManagerError):
    """A reel or the timer failed during a spin cycle."""
    def __init__(self, operation: str, reel_index: Optional[int], error: BaseException):
        self.operation = operation
        self.reel_index = reel_index
        self.error = error
        where = f" on reel {reel_index}" if reel_index is not None else ""
        self.message = f"{operation} failed{where}: {error!r}"
        super().__init__(self.message)


class ReelManager:
    """
    Drives a fixed, ordered set of reels through start/stop cycles.

    ``start_spin`` starts every reel. ``stop_spin`` signals the reels to
    stop left to right with a fixed cadence, waits until every reel has
    settled, then compares the visible symbols of all reels.

    Lifecycle:
        IDLE -> start_spin() -> SPINNING -> stop_spin() -> STOPPING -> IDLE

    Calls that do not fit the current state are ignored. The manager is
    always back to IDLE when ``stop_spin`` returns or raises.
    """
    def __init__(self, number_of_reels: int, symbols_per_reel: int, reel_width: int, symbol_height: int,
                 reel_factory: Optional[ReelFactory] = None, timer=None,
                 stop_delay: int = DEFAULT_STOP_DELAY, stop_delays: Optional[Sequence[int]] = None,
                 event_dispatcher=None, manager_id: str = "reel_manager"):
        """
        Initialize the manager and build its reels.

        Args:
            number_of_reels: Number of reels to create
            symbols_per_reel: Visible rows per reel
            reel_width: Horizontal distance between reels
            symbol_height: Height of each symbol
            reel_factory: Builds reel ``i``; defaults to a Reel over DEFAULT_STRIP
            timer: Object with an async ``start_timer(duration)``
            stop_delay: Time-units between consecutive stop signals
            stop_delays: Optional per-gap delays, one per pair of adjacent reels
            event_dispatcher: Optional EventDispatcher receiving SpinEvents
            manager_id: Identifier used in logs and events

        Raises:
            ValueError: If the reel count or the delays are invalid
        """
        if not isinstance(number_of_reels, int) or isinstance(number_of_reels, bool) or number_of_reels < 1:
            raise ValueError(f"number_of_reels must be a positive integer, got {number_of_reels!r}")

        self.id = manager_id
        self.logger = logging.getLogger(f"domain.machine.reel_manager.{manager_id}")

        self._number_of_reels = number_of_reels
        self._symbols_per_reel = symbols_per_reel
        self._reel_width = reel_width
        self._symbol_height = symbol_height

        self.timer = timer if timer is not None else timer_manager
        self.event_dispatcher = event_dispatcher
        self.evaluator = VictoryEvaluator()
        self._stop_delays = self._resolve_stop_delays(stop_delay, stop_delays)

        self._spinning = False
        self._stop_task: Optional[asyncio.Future] = None
        self.last_outcome: Optional[SpinOutcome] = None

        self._reel_factory = reel_factory or self._default_reel_factory
        self._reels: Tuple[ReelContract, ...] = ()
        self._create()

        self.logger.info(f"Reel manager {manager_id} created with {number_of_reels} reels, "
                         f"stop delays {list(self._stop_delays)}")

    def _resolve_stop_delays(self, stop_delay: int, stop_delays: Optional[Sequence[int]]) -> Tuple[int, ...]:
        gaps = self._number_of_reels - 1

        if stop_delays is None:
            delays = (stop_delay,) * gaps
        else:
            delays = tuple(stop_delays)
            if len(delays) != gaps:
                raise ValueError(f"Expected {gaps} stop delays for {self._number_of_reels} reels, got {len(delays)}")

        if any(delay < 0 for delay in delays):
            raise ValueError(f"Stop delays must be non-negative, got {list(delays)}")

        return delays

    def _create(self):
        """Build the reel collection. Reel ``i`` sits at x = i * reel_width."""
        reels = []
        for i in range(self._number_of_reels):
            reel = self._reel_factory(i, self._symbols_per_reel, self._symbol_height)
            reel.x = i * self._reel_width
            reels.append(reel)
        self._reels = tuple(reels)

    def _default_reel_factory(self, index: int, symbols_per_reel: int, symbol_height: int) -> Reel:
        return Reel(DEFAULT_STRIP, window_size=symbols_per_reel, symbol_height=symbol_height,
                    reel_id=f"{self.id}.reel{index + 1}", timer=self.timer)

    @property
    def number_of_reels(self) -> int:
        return self._number_of_reels

    @property
    def reels(self) -> Tuple[ReelContract, ...]:
        return self._reels

    @property
    def stop_delays(self) -> Tuple[int, ...]:
        return self._stop_delays

    @property
    def spinning(self) -> bool:
        """True from start_spin until the matching stop cycle has finished."""
        return self._spinning

    @property
    def state(self) -> ManagerState:
        if self._stop_task is not None:
            return ManagerState.STOPPING
        return ManagerState.SPINNING if self._spinning else ManagerState.IDLE

    def start_spin(self) -> None:
        """
        Start every reel, in index order, without waiting on them.
        Ignored while a spin cycle is in progress.

        Raises:
            CollaboratorFailure: If a reel refuses to start; the manager stays
                SPINNING so stop_spin can bring the started reels down
        """
        if self._spinning:
            self.logger.debug("start_spin ignored: spin already in progress")
            return

        self._spinning = True
        self.logger.debug(f"Starting {self._number_of_reels} reels")

        for index, reel in enumerate(self._reels):
            try:
                reel.start_spin()
            except Exception as e:
                self.logger.error(f"Reel {index} failed to start: {str(e)}")
                raise CollaboratorFailure("start_spin", index, e) from e

        self._dispatch(SpinEventType.SPIN_STARTED, {"number_of_reels": self._number_of_reels})

    async def stop_spin(self) -> Optional[SpinOutcome]:
        """
        Stop the reels and evaluate the result.

        A call made while a stop cycle is already running joins that cycle
        instead of starting another one.

        Returns:
            The SpinOutcome, or None if the reels were not spinning

        Raises:
            CollaboratorFailure: If a reel or the timer failed; the manager is
                IDLE again by the time this propagates
        """
        if self._stop_task is None:
            if not self._spinning:
                self.logger.debug("stop_spin ignored: reels are not spinning")
                return None
            self._stop_task = asyncio.ensure_future(self._stop_and_evaluate())
            self._stop_task.add_done_callback(self._retrieve_stop_failure)
        else:
            self.logger.debug("stop_spin joined the stop cycle in progress")

        # shield: a cancelled caller must not abort the cycle and leave it spinning
        return await asyncio.shield(self._stop_task)

    @staticmethod
    def _retrieve_stop_failure(task: asyncio.Future):
        # Every caller may have been cancelled; the failure is already logged
        if not task.cancelled():
            task.exception()

    async def _stop_and_evaluate(self) -> SpinOutcome:
        try:
            await self._stop_reels()
            outcome = await self.check_victory()
        except CollaboratorFailure as failure:
            self.logger.error(f"Spin cycle aborted: {failure.message}")
            self._dispatch(SpinEventType.SPIN_FAILED, {
                "operation": failure.operation,
                "reel_index": failure.reel_index,
                "error": str(failure.error),
            })
            raise
        finally:
            self._spinning = False
            self._stop_task = None

        self._dispatch(SpinEventType.SPIN_COMPLETED, outcome.to_dict())
        return outcome

    async def _stop_reels(self):
        """
        Signal reel 0, wait, signal reel 1, wait, ... then wait for every
        reel to settle. Signals go out strictly in index order.
        """
        handles: List[asyncio.Future] = []
        operation, index = "stop_spin", 0

        try:
            for index, reel in enumerate(self._reels):
                if index > 0:
                    operation = "wait"
                    await self.timer.start_timer(self._stop_delays[index - 1])

                operation = "stop_spin"
                handles.append(asyncio.ensure_future(reel.stop_spin()))
                self.logger.debug(f"Stop signalled to reel {index}")
                self._dispatch(SpinEventType.REEL_STOP_SIGNALLED, {"reel_index": index})
        except Exception as e:
            # Reels already signalled still get to settle before we bail out
            await asyncio.gather(*handles, return_exceptions=True)
            raise CollaboratorFailure(operation, index, e) from e

        results = await asyncio.gather(*handles, return_exceptions=True)
        self._raise_first_failure("settle", results)

        self.logger.debug("All reels settled")
        self._dispatch(SpinEventType.REELS_SETTLED, {"number_of_reels": self._number_of_reels})

    async def check_victory(self) -> SpinOutcome:
        """
        Collect the visible symbols of every reel and look for identifiers
        shared by all of them. Does not touch the spin state.

        Returns:
            VICTORY with the common symbols, or NO_MATCH

        Raises:
            CollaboratorFailure: If a reel's symbol query fails
        """
        results = await asyncio.gather(*(self._active_symbols(reel) for reel in self._reels),
                                       return_exceptions=True)
        self._raise_first_failure("get_active_symbol_ids", results)

        outcome = self.evaluator.evaluate(results)
        self.last_outcome = outcome

        if outcome.is_victory:
            self.logger.info(f"Victory! Common symbols: {list(outcome.common_symbols)}")
            self._dispatch(SpinEventType.VICTORY, outcome.to_dict())
        else:
            self.logger.info("No common symbols.")
            self._dispatch(SpinEventType.NO_MATCH, outcome.to_dict())

        return outcome

    @staticmethod
    async def _active_symbols(reel: ReelContract) -> List[Hashable]:
        return list(await reel.get_active_symbol_ids())

    @staticmethod
    def _raise_first_failure(operation: str, results: Sequence[Any]):
        for index, result in enumerate(results):
            if isinstance(result, BaseException):
                raise CollaboratorFailure(operation, index, result) from result

    def _dispatch(self, event_type: SpinEventType, data: Dict[str, Any]):
        if self.event_dispatcher is None:
            return
        self.event_dispatcher.dispatch(SpinEvent(type=event_type, data=dict(data), manager_id=self.id))

    def get_info(self) -> Dict[str, Any]:
        """
        Get information about this manager.

        Returns:
            Dictionary with layout, timing and state
        """
        return {
            'id': self.id,
            'number_of_reels': self._number_of_reels,
            'symbols_per_reel': self._symbols_per_reel,
            'reel_width': self._reel_width,
            'symbol_height': self._symbol_height,
            'stop_delays': list(self._stop_delays),
            'state': self.state.name,
            'reels': [repr(reel) for reel in self._reels],
        }

    def __repr__(self) -> str:
        return f"ReelManager(id={self.id}, reels={self._number_of_reels}, state={self.state.name})"
