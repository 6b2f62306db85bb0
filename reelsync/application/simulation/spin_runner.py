# reelsync/application/simulation/spin_runner.py
import logging
from typing import Any, Dict, List, Optional

from reelsync.domain.events.event_dispatcher import EventDispatcher
from reelsync.domain.events.spin_events import SpinEvent
from reelsync.domain.machine.entities.reel_manager import CollaboratorFailure, ReelManager
from reelsync.domain.session.entities.spin_stats import SpinStats


class SpinRunner:
    """
    Plays a series of spin cycles on one reel manager:
    start, let the reels spin for ``spin_duration``, stop, record the outcome.
    """
    def __init__(self, manager: ReelManager, event_dispatcher: Optional[EventDispatcher] = None,
                 config: Optional[Dict[str, Any]] = None, timer=None):
        """
        Initialize the runner.

        Args:
            manager: Reel manager to drive
            event_dispatcher: Dispatcher the manager reports to, for event counts
            config: The ``simulation`` config section
            timer: Timer for the spin duration; defaults to the manager's
        """
        self.logger = logging.getLogger(f"application.simulation.runner.{manager.id}")
        self.manager = manager
        self.event_dispatcher = event_dispatcher
        self.timer = timer if timer is not None else manager.timer

        self.config = config or {}
        self.cycles = self.config.get("cycles", 10)
        self.spin_duration = self.config.get("spin_duration", 1000)

        self.stats = SpinStats(manager.id)
        self.event_counts: Dict[str, int] = {}

        if event_dispatcher is not None:
            event_dispatcher.register_for_class(SpinEvent, self._on_spin_event)

    def _on_spin_event(self, event: SpinEvent):
        if event.manager_id != self.manager.id:
            return
        self.event_counts[event.type.name] = self.event_counts.get(event.type.name, 0) + 1

    async def run(self, cycles: Optional[int] = None) -> Dict[str, Any]:
        """
        Run the cycles.

        A cycle aborted by a collaborator failure is counted and the run
        carries on with the next one.

        Args:
            cycles: Number of cycles; defaults to the configured count

        Returns:
            Dictionary with manager info, statistics, outcomes and event counts
        """
        cycles = self.cycles if cycles is None else cycles
        outcomes: List[Dict[str, Any]] = []

        self.logger.info(f"Running {cycles} spin cycles on {self.manager.id}")
        self.stats.start()

        try:
            for cycle in range(1, cycles + 1):
                outcome = await self._run_cycle(cycle)
                if outcome is not None:
                    outcomes.append(outcome)
        finally:
            self.stats.end()
            if self.event_dispatcher is not None:
                self.event_dispatcher.unregister_for_class(SpinEvent, self._on_spin_event)

        self.logger.info(
            f"Run completed - Cycles: {self.stats.total_cycles}, Victories: {self.stats.victory_count}, "
            f"Failures: {self.stats.failure_count}, Duration: {self.stats.run_duration:.2f}s"
        )

        return {
            "manager": self.manager.get_info(),
            "stats": self.stats.to_dict(),
            "outcomes": outcomes,
            "event_counts": dict(self.event_counts),
        }

    async def _run_cycle(self, cycle: int) -> Optional[Dict[str, Any]]:
        try:
            self.manager.start_spin()
            await self.timer.start_timer(self.spin_duration)
            outcome = await self.manager.stop_spin()
        except CollaboratorFailure as e:
            self.logger.warning(f"Cycle {cycle} failed: {e.message}")
            self.stats.record_failure()
            await self._recover()
            return None

        if outcome is None:
            self.logger.warning(f"Cycle {cycle} produced no outcome")
            return None

        self.logger.debug(f"Cycle {cycle}: {outcome}")
        self.stats.update_outcome(outcome)
        return outcome.to_dict()

    async def _recover(self):
        """Bring the reels down after a failed start so the next cycle can begin."""
        if not self.manager.spinning:
            return

        try:
            await self.manager.stop_spin()
        except CollaboratorFailure as e:
            self.logger.error(f"Could not stop reels after failure: {e.message}")
