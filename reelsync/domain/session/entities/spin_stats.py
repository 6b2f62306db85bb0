# reelsync/domain/session/entities/spin_stats.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Hashable, Optional

from reelsync.domain.machine.entities.spin_outcome import SpinOutcome


@dataclass
class SpinStats:
    """Running totals over a series of spin cycles on one reel manager."""
    manager_id: str
    run_start_time: Optional[datetime] = None
    run_end_time: Optional[datetime] = None
    run_duration: float = 0.0
    active: bool = False

    total_cycles: int = 0
    victory_count: int = 0
    no_match_count: int = 0
    failure_count: int = 0
    victory_rate: float = 0.0
    # symbol -> number of victories it was common in
    symbol_victory_counts: Dict[Hashable, int] = field(default_factory=dict)

    def start(self):
        self.run_start_time = datetime.now()
        self.active = True

    def end(self):
        self.run_end_time = datetime.now()
        self.active = False
        if self.run_start_time:
            self.run_duration = (self.run_end_time - self.run_start_time).total_seconds()

    def update_outcome(self, outcome: SpinOutcome):
        """Count one completed cycle."""
        self.total_cycles += 1

        if outcome.is_victory:
            self.victory_count += 1
            for symbol in outcome.common_symbols:
                self.symbol_victory_counts[symbol] = self.symbol_victory_counts.get(symbol, 0) + 1
        else:
            self.no_match_count += 1

        self._update_rate()

    def record_failure(self):
        """Count one cycle aborted by a collaborator failure."""
        self.total_cycles += 1
        self.failure_count += 1
        self._update_rate()

    def _update_rate(self):
        self.victory_rate = self.victory_count / self.total_cycles if self.total_cycles > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a plain dictionary.

        Returns:
            Statistics dictionary with formatted timestamps
        """
        stats = {attr: getattr(self, attr) for attr in self.__dataclass_fields__}
        stats["symbol_victory_counts"] = dict(self.symbol_victory_counts)
        stats["run_start_time"] = self.run_start_time.strftime('%Y-%m-%d %H:%M:%S') if self.run_start_time else None
        stats["run_end_time"] = self.run_end_time.strftime('%Y-%m-%d %H:%M:%S') if self.run_end_time else None
        return stats
