# reelsync/domain/machine/entities/spin_outcome.py
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Hashable, Sequence, Tuple


class OutcomeType(Enum):
    """Result of comparing the settled reels."""
    VICTORY = auto()
    NO_MATCH = auto()


@dataclass(frozen=True)
class SpinOutcome:
    """
    Result of one victory check.

    ``common_symbols`` holds the identifiers visible on every reel, in order
    of first appearance on reel 0; it is empty for NO_MATCH.
    """
    type: OutcomeType
    common_symbols: Tuple[Hashable, ...] = ()
    reel_symbols: Tuple[Tuple[Hashable, ...], ...] = ()
    timestamp: float = field(default_factory=time.time)

    @classmethod
    def victory(cls, common_symbols: Sequence[Hashable],
                reel_symbols: Sequence[Sequence[Hashable]] = ()) -> 'SpinOutcome':
        if not common_symbols:
            raise ValueError("A victory needs at least one common symbol")
        return cls(OutcomeType.VICTORY, tuple(common_symbols), _freeze(reel_symbols))

    @classmethod
    def no_match(cls, reel_symbols: Sequence[Sequence[Hashable]] = ()) -> 'SpinOutcome':
        return cls(OutcomeType.NO_MATCH, (), _freeze(reel_symbols))

    @property
    def is_victory(self) -> bool:
        return self.type is OutcomeType.VICTORY

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data form used in event payloads and run summaries."""
        return {
            "type": self.type.name,
            "is_victory": self.is_victory,
            "common_symbols": list(self.common_symbols),
            "reel_symbols": [list(symbols) for symbols in self.reel_symbols],
            "timestamp": self.timestamp,
        }

    def __str__(self) -> str:
        if self.is_victory:
            return f"Victory(common_symbols={list(self.common_symbols)})"
        return "NoMatch"


def _freeze(reel_symbols: Sequence[Sequence[Hashable]]) -> Tuple[Tuple[Hashable, ...], ...]:
    return tuple(tuple(symbols) for symbols in reel_symbols)
