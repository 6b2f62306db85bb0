# reelsync/domain/events/spin_events.py
from enum import Enum, auto
from dataclasses import dataclass

from .event_types import DomainEvent


class SpinEventType(Enum):
    """Events emitted across one spin/stop cycle."""
    SPIN_STARTED = auto()
    REEL_STOP_SIGNALLED = auto()
    REELS_SETTLED = auto()
    VICTORY = auto()
    NO_MATCH = auto()
    SPIN_COMPLETED = auto()
    SPIN_FAILED = auto()


@dataclass
class SpinEvent(DomainEvent):
    """Something that happened to a reel manager during a spin cycle."""
    manager_id: str = ""
    
    def __post_init__(self):
        super().__post_init__()
        self.data["manager_id"] = self.manager_id
