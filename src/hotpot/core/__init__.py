"""Core hot pot session logic."""

from .states import PotPhase
from .events import Event, EventType
from .clock import SimulationClock

__all__ = [
    "PotPhase",
    "Event",
    "EventType",
    "SimulationClock",
]
