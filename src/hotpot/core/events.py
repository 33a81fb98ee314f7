"""Event system for the hot pot simulation."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Optional


class EventType(Enum):
    """Types of events in the hot pot system."""

    # Clock events
    TEMP_READING = auto()
    BOIL_STARTED = auto()
    BOIL_STOPPED = auto()

    # Pot mutations
    HEATER_CHANGED = auto()
    LIQUID_ADDED = auto()
    FOOD_ADDED = auto()
    FOOD_REMOVED = auto()
    RESET = auto()

    # Error events
    ERROR = auto()


@dataclass
class Event:
    """Event data structure for the event system.

    Events are emitted by the clock and the controller, and can be consumed
    by listeners (e.g., WebSocket manager, logging).

    Attributes:
        type: The type of event.
        timestamp: When the event occurred.
        data: Optional dictionary of event-specific data.
        source: Optional identifier for the event source.
    """

    type: EventType
    timestamp: datetime = field(default_factory=datetime.now)
    data: Optional[dict[str, Any]] = None
    source: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert event to dictionary for serialization.

        Returns:
            Dictionary representation of the event.
        """
        return {
            "type": self.type.name,
            "timestamp": self.timestamp.isoformat(),
            "data": self.data,
            "source": self.source,
        }


def temp_reading_event(
    temperature: float,
    volume: float,
    is_boiling: bool,
    simulated_time: float,
) -> Event:
    """Create a TEMP_READING event.

    Args:
        temperature: Pot temperature in °C.
        volume: Liquid volume in mL.
        is_boiling: Whether the pot is boiling.
        simulated_time: Elapsed simulated seconds.

    Returns:
        Temperature reading event.
    """
    return Event(
        type=EventType.TEMP_READING,
        data={
            "temperature": temperature,
            "volume": volume,
            "is_boiling": is_boiling,
            "simulated_time_seconds": simulated_time,
        },
        source="clock",
    )


def boiling_changed_event(is_boiling: bool, temperature: float, volume: float) -> Event:
    """Create a BOIL_STARTED or BOIL_STOPPED event."""
    return Event(
        type=EventType.BOIL_STARTED if is_boiling else EventType.BOIL_STOPPED,
        data={"temperature": temperature, "volume": volume},
        source="clock",
    )


def pot_changed_event(event_type: EventType, data: dict[str, Any]) -> Event:
    """Create an event for a mutation requested from outside the clock.

    Args:
        event_type: One of the pot mutation event types.
        data: Event-specific data.

    Returns:
        Pot mutation event.
    """
    return Event(type=event_type, data=data, source="controller")


def error_event(
    message: str,
    error_type: Optional[str] = None,
    details: Optional[dict[str, Any]] = None,
) -> Event:
    """Create an ERROR event.

    Args:
        message: Human-readable error message.
        error_type: Optional error classification.
        details: Optional additional error details.

    Returns:
        Error event.
    """
    data: dict[str, Any] = {"message": message}
    if error_type:
        data["error_type"] = error_type
    if details:
        data["details"] = details
    return Event(
        type=EventType.ERROR,
        data=data,
        source="system",
    )
