"""Data classes for API request/response schemas."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass
class HeaterCommand:
    """Command to turn the stove dial."""

    setting: float


@dataclass
class LiquidCommand:
    """Command to pour liquid, either explicit or from a named preset."""

    amount: Optional[float] = None
    temperature: Optional[float] = None
    preset: Optional[str] = None


@dataclass
class FoodCommand:
    """Command to drop a piece of food into the pot."""

    kind: str


@dataclass
class FoodInfo:
    """Static properties of a food kind."""

    kind: str
    name: str
    specific_heat: float
    mass: float


@dataclass
class SimulatorStatus:
    """Simulator status response."""

    running: bool
    speed_multiplier: float
    tick_seconds: float
    simulated_time_seconds: float
    ticks: int


@dataclass
class WebSocketMessage:
    """WebSocket message format."""

    type: str  # "temp_update", "boil_update", "pot_update", "error"
    data: dict[str, Any]
    timestamp: datetime = field(default_factory=datetime.now)

