"""Session controller owning the pot state, heater and clock."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Optional

from ..config import HotPotConfig, load_config
from ..simulator import thermal_model
from ..simulator.foods import FoodItem, FoodKind, parse_food_kind
from ..simulator.thermal_model import HeatSource, PotState
from .clock import EventListener, SimulationClock
from .events import EventType, pot_changed_event

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PotSnapshot:
    """Read-only view of the pot for display."""

    temperature: float
    volume: float
    heater_setting: int
    is_boiling: bool
    foods: tuple[FoodItem, ...]
    total_heat_capacity: float
    fire_output: float
    net_heat_rate: float
    simulated_time_seconds: float

    def to_dict(self) -> dict:
        return {
            "temperature": self.temperature,
            "volume": self.volume,
            "heater_setting": self.heater_setting,
            "is_boiling": self.is_boiling,
            "foods": [food.to_dict() for food in self.foods],
            "total_heat_capacity": self.total_heat_capacity,
            "fire_output": self.fire_output,
            "net_heat_rate": self.net_heat_rate,
            "simulated_time_seconds": self.simulated_time_seconds,
        }


class HotPotController:
    """Owner of one simulation session.

    Every mutation of the pot, from the clock or from the outside, runs under
    the clock's lock so the state invariants hold between ticks.

    Food removal does not give back the heat the food exchanged while it was
    in the pot: the pot temperature keeps that history and only the food's
    future heat capacity goes away.
    """

    def __init__(
        self,
        config: Optional[HotPotConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Initialize the controller.

        Args:
            config: Configuration. Loads from files if None.
            rng: Random source for the heater flicker. Seeded from
                config.random_seed if None.
        """
        self.config = config or load_config()
        self.params = self.config.physics
        if rng is None:
            rng = random.Random(self.config.random_seed)
        self._heat_source = HeatSource(self.params, rng)
        self._state = PotState.initial(self.params)
        self._clock = SimulationClock(
            self._state,
            self.params,
            self._heat_source,
            speed_multiplier=self.config.speed_multiplier,
        )

    @property
    def clock(self) -> SimulationClock:
        """The simulation clock."""
        return self._clock

    @property
    def heat_source(self) -> HeatSource:
        """The heater model."""
        return self._heat_source

    # -------------------------------------------------------------------------
    # Read-only accessors
    # -------------------------------------------------------------------------

    @property
    def temperature(self) -> float:
        return self._state.temperature

    @property
    def volume(self) -> float:
        return self._state.volume

    @property
    def heater_setting(self) -> int:
        return self._state.heater_setting

    @property
    def is_boiling(self) -> bool:
        return self._state.is_boiling

    @property
    def foods(self) -> list[FoodItem]:
        """Foods in the pot in the order they were added."""
        return self._state.inventory.items()

    def total_heat_capacity(self) -> float:
        return thermal_model.total_heat_capacity(self._state, self.params)

    def fire_output(self) -> float:
        """Preview of the heater power. Consumes one random draw."""
        return self._heat_source.fire_output(self._state.heater_setting)

    def net_heat_rate(self) -> float:
        """Preview of the net heat rate. Consumes one random draw."""
        return thermal_model.net_heat_rate(self._state, self.params, self._heat_source)

    def snapshot(self) -> PotSnapshot:
        """Capture the current state and derived quantities."""
        fire = self.fire_output()
        return PotSnapshot(
            temperature=self._state.temperature,
            volume=self._state.volume,
            heater_setting=self._state.heater_setting,
            is_boiling=self._state.is_boiling,
            foods=tuple(self._state.inventory),
            total_heat_capacity=self.total_heat_capacity(),
            fire_output=fire,
            net_heat_rate=fire - thermal_model.cooling_loss(self._state, self.params),
            simulated_time_seconds=self._state.simulated_time_seconds,
        )

    def add_event_listener(self, listener: EventListener) -> None:
        """Add listener for clock and pot events.

        Args:
            listener: Async function taking Event.
        """
        self._clock.add_listener(listener)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def set_heater_setting(self, value: float) -> int:
        """Turn the stove dial.

        Out-of-range values (including infinities) are clamped to
        [0, max_heater_setting]. Fractional values are truncated.

        Returns:
            The setting actually applied.

        Raises:
            ValueError: If value is NaN.
        """
        if math.isnan(value):
            raise ValueError("Heater setting must be a number")

        clamped = max(0, min(self.params.max_heater_setting, value))
        if clamped != value:
            logger.warning(
                "Heater setting %s out of range, clamped to %s", value, clamped
            )
        setting = int(clamped)
        if setting != clamped:
            logger.warning(
                "Heater setting %s is not a whole number, truncated to %d",
                clamped, setting,
            )
        async with self._clock.lock:
            self._state.heater_setting = setting
        logger.info("Heater set to %d", setting)
        await self._clock.emit_event(
            pot_changed_event(EventType.HEATER_CHANGED, {"heater_setting": setting})
        )
        return setting

    async def add_liquid(self, amount: float, temperature: float) -> None:
        """Pour liquid into the pot.

        Args:
            amount: Volume in mL. Non-positive amounts are ignored.
            temperature: Liquid temperature in °C.
        """
        async with self._clock.lock:
            thermal_model.add_liquid(self._state, self.params, amount, temperature)
            new_temp = self._state.temperature
            new_volume = self._state.volume
        logger.info(
            "Added %.0f mL at %.1f°C -> %.2f°C, %.0f mL",
            amount, temperature, new_temp, new_volume,
        )
        await self._clock.emit_event(pot_changed_event(EventType.LIQUID_ADDED, {
            "amount": amount,
            "liquid_temperature": temperature,
            "temperature": new_temp,
            "volume": new_volume,
        }))

    async def add_preset_liquid(self, name: str) -> None:
        """Pour one of the configured liquid presets.

        Raises:
            KeyError: If no preset has that name.
        """
        preset = self.config.liquid_presets[name]
        await self.add_liquid(preset.amount, preset.temperature)

    async def add_food(self, kind: FoodKind | str) -> FoodItem:
        """Drop a piece of food into the pot.

        Raises:
            ValueError: If the kind is not a known food.
        """
        food_kind = parse_food_kind(kind)
        async with self._clock.lock:
            item = thermal_model.add_food(self._state, self.params, food_kind)
            new_temp = self._state.temperature
        logger.info("Added %s (%s) -> %.2f°C", item.name, item.id, new_temp)
        await self._clock.emit_event(pot_changed_event(EventType.FOOD_ADDED, {
            "food": item.to_dict(),
            "temperature": new_temp,
        }))
        return item

    async def remove_food(self, food_id: str) -> bool:
        """Take a piece of food out of the pot.

        Returns:
            True if an item was removed, False if the id was not in the pot.
        """
        async with self._clock.lock:
            item = thermal_model.remove_food(self._state, food_id)
        if item is None:
            return False
        logger.info("Removed %s (%s)", item.name, item.id)
        await self._clock.emit_event(
            pot_changed_event(EventType.FOOD_REMOVED, {"id": food_id})
        )
        return True

    async def reset(self) -> None:
        """Start the session over with a fresh pot."""
        async with self._clock.lock:
            self._state = PotState.initial(self.params)
            self._clock.reset(self._state)
        logger.info(
            "Simulation reset: temp=%.1f°C, volume=%.0f mL, heater=%d",
            self._state.temperature,
            self._state.volume,
            self._state.heater_setting,
        )
        await self._clock.emit_event(pot_changed_event(EventType.RESET, {}))

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> None:
        """Start ticking in the background."""
        await self._clock.start(self.config.tick_interval)

    async def stop(self) -> None:
        """Stop ticking. The session state stays readable."""
        await self._clock.stop()
