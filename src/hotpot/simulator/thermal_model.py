"""Thermal model of a heated pot of liquid with food in it.

The pot is a single well-mixed thermal body. Liquid and food contribute heat
capacity; the heater adds power and the pot loses heat to the room following
Newton's law of cooling. Adding liquid or food mixes temperatures by
conservation of energy:

    T_final = (C1*T1 + C2*T2) / (C1 + C2)
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Optional

from .foods import FoodItem, FoodKind, Inventory

logger = logging.getLogger(__name__)


class ThermalInvariantError(RuntimeError):
    """Raised when the pot state breaks a physical invariant."""


@dataclass
class ThermalParameters:
    """Physical constants of the simulation.

    Temperatures in °C, volumes in mL (1 mL of liquid weighs 1 g), power in W.
    """

    # Liquid
    liquid_specific_heat: float = 4.184  # J/(g·K)
    max_volume: float = 3000.0
    min_volume: float = 200.0  # Evaporation never takes the pot below this
    initial_volume: float = 1000.0

    # Temperatures
    ambient_temp: float = 25.0
    boiling_point: float = 100.0

    # Heater (stove dial)
    max_heater_setting: int = 10
    initial_heater_setting: int = 5
    power_per_setting: float = 500.0  # W per dial step
    heater_noise: float = 25.0  # Uniform ±W flicker around the base power

    # Newton cooling to the room, W per K above ambient
    cooling_coefficient: float = 12.0

    # Evaporated volume per simulated second while boiling (mL/s)
    evaporation_rate: float = 0.5


@dataclass
class PotState:
    """Mutable state of one simulation session."""

    temperature: float = 25.0
    volume: float = 1000.0
    heater_setting: int = 5
    is_boiling: bool = False
    inventory: Inventory = field(default_factory=Inventory)
    simulated_time_seconds: float = 0.0
    ticks: int = 0

    @classmethod
    def initial(cls, params: ThermalParameters) -> "PotState":
        """Fresh session state: room temperature, default fill, empty pot."""
        return cls(
            temperature=params.ambient_temp,
            volume=params.initial_volume,
            heater_setting=params.initial_heater_setting,
        )


def total_heat_capacity(state: PotState, params: ThermalParameters) -> float:
    """Heat capacity of the pot contents in J/K.

    Always recomputed from the current volume and inventory.
    """
    liquid = state.volume * params.liquid_specific_heat
    return liquid + state.inventory.total_heat_capacity()


class HeatSource:
    """Stove burner with a discrete dial and a flickering flame.

    The random source is injected so tests and reproducible sessions can seed
    it. Every call with a non-zero setting consumes exactly one draw.
    """

    def __init__(
        self,
        params: ThermalParameters,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.params = params
        self.rng = rng or random.Random()

    def fire_output(self, heater_setting: int) -> float:
        """Instantaneous heater power in W, never negative."""
        if heater_setting == 0:
            return 0.0
        base_power = heater_setting * self.params.power_per_setting
        noise = self.rng.uniform(-self.params.heater_noise, self.params.heater_noise)
        return max(0.0, base_power + noise)


def cooling_loss(state: PotState, params: ThermalParameters) -> float:
    """Heat lost to the room in W (Newton's law of cooling)."""
    return (state.temperature - params.ambient_temp) * params.cooling_coefficient


def net_heat_rate(
    state: PotState,
    params: ThermalParameters,
    heat_source: HeatSource,
) -> float:
    """Heater power minus losses in W. Positive means the pot is gaining heat."""
    return heat_source.fire_output(state.heater_setting) - cooling_loss(state, params)


def mix_temperature(
    temp: float,
    capacity: float,
    added_temp: float,
    added_capacity: float,
) -> float:
    """Equilibrium temperature of two bodies brought together.

    Args:
        temp: Temperature of the first body.
        capacity: Heat capacity of the first body in J/K.
        added_temp: Temperature of the second body.
        added_capacity: Heat capacity of the second body in J/K.
    """
    total = capacity + added_capacity
    if total <= 0:
        raise ThermalInvariantError(f"Non-positive heat capacity: {total}")
    return (temp * capacity + added_temp * added_capacity) / total


def add_liquid(
    state: PotState,
    params: ThermalParameters,
    amount: float,
    liquid_temp: float,
) -> None:
    """Pour liquid into the pot and settle to the mixed temperature.

    The full amount takes part in the heat balance even when the pot
    overflows; only the stored volume is capped at max_volume.

    Args:
        state: Pot state to update.
        params: Thermal parameters.
        amount: Volume poured in mL. Amounts that are not finite and
            positive change nothing.
        liquid_temp: Temperature of the poured liquid in °C. Non-finite
            temperatures change nothing.
    """
    if not math.isfinite(amount) or amount <= 0:
        logger.debug("Ignoring invalid liquid amount: %s", amount)
        return
    if not math.isfinite(liquid_temp):
        logger.debug("Ignoring liquid with invalid temperature: %s", liquid_temp)
        return

    current_capacity = total_heat_capacity(state, params)
    added_capacity = amount * params.liquid_specific_heat
    new_temp = mix_temperature(
        state.temperature, current_capacity, liquid_temp, added_capacity
    )

    overflow = max(0.0, state.volume + amount - params.max_volume)
    state.volume = min(params.max_volume, state.volume + amount)
    state.temperature = new_temp

    if overflow > 0:
        logger.info("Pot overflowed by %.1f mL", overflow)


def add_food(
    state: PotState,
    params: ThermalParameters,
    kind: FoodKind,
) -> FoodItem:
    """Drop a room-temperature piece of food into the pot.

    Returns:
        The new item, already appended to the inventory.
    """
    item = FoodItem.create(kind, temperature=params.ambient_temp)
    current_capacity = total_heat_capacity(state, params)
    state.temperature = mix_temperature(
        state.temperature, current_capacity, item.temperature, item.heat_capacity
    )
    state.inventory.add(item)
    return item


def remove_food(state: PotState, food_id: str) -> Optional[FoodItem]:
    """Take a food item out of the pot.

    The heat the item exchanged while it was in the pot stays in the pot
    temperature; removal only drops its future heat capacity.

    Returns:
        The removed item, or None if no item had that id.
    """
    item = state.inventory.remove(food_id)
    if item is None:
        logger.debug("No food with id %s in pot", food_id)
    return item
