"""Pot phases and the rule that selects between them."""

from __future__ import annotations

from enum import Enum, auto


class PotPhase(Enum):
    """Thermal phases of the pot.

    HEATING: Temperature follows the net heat rate (up or down).
    BOILING: Temperature is pinned at the boiling point and liquid evaporates.

    The phase is derived from the pot state on every tick; there is no latch
    and no terminal phase.
    """

    HEATING = auto()
    BOILING = auto()


def select_phase(
    temperature: float,
    net_heat: float,
    boiling_point: float,
) -> PotPhase:
    """Pick the phase for the next tick.

    Args:
        temperature: Pot temperature before the tick in °C.
        net_heat: Net heat rate before the tick in W.
        boiling_point: Boiling point of the liquid in °C.

    Returns:
        BOILING if the pot is at the boiling point and still gaining heat,
        otherwise HEATING.
    """
    if temperature >= boiling_point and net_heat > 0:
        return PotPhase.BOILING
    return PotPhase.HEATING
