"""Simulator control API routes."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from quart import Blueprint, abort, request

from ..schemas import SimulatorStatus

if TYPE_CHECKING:
    from ..app import AppState

bp = Blueprint("simulator", __name__)


def get_app_state() -> "AppState":
    """Get app state - injected at runtime."""
    from ..app import app_state
    return app_state


@bp.route("/")
async def get_simulator_status():
    """Get clock status and elapsed simulated time."""
    state = get_app_state()
    if state.controller is None:
        abort(503, description="Controller not initialized")

    clock = state.controller.clock
    return asdict(SimulatorStatus(
        running=clock.is_running,
        speed_multiplier=clock.speed_multiplier,
        tick_seconds=clock.tick_seconds,
        simulated_time_seconds=clock.state.simulated_time_seconds,
        ticks=clock.state.ticks,
    ))


@bp.route("/speed")
async def get_speed_multiplier():
    """Get current simulation speed multiplier."""
    state = get_app_state()
    if state.controller is None:
        abort(503, description="Controller not initialized")

    return {
        "speed_multiplier": state.controller.clock.speed_multiplier,
    }


@bp.route("/speed", methods=["POST"])
async def set_speed_multiplier():
    """Set simulation speed multiplier.

    - 1.0 = one simulated second per second
    - 10.0 = default, one tick every 100ms
    - 60.0 = one simulated minute per second
    """
    state = get_app_state()
    if state.controller is None:
        abort(503, description="Controller not initialized")

    data = await request.get_json() or {}
    try:
        multiplier = float(data.get("multiplier", 10.0))
    except (TypeError, ValueError):
        abort(400, description="'multiplier' must be a number")

    clock = state.controller.clock
    clock.set_speed_multiplier(multiplier)

    return {
        "speed_multiplier": clock.speed_multiplier,
        "message": f"Speed set to {clock.speed_multiplier:.1f}x",
    }


@bp.route("/reset", methods=["POST"])
async def reset_simulator():
    """Reset the pot to a fresh session (room temperature, empty pot)."""
    state = get_app_state()
    if state.controller is None:
        abort(503, description="Controller not initialized")

    controller = state.controller
    await controller.reset()

    return {
        "message": "Simulator reset to initial state",
        "temperature": controller.temperature,
        "volume": controller.volume,
        "heater_setting": controller.heater_setting,
    }
