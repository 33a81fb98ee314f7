"""Pot API routes."""

from __future__ import annotations

import math
from dataclasses import asdict
from typing import TYPE_CHECKING

from quart import Blueprint, abort, request, websocket

from ...core.controller import HotPotController
from ...simulator.foods import FOOD_DATA
from ..schemas import FoodCommand, FoodInfo, HeaterCommand, LiquidCommand

if TYPE_CHECKING:
    from ..app import AppState

bp = Blueprint("pot", __name__)


def get_app_state() -> "AppState":
    """Get app state - injected at runtime."""
    from ..app import app_state
    return app_state


def _get_controller() -> HotPotController:
    controller = get_app_state().controller
    if controller is None:
        abort(503, description="Controller not initialized")
    return controller


@bp.route("/")
async def get_pot():
    """Get the current pot state and derived quantities."""
    controller = _get_controller()
    return controller.snapshot().to_dict()


@bp.route("/foods")
async def get_food_table():
    """Get the foods that can be added and their thermal properties."""
    return {
        "foods": [
            asdict(FoodInfo(
                kind=kind.value,
                name=props.name,
                specific_heat=props.specific_heat,
                mass=props.mass,
            ))
            for kind, props in FOOD_DATA.items()
        ],
    }


@bp.route("/heater", methods=["POST"])
async def set_heater():
    """Turn the stove dial.

    Whole numbers outside the dial range (including infinities) are clamped.
    Fractional and NaN settings are rejected.
    """
    controller = _get_controller()

    data = await request.get_json() or {}
    try:
        setting = float(data["setting"])
    except (KeyError, TypeError, ValueError):
        abort(400, description="'setting' must be an integer")
    if math.isnan(setting) or (math.isfinite(setting) and not setting.is_integer()):
        abort(400, description="'setting' must be an integer")

    command = HeaterCommand(setting=setting)
    applied = await controller.set_heater_setting(command.setting)
    return {"heater_setting": applied}


@bp.route("/liquid", methods=["POST"])
async def add_liquid():
    """Pour liquid into the pot.

    Body is either {"amount": mL, "temperature": °C} or {"preset": name}.
    """
    controller = _get_controller()

    data = await request.get_json() or {}
    command = LiquidCommand(
        amount=data.get("amount"),
        temperature=data.get("temperature"),
        preset=data.get("preset"),
    )

    if command.preset is not None:
        if command.preset not in controller.config.liquid_presets:
            abort(400, description=f"Unknown preset: {command.preset}")
        await controller.add_preset_liquid(command.preset)
    else:
        try:
            amount = float(command.amount)
            temperature = float(command.temperature)
        except (TypeError, ValueError):
            abort(400, description="'amount' and 'temperature' must be numbers")
        if not (math.isfinite(amount) and math.isfinite(temperature)):
            abort(400, description="'amount' and 'temperature' must be finite")
        if amount <= 0:
            abort(400, description="'amount' must be positive")
        await controller.add_liquid(amount, temperature)

    return {
        "temperature": controller.temperature,
        "volume": controller.volume,
    }


@bp.route("/food", methods=["POST"])
async def add_food():
    """Drop a piece of food into the pot."""
    controller = _get_controller()

    data = await request.get_json() or {}
    command = FoodCommand(kind=str(data.get("kind", "")))

    try:
        item = await controller.add_food(command.kind)
    except ValueError:
        abort(400, description=f"Invalid food kind: {command.kind}")

    return {"food": item.to_dict(), "temperature": controller.temperature}, 201


@bp.route("/food/<food_id>", methods=["DELETE"])
async def remove_food(food_id: str):
    """Take a piece of food out of the pot. Unknown ids are not an error."""
    controller = _get_controller()
    removed = await controller.remove_food(food_id)
    return {
        "removed": removed,
        "foods": [food.to_dict() for food in controller.foods],
    }


@bp.websocket("/ws")
async def websocket_endpoint():
    """WebSocket endpoint for real-time updates."""
    state = get_app_state()
    await state.ws_manager.connect(websocket._get_current_object())
    try:
        while True:
            # Clients only listen; incoming messages are ignored
            await websocket.receive()
    finally:
        await state.ws_manager.disconnect(websocket._get_current_object())
