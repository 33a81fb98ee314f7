"""Quart application for driving a hot pot session."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from quart import Quart

from ..config import load_config
from ..core.controller import HotPotController
from ..core.events import Event, EventType
from .routes import pot, simulator
from .websocket import WebSocketManager

logger = logging.getLogger(__name__)

_POT_CHANGES = {
    EventType.HEATER_CHANGED,
    EventType.LIQUID_ADDED,
    EventType.FOOD_ADDED,
    EventType.FOOD_REMOVED,
    EventType.RESET,
}


@dataclass
class AppState:
    """Application state container."""

    controller: Optional[HotPotController] = None
    ws_manager: WebSocketManager = field(default_factory=WebSocketManager)


# The one session served by this process
app_state = AppState()


async def _event_handler(event: Event) -> None:
    """Relay clock and controller events to WebSocket clients."""
    data = event.data or {}

    if event.type == EventType.TEMP_READING:
        await app_state.ws_manager.broadcast_temp_update(
            temperature=data.get("temperature", 0.0),
            volume=data.get("volume", 0.0),
            is_boiling=data.get("is_boiling", False),
            simulated_time_seconds=data.get("simulated_time_seconds"),
        )

    elif event.type in (EventType.BOIL_STARTED, EventType.BOIL_STOPPED):
        await app_state.ws_manager.broadcast_boil_update(
            is_boiling=event.type == EventType.BOIL_STARTED,
            temperature=data.get("temperature", 0.0),
            volume=data.get("volume", 0.0),
        )

    elif event.type in _POT_CHANGES:
        await app_state.ws_manager.broadcast_pot_update(event.type.name, data)

    elif event.type == EventType.ERROR:
        await app_state.ws_manager.broadcast_error(
            message=data.get("message", "Unknown error"),
            error_type=data.get("error_type"),
        )


def create_app() -> Quart:
    """Create and configure the Quart application."""
    app = Quart(__name__)

    app.register_blueprint(pot.bp, url_prefix="/api/pot")
    app.register_blueprint(simulator.bp, url_prefix="/api/simulator")

    @app.before_serving
    async def startup() -> None:
        logger.info("Starting hot pot API")
        cfg = load_config()
        app_state.controller = HotPotController(config=cfg)
        app_state.controller.add_event_listener(_event_handler)
        await app_state.controller.start()
        logger.info("Hot pot API started")

    @app.after_serving
    async def shutdown() -> None:
        logger.info("Shutting down hot pot API")
        if app_state.controller is not None:
            await app_state.controller.stop()
        logger.info("Hot pot API shutdown complete")

    @app.route("/health")
    async def health_check():
        """Health check endpoint."""
        controller = app_state.controller
        return {
            "status": "healthy",
            "controller_running": controller is not None,
            "clock_running": controller is not None and controller.clock.is_running,
            "websocket_connections": app_state.ws_manager.connection_count,
        }

    return app


# Create the app instance
app = create_app()
