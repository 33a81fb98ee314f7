"""Live pot feed pushed to WebSocket clients.

Every message is a JSON object ``{"type", "data", "timestamp"}``. Types:

- ``temp_update``: one reading per clock update that applied ticks
- ``boil_update``: the pot started or stopped boiling
- ``pot_update``: heater, liquid, food or reset change
- ``error``: the simulation halted
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import asdict
from typing import Any

from quart import Websocket

from .schemas import WebSocketMessage

logger = logging.getLogger(__name__)


def encode_message(message_type: str, data: dict[str, Any]) -> str:
    """Serialize one feed message to JSON text."""
    payload = asdict(WebSocketMessage(type=message_type, data=data))
    payload["timestamp"] = payload["timestamp"].isoformat()
    return json.dumps(payload)


class WebSocketManager:
    """Fan-out of pot events to every connected viewer.

    Clients only listen. A client whose send fails is dropped on the spot.
    """

    def __init__(self) -> None:
        self._clients: list[Websocket] = []
        self._lock = asyncio.Lock()

    @property
    def connection_count(self) -> int:
        return len(self._clients)

    async def connect(self, websocket: Websocket) -> None:
        async with self._lock:
            self._clients.append(websocket)
            count = len(self._clients)
        logger.info("Viewer joined (%d watching)", count)

    async def disconnect(self, websocket: Websocket) -> None:
        """Forget a client. Unknown clients are ignored."""
        async with self._lock:
            if websocket not in self._clients:
                return
            self._clients.remove(websocket)
            count = len(self._clients)
        logger.info("Viewer left (%d watching)", count)

    async def broadcast(self, message_type: str, data: dict[str, Any]) -> None:
        """Send one message to every client, dropping those that fail."""
        if not self._clients:
            return

        text = encode_message(message_type, data)
        async with self._lock:
            dead = []
            for client in self._clients:
                try:
                    await client.send(text)
                except Exception as e:
                    logger.warning("Dropping viewer after failed send: %s", e)
                    dead.append(client)
            for client in dead:
                self._clients.remove(client)

    async def broadcast_temp_update(
        self,
        temperature: float,
        volume: float,
        is_boiling: bool,
        simulated_time_seconds: float | None = None,
    ) -> None:
        data: dict[str, Any] = {
            "temperature": temperature,
            "volume": volume,
            "is_boiling": is_boiling,
        }
        if simulated_time_seconds is not None:
            data["simulated_time_seconds"] = simulated_time_seconds
        await self.broadcast("temp_update", data)

    async def broadcast_boil_update(
        self,
        is_boiling: bool,
        temperature: float,
        volume: float,
    ) -> None:
        await self.broadcast("boil_update", {
            "is_boiling": is_boiling,
            "temperature": temperature,
            "volume": volume,
        })

    async def broadcast_pot_update(
        self,
        change: str,
        data: dict[str, Any] | None = None,
    ) -> None:
        """Publish a pot mutation; ``change`` is the event name, e.g. FOOD_ADDED."""
        await self.broadcast("pot_update", {"change": change, **(data or {})})

    async def broadcast_error(self, message: str, error_type: str | None = None) -> None:
        data: dict[str, Any] = {"message": message}
        if error_type:
            data["error_type"] = error_type
        await self.broadcast("error", data)
