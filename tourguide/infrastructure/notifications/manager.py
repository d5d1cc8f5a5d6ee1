"""Connection management helpers for the notification feed websocket."""

from __future__ import annotations

import logging
from typing import Any, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class FeedConnectionManager:
    """Keep track of the websockets subscribed to the emergency feed."""

    def __init__(self) -> None:
        self._connections: Set[WebSocket] = set()

    async def connect(self, websocket: WebSocket) -> None:
        """Accept the websocket connection and register it."""

        await websocket.accept()
        self._connections.add(websocket)

    def disconnect(self, websocket: WebSocket) -> None:
        self._connections.discard(websocket)

    @property
    def active(self) -> int:
        return len(self._connections)

    async def broadcast(self, message: dict[str, Any]) -> None:
        """Send ``message`` to every active connection."""

        for connection in list(self._connections):
            try:
                await connection.send_json(message)
            except Exception:
                logger.info("Dropping feed websocket after failed send")
                self.disconnect(connection)


__all__ = ["FeedConnectionManager"]
