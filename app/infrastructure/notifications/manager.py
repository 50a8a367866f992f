"""Connection management helpers for notification websockets."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, DefaultDict, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class NotificationConnectionManager:
    """Manage active websocket connections grouped by user email."""

    def __init__(self) -> None:
        self._connections: DefaultDict[str, Set[WebSocket]] = defaultdict(set)

    async def connect(self, email: str, websocket: WebSocket) -> None:
        """Accept the websocket connection and register it for ``email``."""

        await websocket.accept()
        self._connections[email].add(websocket)
        logger.debug("Websocket connected for %s (%d open)", email, len(self._connections[email]))

    def disconnect(self, email: str, websocket: WebSocket) -> None:
        """Remove ``websocket`` from the pool for ``email``."""

        connections = self._connections.get(email)
        if connections is None:
            return
        connections.discard(websocket)
        if not connections:
            self._connections.pop(email, None)

    def is_connected(self, email: str) -> bool:
        return bool(self._connections.get(email))

    async def send_to_user(self, email: str, message: dict[str, Any]) -> int:
        """Send ``message`` to every live connection for ``email``.

        Returns the number of connections that received it; ``0`` means the
        message was not delivered.
        """

        delivered = 0
        for connection in list(self._connections.get(email, set())):
            try:
                await connection.send_json(message)
            except Exception as exc:
                logger.warning("Dropping websocket for %s after send failure: %s", email, exc)
                self.disconnect(email, connection)
            else:
                delivered += 1
        return delivered


notification_manager = NotificationConnectionManager()


__all__ = ["NotificationConnectionManager", "notification_manager"]
