"""Utility helpers to push notifications to websocket subscribers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from anyio import from_thread

from app.domain.entities import Notification

from .manager import NotificationConnectionManager, notification_manager

logger = logging.getLogger(__name__)


class NotificationPublisher:
    """Serialize notifications and schedule their delivery without waiting on it."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager
        self._pending: set[asyncio.Task[None]] = set()

    def dispatch(self, target_email: str, notification: Notification) -> None:
        """Schedule ``notification`` to be pushed to ``target_email``.

        Delivery is best effort: it runs on the event loop after this call
        returns and its failures are only logged.
        """

        if not self._manager.is_connected(target_email):
            logger.debug("No live connection for %s; notification left in store", target_email)
            return

        message = {"type": "notification", "data": serialize_notification(notification)}
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run_sync(self._spawn, target_email, message)
            except RuntimeError:
                logger.debug(
                    "No event loop available; skipping realtime delivery to %s",
                    target_email,
                )
        else:
            self._spawn(target_email, message)

    def _spawn(self, target_email: str, message: dict[str, Any]) -> None:
        task = asyncio.get_running_loop().create_task(
            self._deliver(target_email, message)
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, target_email: str, message: dict[str, Any]) -> None:
        try:
            delivered = await self._manager.send_to_user(target_email, message)
        except Exception:
            logger.exception("Realtime delivery to %s failed", target_email)
            return
        if not delivered:
            logger.debug("No live connection for %s; notification left in store", target_email)


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    return {
        "id": notification.id,
        "recipient_email": notification.recipient_email,
        "sender_email": notification.sender_email,
        "note_id": notification.note_id,
        "note_title": notification.note_title,
        "type": notification.type.value,
        "status": notification.status.value,
        "created_at": notification.created_at.isoformat()
        if notification.created_at
        else None,
        "responded_at": notification.responded_at.isoformat()
        if notification.responded_at
        else None,
        "related_notification_id": notification.related_notification_id,
    }


notification_publisher = NotificationPublisher(notification_manager)


__all__ = [
    "NotificationPublisher",
    "notification_publisher",
    "serialize_notification",
]
