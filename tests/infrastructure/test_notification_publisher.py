"""Tests for best-effort realtime delivery."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from app.domain.entities import Notification, NotificationStatus, NotificationType
from app.infrastructure.notifications import (
    NotificationConnectionManager,
    NotificationPublisher,
    serialize_notification,
)

NOTIFICATION = Notification(
    id=7,
    recipient_email="bob@x.com",
    sender_email="alice@x.com",
    note_id="n1",
    note_title="Trip",
    type=NotificationType.SHARE_REQUEST,
    status=NotificationStatus.PENDING,
    created_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
)


class FakeWebSocket:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.messages: list[dict] = []

    async def accept(self) -> None:
        return None

    async def send_json(self, message: dict) -> None:
        if self.fail:
            raise RuntimeError("connection reset")
        self.messages.append(message)


class ExplodingManager(NotificationConnectionManager):
    def is_connected(self, email: str) -> bool:
        return True

    async def send_to_user(self, email, message):
        raise RuntimeError("transport down")


class RecordingManager(NotificationConnectionManager):
    def __init__(self) -> None:
        super().__init__()
        self.sent: list[tuple[str, dict]] = []

    def is_connected(self, email: str) -> bool:
        return True

    async def send_to_user(self, email, message):
        self.sent.append((email, message))
        return 1


def test_serialize_notification_uses_plain_json_values() -> None:
    payload = serialize_notification(NOTIFICATION)

    assert payload["type"] == "SHARE_REQUEST"
    assert payload["status"] == "PENDING"
    assert payload["created_at"] == "2024-05-01T12:00:00+00:00"
    assert payload["responded_at"] is None


def test_dispatch_delivers_to_every_connection_of_the_target() -> None:
    manager = NotificationConnectionManager()
    publisher = NotificationPublisher(manager)
    first, second, other = FakeWebSocket(), FakeWebSocket(), FakeWebSocket()

    async def scenario() -> None:
        await manager.connect("bob@x.com", first)
        await manager.connect("bob@x.com", second)
        await manager.connect("carol@x.com", other)
        publisher.dispatch("bob@x.com", NOTIFICATION)
        await asyncio.sleep(0.01)

    asyncio.run(scenario())

    expected = {"type": "notification", "data": serialize_notification(NOTIFICATION)}
    assert first.messages == [expected]
    assert second.messages == [expected]
    assert other.messages == []


def test_broken_connections_are_dropped() -> None:
    manager = NotificationConnectionManager()
    broken, healthy = FakeWebSocket(fail=True), FakeWebSocket()

    async def scenario() -> int:
        await manager.connect("bob@x.com", broken)
        await manager.connect("bob@x.com", healthy)
        return await manager.send_to_user("bob@x.com", {"type": "notification"})

    assert asyncio.run(scenario()) == 1
    assert manager.is_connected("bob@x.com")
    assert asyncio.run(manager.send_to_user("nobody@x.com", {"type": "notification"})) == 0


def test_transport_errors_never_reach_the_caller() -> None:
    publisher = NotificationPublisher(ExplodingManager())

    async def scenario() -> None:
        publisher.dispatch("bob@x.com", NOTIFICATION)
        await asyncio.sleep(0.01)

    asyncio.run(scenario())


def test_dispatch_without_event_loop_is_skipped() -> None:
    manager = RecordingManager()
    publisher = NotificationPublisher(manager)

    publisher.dispatch("bob@x.com", NOTIFICATION)

    assert publisher._pending == set()
    assert manager.sent == []


def test_dispatch_to_disconnected_user_schedules_nothing() -> None:
    manager = NotificationConnectionManager()
    publisher = NotificationPublisher(manager)

    async def scenario() -> None:
        publisher.dispatch("bob@x.com", NOTIFICATION)
        assert publisher._pending == set()

    asyncio.run(scenario())
