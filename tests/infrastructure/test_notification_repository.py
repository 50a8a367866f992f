"""Tests for the SQLAlchemy notification repository."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from app.domain.entities import (
    Notification,
    NotificationStatus,
    NotificationType,
    ShareDecision,
)
from app.domain.exceptions import StoreUnavailableError
from app.infrastructure.repositories import NotificationRepository

CREATED_AT = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)
RESPONDED_AT = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)


def _pending_request() -> Notification:
    return Notification(
        id=None,
        recipient_email="bob@x.com",
        sender_email="alice@x.com",
        note_id="n1",
        note_title="Trip",
        type=NotificationType.SHARE_REQUEST,
        status=NotificationStatus.PENDING,
        created_at=CREATED_AT,
    )


def test_record_response_applies_only_once(session) -> None:
    repository = NotificationRepository(session)
    request = repository.create(_pending_request())
    follow_up = request.follow_up(ShareDecision.ACCEPT, created_at=RESPONDED_AT)

    first = repository.record_response(
        request.id,
        status=NotificationStatus.ACCEPTED,
        responded_at=RESPONDED_AT,
        follow_up=follow_up,
    )
    second = repository.record_response(
        request.id,
        status=NotificationStatus.REJECTED,
        responded_at=RESPONDED_AT,
        follow_up=request.follow_up(ShareDecision.REJECT, created_at=RESPONDED_AT),
    )

    assert first is not None
    updated, saved_follow_up = first
    assert updated.status is NotificationStatus.ACCEPTED
    assert updated.responded_at == RESPONDED_AT
    assert saved_follow_up.id is not None
    assert saved_follow_up.related_notification_id == request.id
    assert second is None
    assert repository.get(request.id).status is NotificationStatus.ACCEPTED
    assert len(repository.list_for_recipient("alice@x.com")) == 1


def test_failed_follow_up_insert_rolls_back_status_change(session) -> None:
    repository = NotificationRepository(session)
    request = repository.create(_pending_request())
    broken_follow_up = Notification(
        id=None,
        recipient_email="alice@x.com",
        sender_email="bob@x.com",
        note_id="n1",
        note_title=None,
        type=NotificationType.SHARE_ACCEPTED,
        status=NotificationStatus.READ,
        created_at=RESPONDED_AT,
    )

    with pytest.raises(StoreUnavailableError):
        repository.record_response(
            request.id,
            status=NotificationStatus.ACCEPTED,
            responded_at=RESPONDED_AT,
            follow_up=broken_follow_up,
        )

    reloaded = repository.get(request.id)
    assert reloaded.status is NotificationStatus.PENDING
    assert reloaded.responded_at is None
    assert repository.list_for_recipient("alice@x.com") == []


def test_get_returns_none_for_unknown_id(session) -> None:
    assert NotificationRepository(session).get(42) is None
