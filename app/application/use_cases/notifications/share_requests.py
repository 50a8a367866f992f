"""Share request lifecycle: creation, responses and follow-up notifications."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Protocol

from app.domain.entities import (
    Notification,
    NotificationStatus,
    NotificationType,
    ShareDecision,
)
from app.domain.exceptions import (
    InvalidNotificationStateError,
    InvalidShareRequestError,
    NotificationNotFoundError,
    UnauthorizedResponderError,
)
from app.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


class NotificationStore(Protocol):
    def get(self, notification_id: int) -> Notification | None: ...

    def create(self, notification: Notification) -> Notification: ...

    def record_response(
        self,
        notification_id: int,
        *,
        status: NotificationStatus,
        responded_at: datetime,
        follow_up: Notification,
    ) -> tuple[Notification, Notification] | None: ...

    def list_for_recipient(self, email: str) -> Sequence[Notification]: ...

    def list_for_sender(self, email: str) -> Sequence[Notification]: ...

    def list_pending_for_recipient(self, email: str) -> Sequence[Notification]: ...


class RealtimeChannel(Protocol):
    def dispatch(self, target_email: str, notification: Notification) -> None: ...


class AccessGrantor(Protocol):
    def grant_access(self, note_id: str, grantee_email: str, owner_email: str) -> bool: ...


@dataclass(frozen=True)
class ShareResponseResult:
    """Outcome of answering a share request."""

    notification: Notification
    follow_up: Notification
    access_granted: bool | None = None


class ShareRequestLifecycle:
    """Create share requests and apply the recipient's answer to them."""

    def __init__(
        self,
        store: NotificationStore,
        channel: RealtimeChannel,
        access_grantor: AccessGrantor,
        *,
        clock: Callable[[], datetime] = now_in_app_timezone,
    ) -> None:
        self._store = store
        self._channel = channel
        self._access_grantor = access_grantor
        self._clock = clock

    def create_share_request(
        self,
        *,
        recipient_email: str,
        sender_email: str,
        note_id: str,
        note_title: str,
    ) -> Notification:
        """Persist a pending share request and push it to its recipient."""

        values = {
            "recipient_email": recipient_email,
            "sender_email": sender_email,
            "note_id": note_id,
            "note_title": note_title,
        }
        cleaned = {name: (value or "").strip() for name, value in values.items()}
        missing = [name for name, value in cleaned.items() if not value]
        if missing:
            raise InvalidShareRequestError(
                "Campos requeridos vacíos: " + ", ".join(missing)
            )

        request = Notification(
            id=None,
            type=NotificationType.SHARE_REQUEST,
            status=NotificationStatus.PENDING,
            created_at=self._clock(),
            **cleaned,
        )
        saved = self._store.create(request)
        logger.info(
            "Share request %s created for note %s from %s to %s",
            saved.id,
            saved.note_id,
            saved.sender_email,
            saved.recipient_email,
        )
        self._dispatch(saved.recipient_email, saved)
        return saved

    def accept(self, notification_id: int, *, acting_user_email: str) -> ShareResponseResult:
        return self.respond(notification_id, acting_user_email, ShareDecision.ACCEPT)

    def reject(self, notification_id: int, *, acting_user_email: str) -> ShareResponseResult:
        return self.respond(notification_id, acting_user_email, ShareDecision.REJECT)

    def respond(
        self,
        notification_id: int,
        acting_user_email: str,
        decision: ShareDecision | str,
    ) -> ShareResponseResult:
        """Apply ``decision`` to a pending share request.

        The pending check and the status write happen as a single conditional
        update, so concurrent answers to the same request resolve to exactly
        one winner. The sender's follow-up notification is stored in the same
        transaction and pushed only after it commits.
        """

        decision = ShareDecision(decision)
        request = self._store.get(notification_id)
        if request is None:
            raise NotificationNotFoundError(notification_id)

        if request.recipient_email != (acting_user_email or "").strip():
            logger.warning(
                "Rejected %s on notification %s by %s: not the recipient",
                decision.value,
                notification_id,
                acting_user_email,
            )
            raise UnauthorizedResponderError(notification_id, acting_user_email)

        if not request.is_pending_share_request:
            logger.warning(
                "Rejected %s on notification %s: status is %s",
                decision.value,
                notification_id,
                request.status.value,
            )
            raise InvalidNotificationStateError(notification_id, request.status.value)

        now = self._clock()
        follow_up = request.follow_up(decision, created_at=now)
        outcome = self._store.record_response(
            notification_id,
            status=decision.resulting_status,
            responded_at=now,
            follow_up=follow_up,
        )
        if outcome is None:
            logger.warning(
                "Notification %s was answered concurrently; %s discarded",
                notification_id,
                decision.value,
            )
            raise InvalidNotificationStateError(notification_id)

        updated, saved_follow_up = outcome
        logger.info(
            "Share request %s %s by %s",
            notification_id,
            updated.status.value.lower(),
            acting_user_email,
        )

        access_granted: bool | None = None
        if decision is ShareDecision.ACCEPT:
            access_granted = self._grant_access(updated)

        self._dispatch(saved_follow_up.recipient_email, saved_follow_up)
        return ShareResponseResult(
            notification=updated,
            follow_up=saved_follow_up,
            access_granted=access_granted,
        )

    def _grant_access(self, accepted: Notification) -> bool:
        # The acceptance is already committed; a grant failure is only reported.
        try:
            return self._access_grantor.grant_access(
                accepted.note_id, accepted.recipient_email, accepted.sender_email
            )
        except Exception:
            logger.exception(
                "Access grant for note %s to %s raised; acceptance kept",
                accepted.note_id,
                accepted.recipient_email,
            )
            return False

    def _dispatch(self, target_email: str, notification: Notification) -> None:
        try:
            self._channel.dispatch(target_email, notification)
        except Exception:
            logger.exception(
                "Realtime dispatch of notification %s to %s failed",
                notification.id,
                target_email,
            )

    def get(self, notification_id: int) -> Notification:
        notification = self._store.get(notification_id)
        if notification is None:
            raise NotificationNotFoundError(notification_id)
        return notification

    def list_for_recipient(self, email: str) -> Sequence[Notification]:
        return self._store.list_for_recipient(email)

    def list_for_sender(self, email: str) -> Sequence[Notification]:
        return self._store.list_for_sender(email)

    def list_pending_for_recipient(self, email: str) -> Sequence[Notification]:
        return self._store.list_pending_for_recipient(email)


__all__ = [
    "AccessGrantor",
    "NotificationStore",
    "RealtimeChannel",
    "ShareRequestLifecycle",
    "ShareResponseResult",
]
