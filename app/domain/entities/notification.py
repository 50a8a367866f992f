"""Domain entity representing a share notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class NotificationType(str, Enum):
    """Kind of event a notification describes."""

    SHARE_REQUEST = "SHARE_REQUEST"
    SHARE_ACCEPTED = "SHARE_ACCEPTED"
    SHARE_REJECTED = "SHARE_REJECTED"


class NotificationStatus(str, Enum):
    """Lifecycle status of a notification.

    ``PENDING`` is the only non-terminal state and only ``SHARE_REQUEST``
    notifications start there. Follow-up notifications are created ``READ``.
    """

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    READ = "READ"


class ShareDecision(str, Enum):
    """Answer given by the recipient of a share request."""

    ACCEPT = "accept"
    REJECT = "reject"

    @property
    def resulting_status(self) -> NotificationStatus:
        if self is ShareDecision.ACCEPT:
            return NotificationStatus.ACCEPTED
        return NotificationStatus.REJECTED

    @property
    def follow_up_type(self) -> NotificationType:
        if self is ShareDecision.ACCEPT:
            return NotificationType.SHARE_ACCEPTED
        return NotificationType.SHARE_REJECTED


@dataclass(frozen=True)
class Notification:
    """Snapshot of a notification addressed to ``recipient_email``."""

    id: int | None
    recipient_email: str
    sender_email: str
    note_id: str
    note_title: str
    type: NotificationType
    status: NotificationStatus
    created_at: datetime | None = None
    responded_at: datetime | None = None
    related_notification_id: int | None = None

    @property
    def is_pending_share_request(self) -> bool:
        return (
            self.type is NotificationType.SHARE_REQUEST
            and self.status is NotificationStatus.PENDING
        )

    def follow_up(self, decision: ShareDecision, *, created_at: datetime) -> "Notification":
        """Build the notification that tells the sender about ``decision``.

        Sender and recipient are swapped and the result is created already
        ``READ``; it never goes through ``PENDING``.
        """

        return Notification(
            id=None,
            recipient_email=self.sender_email,
            sender_email=self.recipient_email,
            note_id=self.note_id,
            note_title=self.note_title,
            type=decision.follow_up_type,
            status=NotificationStatus.READ,
            created_at=created_at,
            responded_at=None,
            related_notification_id=self.id,
        )


__all__ = ["Notification", "NotificationStatus", "NotificationType", "ShareDecision"]
