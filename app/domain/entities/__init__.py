"""Domain entities exposed by the application."""

from .notification import (
    Notification,
    NotificationStatus,
    NotificationType,
    ShareDecision,
)

__all__ = [
    "Notification",
    "NotificationStatus",
    "NotificationType",
    "ShareDecision",
]
