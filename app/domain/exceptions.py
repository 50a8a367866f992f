"""Errors raised by the share notification use cases."""

from __future__ import annotations


class ShareNotificationError(ValueError):
    """Base class for rejections caused by the caller's request."""


class InvalidShareRequestError(ShareNotificationError):
    """A share request is missing one of its required values."""


class NotificationNotFoundError(ShareNotificationError):
    """No notification exists with the requested identifier."""

    def __init__(self, notification_id: int) -> None:
        super().__init__("Notificación no encontrada")
        self.notification_id = notification_id


class UnauthorizedResponderError(ShareNotificationError):
    """Only the recipient of a share request may answer it."""

    def __init__(self, notification_id: int, acting_user_email: str) -> None:
        super().__init__("Solo el destinatario puede responder esta solicitud")
        self.notification_id = notification_id
        self.acting_user_email = acting_user_email


class InvalidNotificationStateError(ShareNotificationError):
    """The notification is no longer a pending share request."""

    def __init__(self, notification_id: int, status: str | None = None) -> None:
        super().__init__("La solicitud ya fue respondida")
        self.notification_id = notification_id
        self.status = status


class StoreUnavailableError(RuntimeError):
    """The notification store could not complete the operation."""


__all__ = [
    "ShareNotificationError",
    "InvalidShareRequestError",
    "NotificationNotFoundError",
    "UnauthorizedResponderError",
    "InvalidNotificationStateError",
    "StoreUnavailableError",
]
