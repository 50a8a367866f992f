from .notification import (
    NotificationRead,
    ShareRequestCreate,
    ShareResponseRead,
    ShareResponseRequest,
)

__all__ = [
    "NotificationRead",
    "ShareRequestCreate",
    "ShareResponseRead",
    "ShareResponseRequest",
]
