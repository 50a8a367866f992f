"""Share request use cases and their collaborator interfaces."""

from .share_requests import (
    AccessGrantor,
    NotificationStore,
    RealtimeChannel,
    ShareRequestLifecycle,
    ShareResponseResult,
)

__all__ = [
    "AccessGrantor",
    "NotificationStore",
    "RealtimeChannel",
    "ShareRequestLifecycle",
    "ShareResponseResult",
]
