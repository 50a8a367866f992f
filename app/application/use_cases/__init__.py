"""Aggregate application use cases."""

from .notifications import ShareRequestLifecycle, ShareResponseResult

__all__ = [
    "ShareRequestLifecycle",
    "ShareResponseResult",
]
