"""API middleware for boardsync."""

from boardsync.api.middleware.logging import LoggingMiddleware

__all__ = [
    "LoggingMiddleware",
]
