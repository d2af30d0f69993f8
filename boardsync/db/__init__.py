"""Caching layer."""

from boardsync.db.cache import CacheConfig, CacheEntry, MemoCache

__all__ = [
    "CacheConfig",
    "CacheEntry",
    "MemoCache",
]
