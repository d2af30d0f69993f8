"""In-memory memoization cache with TTL and source-version invalidation."""

import asyncio
import inspect
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheConfig:
    """Cache configuration."""

    def __init__(
        self,
        ttl_seconds: float = 300.0,
        sweep_interval_seconds: float = 60.0,
    ):
        self.ttl_seconds = ttl_seconds
        self.sweep_interval_seconds = sweep_interval_seconds


@dataclass
class CacheEntry(Generic[T]):
    """A cached payload and the source version it was computed from."""

    payload: T
    inserted_at: float
    source_version: float


class MemoCache:
    """Get-or-compute cache keyed by identifier and source version.

    An entry is served while it is younger than the TTL and its stored source
    version is at least the version the caller passes (for example a file's
    modification stamp). Concurrent loads of the same key share one in-flight
    load instead of calling the loader twice.
    """

    def __init__(
        self,
        config: CacheConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or CacheConfig()
        self._clock = clock
        self._entries: dict[str, CacheEntry[Any]] = {}
        self._pending: dict[str, tuple[float, asyncio.Future]] = {}
        self._sweeper: asyncio.Task | None = None
        self._hits = 0
        self._misses = 0

    def _is_expired(self, entry: CacheEntry[Any], now: float | None = None) -> bool:
        now = self._clock() if now is None else now
        return now - entry.inserted_at >= self.config.ttl_seconds

    def peek(self, key: str, source_version: float) -> Any | None:
        """Return a valid cached payload without loading, or None."""
        entry = self._entries.get(key)
        if entry is None or self._is_expired(entry):
            return None
        if entry.source_version < source_version:
            return None
        return entry.payload

    async def get_or_load(
        self,
        key: str,
        source_version: float,
        loader: Callable[[], Any],
    ) -> Any:
        """Return the cached payload for ``key`` or compute it with ``loader``.

        Args:
            key: Cache key.
            source_version: Monotonic version of the source (e.g. mtime).
            loader: Coroutine function or plain callable producing the payload.

        Returns:
            The cached or freshly loaded payload.
        """
        entry = self._entries.get(key)
        if (
            entry is not None
            and not self._is_expired(entry)
            and entry.source_version >= source_version
        ):
            self._hits += 1
            return entry.payload

        pending = self._pending.get(key)
        if pending is not None and pending[0] >= source_version:
            self._hits += 1
            return await asyncio.shield(pending[1])

        self._misses += 1
        logger.debug(f"Cache miss for {key} (version {source_version})")

        future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._pending[key] = (source_version, future)
        try:
            payload = loader()
            if inspect.isawaitable(payload):
                payload = await payload
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as e:
            future.set_exception(e)
            # Waiters get the exception; mark it retrieved for the owner.
            future.exception()
            raise
        finally:
            owned = self._pending.get(key, (None, None))[1] is future
            if owned:
                del self._pending[key]

        # Invalidated or superseded while loading: return the result unstored.
        if owned:
            self._entries[key] = CacheEntry(
                payload=payload,
                inserted_at=self._clock(),
                source_version=source_version,
            )
        else:
            logger.debug(f"Discarding stale load of {key}")
        future.set_result(payload)
        return payload

    def invalidate(self, key: str) -> bool:
        """Remove one entry; a load of it already in flight will not be stored."""
        self._pending.pop(key, None)
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Remove all entries and disown in-flight loads."""
        self._pending.clear()
        self._entries.clear()

    def sweep(self) -> int:
        """Remove expired entries.

        Returns:
            Number of entries removed.
        """
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if self._is_expired(entry, now)]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug(f"Swept {len(expired)} expired cache entries")
        return len(expired)

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self.config.sweep_interval_seconds)
            self.sweep()

    def start(self) -> None:
        """Start the periodic sweep on the running event loop."""
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.get_running_loop().create_task(self._sweep_loop())

    @property
    def running(self) -> bool:
        return self._sweeper is not None and not self._sweeper.done()

    def dispose(self) -> None:
        """Stop the periodic sweep and drop every entry."""
        if self._sweeper is not None:
            self._sweeper.cancel()
            self._sweeper = None
        self.clear()

    def stats(self) -> dict[str, Any]:
        """Cache statistics for debugging."""
        lookups = self._hits + self._misses
        return {
            "size": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": self._hits / lookups if lookups else 0.0,
        }

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
