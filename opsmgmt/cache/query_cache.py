"""Request cache keyed by entity type plus query parameters.

Writes never patch cached data: a mutation invalidates every entry under a
key prefix and the next read goes back to the server.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

QueryKey = tuple[Hashable, ...]

DEFAULT_STALE_SECONDS = 300.0


def freeze(value: Any) -> Hashable:
    """Hashable, order-independent rendering of query parameters. None values are dropped."""
    if isinstance(value, dict):
        return tuple(sorted((str(k), freeze(v)) for k, v in value.items() if v is not None))
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(freeze(v) for v in value)
    return value


def query_key(name: str, *parts: Any, params: dict[str, Any] | None = None) -> QueryKey:
    """Build a cache key such as ``("purchase-orders", (("status", "draft"),))``."""
    key: tuple[Hashable, ...] = (name, *(freeze(p) for p in parts))
    if params is not None:
        key = (*key, freeze(params))
    return key


def matches(key: QueryKey, prefix: QueryKey) -> bool:
    return key[: len(prefix)] == prefix


@dataclass(slots=True)
class _Entry:
    value: Any
    fetched_at: float
    invalidated: bool = False


class QueryCache:
    """In-memory query cache with per-key request de-duplication."""

    def __init__(
        self,
        stale_seconds: float = DEFAULT_STALE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._stale_seconds = stale_seconds
        self._clock = clock
        self._entries: dict[QueryKey, _Entry] = {}
        self._inflight: dict[QueryKey, asyncio.Task[Any]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    async def fetch(
        self,
        key: QueryKey,
        loader: Callable[[], Awaitable[Any]],
        stale_seconds: float | None = None,
    ) -> Any:
        """Return the cached value for ``key``, loading it when missing or stale."""
        entry = self._entries.get(key)
        if entry is not None and not self._entry_is_stale(entry, stale_seconds):
            logger.debug("query_cache_hit", key=key)
            return entry.value

        task = self._inflight.get(key)
        if task is None:
            logger.debug("query_cache_miss", key=key, stale=entry is not None)
            task = asyncio.ensure_future(self._load(key, loader))
            self._inflight[key] = task
        return await asyncio.shield(task)

    def get(self, key: QueryKey) -> Any | None:
        entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def set(self, key: QueryKey, value: Any) -> None:
        self._entries[key] = _Entry(value=value, fetched_at=self._clock())

    def is_stale(self, key: QueryKey, stale_seconds: float | None = None) -> bool:
        entry = self._entries.get(key)
        return entry is None or self._entry_is_stale(entry, stale_seconds)

    def invalidate(self, prefix: QueryKey) -> int:
        """Mark every entry under ``prefix`` stale. Returns the number of entries affected."""
        count = 0
        for key, entry in self._entries.items():
            if matches(key, prefix) and not entry.invalidated:
                entry.invalidated = True
                count += 1
        # Loads already running for these keys must not satisfy later reads
        for key in [k for k in self._inflight if matches(k, prefix)]:
            del self._inflight[key]
        logger.debug("query_invalidated", prefix=prefix, entries=count)
        return count

    def remove(self, prefix: QueryKey) -> None:
        for key in [k for k in self._entries if matches(k, prefix)]:
            del self._entries[key]

    def clear(self) -> None:
        self._entries.clear()
        self._inflight.clear()
        logger.debug("query_cache_cleared")

    def _entry_is_stale(self, entry: _Entry, stale_seconds: float | None) -> bool:
        if entry.invalidated:
            return True
        limit = self._stale_seconds if stale_seconds is None else stale_seconds
        return self._clock() - entry.fetched_at >= limit

    async def _load(self, key: QueryKey, loader: Callable[[], Awaitable[Any]]) -> Any:
        me = asyncio.current_task()
        try:
            value = await loader()
        finally:
            superseded = self._inflight.get(key) is not me
            if not superseded:
                del self._inflight[key]
        if not superseded:
            self._entries[key] = _Entry(value=value, fetched_at=self._clock())
        else:
            current = self._entries.get(key)
            if current is None or current.invalidated:
                self._entries[key] = _Entry(value=value, fetched_at=self._clock(), invalidated=True)
        return value
