"""Time-based cache for generator metadata.

The scaffolding flow only ever caches one document (the Initializr metadata,
keyed by its URL), but the cache exposes a general ``get_or_fetch`` contract
so the fetch function and clock can be swapped in tests.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """A cached payload and the moment it was stored.

    Entries are never mutated; a successful fetch replaces the entry
    wholesale.
    """

    payload: Any = None
    fetched_at: float = 0.0

    def is_fresh(self, now: float, ttl: float) -> bool:
        """Return ``True`` if the payload is present and younger than *ttl*."""
        return bool(self.payload) and (now - self.fetched_at) < ttl


class MetadataCache:
    """In-memory TTL cache with a ``get_or_fetch`` contract.

    Args:
        clock: Callable returning the current time in seconds. Defaults to
            :func:`time.time`.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> CacheEntry:
        """Return the entry for *key* (an empty entry if nothing is cached)."""
        return self._entries.get(key, CacheEntry())

    def is_fresh(self, key: str, ttl: float) -> bool:
        return self.get(key).is_fresh(self._clock(), ttl)

    def store(self, key: str, payload: Any) -> CacheEntry:
        """Replace the entry for *key* with *payload* stamped with the current time."""
        entry = CacheEntry(payload=payload, fetched_at=self._clock())
        self._entries[key] = entry
        return entry

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    async def get_or_fetch(
        self,
        key: str,
        ttl: float,
        fetch_fn: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Return the cached payload for *key*, fetching it when stale.

        If *fetch_fn* raises, the exception propagates and the existing entry
        is left exactly as it was.
        """
        if self.is_fresh(key, ttl):
            logger.debug("Cache hit for %s", key)
            return self.get(key).payload

        logger.debug("Cache miss for %s; fetching", key)
        payload = await fetch_fn()
        self.store(key, payload)
        return payload
