"""Key-value cache with per-entry expiration."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Callable

logger = logging.getLogger(__name__)


class CacheStore(ABC):
    """Async key-value store whose entries expire after a TTL.

    Values are opaque strings. ``put`` always overwrites; there is no
    compare-and-set, so two concurrent writers for a key resolve to
    whichever lands last.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the value for key, or None if absent or expired."""

    @abstractmethod
    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store value under key for ttl_seconds."""


class InMemoryCacheStore(CacheStore):
    """Process-local TTL cache."""

    def __init__(
        self,
        namespace: str = "",
        clock: Callable[[], float] = time.monotonic,
    ):
        self.namespace = namespace
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}" if self.namespace else key

    async def get(self, key: str) -> str | None:
        full_key = self._key(key)
        entry = self._entries.get(full_key)
        if entry is None:
            return None

        value, expires_at = entry
        if self._clock() >= expires_at:
            # Expired, remove it
            self._entries.pop(full_key, None)
            return None
        return value

    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        expires_at = self._clock() + ttl_seconds
        self._entries[self._key(key)] = (value, expires_at)
        logger.debug(f"Cache set: {key} (TTL: {ttl_seconds}s)")

    def clear(self) -> None:
        """Clear all cached values."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
