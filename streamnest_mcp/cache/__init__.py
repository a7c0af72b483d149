"""Response cache for tool results."""

from streamnest_mcp.cache.store import CacheStore, InMemoryCacheStore

__all__ = ["CacheStore", "InMemoryCacheStore"]
