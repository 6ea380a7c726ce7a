"""
Caching Layer.

Provides the bounded cache core:
    - BoundedCache: LRU eviction with lazy TTL expiration
    - CacheRecord: Stored value with its bookkeeping
    - CacheStats: Statistics snapshot
    - MISSING: Marker returned for absent keys
"""

from bounded_cache.caching.bounded_cache import (
    MISSING,
    BoundedCache,
    CacheRecord,
    CacheStats,
    EvictionHook,
    RemovalCause,
)

__all__ = [
    "MISSING",
    "BoundedCache",
    "CacheRecord",
    "CacheStats",
    "EvictionHook",
    "RemovalCause",
]
