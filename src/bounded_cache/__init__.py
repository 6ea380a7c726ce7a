"""
bounded_cache - Hybrid LRU/TTL Cache.

A bounded associative store for memoizing expensive objects such as
compiled templates and route lookups.

Features:
    - Entry-count limit with least-recently-used eviction
    - Idle-time TTL, expired lazily on access
    - Eviction hook notified of every removed entry
    - Hit/miss accounting
    - YAML/Pydantic configuration of named caches

Example:
    >>> from bounded_cache import BoundedCache, MISSING
    >>> evicted = []
    >>> cache = BoundedCache(max_count=2, eviction_hook=lambda k, v: evicted.append(k))
    >>> for key, value in [("a", 1), ("b", 2), ("c", 3)]:
    ...     _ = cache.set(key, value)
    >>> evicted
    ['a']
"""

import logging
from typing import Union

from bounded_cache.caching import (
    MISSING,
    BoundedCache,
    CacheRecord,
    CacheStats,
    EvictionHook,
    RemovalCause,
)
from bounded_cache.errors import BoundedCacheError, InvalidConfiguration

__version__ = "0.1.0"


def configure_logging(
    level: Union[int, str] = logging.INFO,
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
) -> None:
    """
    Configure logging for bounded_cache.

    Call this at application startup to see log messages.
    By default, only WARNING and above are visible.

    Args:
        level: Logging level (default: INFO), as a number or a name
        format: Log message format

    Example:
        >>> import bounded_cache
        >>> bounded_cache.configure_logging(logging.DEBUG)
    """
    logging.basicConfig(
        level=level,
        format=format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("bounded_cache").setLevel(level)


__all__ = [
    "MISSING",
    "BoundedCache",
    "BoundedCacheError",
    "CacheRecord",
    "CacheStats",
    "EvictionHook",
    "InvalidConfiguration",
    "RemovalCause",
    "configure_logging",
]
