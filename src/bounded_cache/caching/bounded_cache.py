"""
Bounded Cache - LRU Eviction with Lazy TTL Expiration.

An associative store of bounded capacity used to memoize expensive objects
(compiled templates, route lookups) behind a uniform key/value interface.

Design Notes:
    - Entry-count limit with least-recently-used eviction
    - Idle-time TTL, swept lazily at the start of get() and set()
    - Eviction hook fired for every removed entry, whatever the cause
    - Hit/miss counters for every read attempt
    - Single-threaded: callers sharing an instance across threads must
      wrap every call in one exclusive lock

Recency Structure:
    Records live in an OrderedDict, which is a hash map threaded with a
    doubly-linked list. The record mapping and the recency sequence are
    therefore the same object: their key sets cannot diverge, a touch is
    ``move_to_end`` and the eviction candidate is the first item, both O(1).

Eviction Hook Contract:
    The hook is called synchronously, in-line with the triggering
    operation, with ``(key, value)``. It must not call back into the same
    cache instance. An exception raised by the hook propagates to the
    caller and the entry being removed stays resident.
"""

from __future__ import annotations

import hashlib
import logging
import numbers
import time
from collections import OrderedDict
from dataclasses import dataclass, replace
from datetime import timedelta
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Hashable,
    Iterator,
    List,
    Optional,
    Protocol,
    Tuple,
    TypeVar,
    Union,
)

from bounded_cache.errors import InvalidConfiguration

if TYPE_CHECKING:
    from bounded_cache.config.models import CacheSettings

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], float]
Duration = Union[int, float, timedelta]


class _Missing:
    """Type of the absent-key marker."""

    _instance: Optional[_Missing] = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class EvictionHook(Protocol):
    """Callback notified of every entry leaving the cache."""

    def __call__(self, key: Hashable, value: Any) -> None:
        ...


class RemovalCause(str, Enum):
    """Why an entry left the cache."""

    DELETED = "DELETED"
    REPLACED = "REPLACED"
    EVICTED = "EVICTED"
    EXPIRED = "EXPIRED"
    CLEARED = "CLEARED"


@dataclass
class CacheRecord:
    """A stored value with its bookkeeping."""

    value: Any
    # Reserved for size-based limits; not derived from the value, not enforced.
    size: int = 0
    last_access_time: float = 0.0


@dataclass
class CacheStats:
    """Point-in-time cache statistics."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0
    removals: int = 0
    current_entries: int = 0
    max_count: Optional[int] = None
    ttl_seconds: Optional[float] = None

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0


def _validate_max_count(max_count: Optional[int]) -> Optional[int]:
    if max_count is None:
        return None
    if isinstance(max_count, bool) or not isinstance(max_count, numbers.Integral):
        raise InvalidConfiguration("max_count", max_count, "must be an integer")
    if max_count <= 0:
        raise InvalidConfiguration("max_count", max_count, "must be positive")
    return int(max_count)


def _validate_ttl(ttl: Optional[Duration]) -> Optional[float]:
    if ttl is None:
        return None
    if isinstance(ttl, timedelta):
        seconds = ttl.total_seconds()
    elif isinstance(ttl, bool) or not isinstance(ttl, numbers.Real):
        raise InvalidConfiguration("ttl", ttl, "must be a number of seconds or a timedelta")
    else:
        try:
            seconds = float(ttl)
        except OverflowError:
            raise InvalidConfiguration("ttl", ttl, "out of range") from None
    # NaN fails this comparison too
    if not seconds > 0:
        raise InvalidConfiguration("ttl", ttl, "must be a positive duration")
    return seconds


class BoundedCache:
    """
    Associative store with LRU eviction and idle-time expiration.

    Features:
        - Optional maximum entry count (LRU eviction on overflow)
        - Optional TTL measured from the last read or write of an entry
        - Optional eviction hook, fired on delete, overwrite, eviction,
          expiration and clear
        - Hit/miss accounting

    Configuration is fixed for the lifetime of the instance.

    Example:
        >>> cache = BoundedCache(max_count=2)
        >>> cache.set("a", 1)
        1
        >>> cache.get("b") is MISSING
        True
    """

    DEFAULT_RECORD_SIZE = 0

    def __init__(
        self,
        max_count: Optional[int] = None,
        ttl: Optional[Duration] = None,
        eviction_hook: Optional[EvictionHook] = None,
        clock: Clock = time.time,
        log_access: bool = False,
    ) -> None:
        """
        Initialize the cache.

        Args:
            max_count: Maximum number of entries (unbounded if None)
            ttl: Idle time-to-live in seconds or as a timedelta
                (no expiration if None)
            eviction_hook: Called with (key, value) for every removed entry
            clock: Returns the current time in seconds
            log_access: Log HIT/MISS/SET lines at DEBUG level

        Raises:
            InvalidConfiguration: If max_count or ttl is not positive, or if
                eviction_hook or clock is not callable
        """
        max_count = _validate_max_count(max_count)
        ttl_seconds = _validate_ttl(ttl)
        if eviction_hook is not None and not callable(eviction_hook):
            raise InvalidConfiguration("eviction_hook", eviction_hook, "must be callable")
        if not callable(clock):
            raise InvalidConfiguration("clock", clock, "must be callable")

        self._max_count = max_count
        self._ttl = ttl_seconds
        self._eviction_hook = eviction_hook
        self._clock = clock
        self._log_access = log_access

        self._records: OrderedDict[Hashable, CacheRecord] = OrderedDict()

        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expirations = 0
        self._removals = 0

        logger.debug(
            f"BoundedCache created (max_count={max_count}, ttl={ttl_seconds}, "
            f"hook={'yes' if eviction_hook else 'no'})"
        )

    @classmethod
    def from_settings(
        cls,
        settings: CacheSettings,
        eviction_hook: Optional[EvictionHook] = None,
        clock: Clock = time.time,
    ) -> BoundedCache:
        """
        Create a cache from validated settings.

        Args:
            settings: Cache settings model
            eviction_hook: Optional eviction hook
            clock: Returns the current time in seconds

        Returns:
            New, empty cache
        """
        return cls(
            max_count=settings.max_count,
            ttl=settings.ttl_seconds,
            eviction_hook=eviction_hook,
            clock=clock,
            log_access=settings.log_access,
        )

    @property
    def max_count(self) -> Optional[int]:
        return self._max_count

    @property
    def ttl(self) -> Optional[float]:
        """TTL in seconds, or None."""
        return self._ttl

    @property
    def hits(self) -> int:
        return self._hits

    @property
    def misses(self) -> int:
        return self._misses

    def get(self, key: Hashable, default: Any = MISSING) -> Any:
        """
        Get a value, marking it most recently used.

        Expired entries are swept first, so the sweep's hook calls happen
        before this call's hit/miss is counted.

        Args:
            key: Cache key
            default: Returned on a miss

        Returns:
            Cached value, or ``default`` (MISSING unless given) on a miss
        """
        self.expire()

        record = self._records.get(key)
        if record is None:
            self._misses += 1
            if self._log_access:
                logger.debug(f"Cache MISS: {key!r}")
            return default

        record.last_access_time = self._clock()
        self._records.move_to_end(key)

        self._hits += 1
        if self._log_access:
            logger.debug(f"Cache HIT: {key!r}")
        return record.value

    def set(self, key: Hashable, value: T) -> T:
        """
        Store a value as the most recently used entry.

        An existing entry for ``key`` is removed first (the hook sees the old
        value). If the cache is then full, the least recently used entry is
        evicted.

        Args:
            key: Cache key
            value: Value to cache

        Returns:
            The stored value
        """
        self.expire()

        if key in self._records:
            self._remove(key, RemovalCause.REPLACED)

        if self._max_count is not None and len(self._records) == self._max_count:
            lru_key = next(iter(self._records))
            self._remove(lru_key, RemovalCause.EVICTED)

        self._records[key] = CacheRecord(
            value=value,
            size=self.DEFAULT_RECORD_SIZE,
            last_access_time=self._clock(),
        )

        if self._log_access:
            logger.debug(f"Cache SET: {key!r}")
        return value

    def delete(self, key: Hashable, default: Any = MISSING) -> Any:
        """
        Remove an entry.

        Args:
            key: Cache key
            default: Returned if the key is absent

        Returns:
            The removed value, or ``default`` if absent (no hook call then)
        """
        if key not in self._records:
            return default
        return self._remove(key, RemovalCause.DELETED)

    def clear(self) -> None:
        """Remove all entries, calling the hook once per entry."""
        count = 0
        for key in list(self._records):
            self._remove(key, RemovalCause.CLEARED)
            count += 1
        logger.info(f"Cache CLEARED ({count} entries)")

    invalidate_all = clear

    def expire(self) -> int:
        """
        Remove entries idle for at least the TTL.

        Scans from the least recently used end and stops at the first fresh
        entry; recency order makes staleness monotonic along the sequence.

        Returns:
            Number of entries expired
        """
        if self._ttl is None:
            return 0

        now = self._clock()
        expired = 0
        while self._records:
            key, record = next(iter(self._records.items()))
            if record.last_access_time + self._ttl > now:
                break
            self._remove(key, RemovalCause.EXPIRED)
            expired += 1
        return expired

    def get_or_compute(self, key: Hashable, compute_fn: Callable[[], T]) -> T:
        """
        Get from cache or compute and store.

        A computed None is cached like any other value.

        Args:
            key: Cache key
            compute_fn: Function to compute value if not cached

        Returns:
            Cached or computed value
        """
        cached = self.get(key)
        if cached is not MISSING:
            return cached
        return self.set(key, compute_fn())

    def get_stats(self) -> CacheStats:
        """Get cache statistics."""
        return CacheStats(
            hits=self._hits,
            misses=self._misses,
            evictions=self._evictions,
            expirations=self._expirations,
            removals=self._removals,
            current_entries=len(self._records),
            max_count=self._max_count,
            ttl_seconds=self._ttl,
        )

    def keys(self) -> List[Hashable]:
        """Keys from least to most recently used."""
        return list(self._records)

    def __iter__(self) -> Iterator[Tuple[Hashable, CacheRecord]]:
        """
        Iterate ``(key, record)`` pairs, least recently used first.

        Records are copies: changing them does not affect the cache. Does
        not touch recency or counters. The cache must not be mutated while
        an iteration is in progress.
        """
        for key, record in self._records.items():
            yield key, replace(record)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def __repr__(self) -> str:
        return (
            f"BoundedCache(entries={len(self._records)}, "
            f"max_count={self._max_count}, ttl={self._ttl})"
        )

    def _remove(self, key: Hashable, cause: RemovalCause) -> Any:
        """Notify the hook, then drop the entry."""
        record = self._records[key]

        if self._eviction_hook is not None:
            self._eviction_hook(key, record.value)
        del self._records[key]

        if cause is RemovalCause.EVICTED:
            self._evictions += 1
        elif cause is RemovalCause.EXPIRED:
            self._expirations += 1
        else:
            self._removals += 1

        logger.debug(f"Cache {cause.value}: {key!r}")
        return record.value

    @staticmethod
    def make_key(operation: str, **params: Any) -> str:
        """
        Create a cache key from operation and parameters.

        Args:
            operation: Operation name (e.g., "compile_template")
            **params: Parameters to hash

        Returns:
            Cache key in format "operation:params_hash"
        """
        sorted_params = sorted(params.items())
        param_hash = hashlib.sha256(str(sorted_params).encode()).hexdigest()[:16]
        return f"{operation}:{param_hash}"
