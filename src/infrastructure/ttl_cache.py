from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from typing import Callable, Generic, Iterator, Optional, Tuple, TypeVar

from src.logging_config import LOG_NAME, CacheStats

K = TypeVar("K")
V = TypeVar("V")

logger = logging.getLogger(LOG_NAME)


class TTLCache(Generic[K, V]):
    """Bounded in-memory cache with LRU eviction and TTL expiry.

    - Stores values with an absolute expiry computed from ``ttl_seconds`` at
      write time. Reads refresh recency but never extend the deadline.
    - Holds at most ``capacity`` entries (``None`` means unbounded); an insert
      beyond capacity drops expired entries first, then the least recently
      used ones.
    - Expiry is lazy: stale entries are removed when an access finds them.
    - Uses ``time.monotonic()`` unless a ``clock`` callable is given.
    """

    def __init__(
        self,
        ttl_seconds: float,
        capacity: Optional[int] = None,
        *,
        clock: Optional[Callable[[], float]] = None,
        stats: Optional[CacheStats] = None,
    ) -> None:
        if capacity is not None and capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._ttl = float(ttl_seconds)
        self._capacity = capacity
        self._clock = clock
        self._stats = stats
        self._lock = threading.Lock()
        # Least recently used first; values are (expiry, value)
        self._store: OrderedDict[K, Tuple[float, V]] = OrderedDict()

    @property
    def capacity(self) -> Optional[int]:
        return self._capacity

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def _now(self) -> float:
        if self._clock is not None:
            return self._clock()
        return time.monotonic()

    def get(self, key: K) -> Optional[V]:
        now = self._now()
        with self._lock:
            item = self._store.get(key)
            if item is None:
                self._record_miss()
                return None
            expiry, value = item
            if now >= expiry:
                del self._store[key]
                self._record_expired(1)
                self._record_miss()
                return None
            self._store.move_to_end(key)
            self._record_hit()
        return value

    def set(self, key: K, value: V) -> None:
        now = self._now()
        with self._lock:
            self._store[key] = (now + self._ttl, value)
            self._store.move_to_end(key)
            if self._capacity is not None and len(self._store) > self._capacity:
                self._purge_expired_locked(now)
                while len(self._store) > self._capacity:
                    evicted, _ = self._store.popitem(last=False)
                    logger.debug("Cache evicted entry", extra={"key": str(evicted)})
                    if self._stats is not None:
                        self._stats.record_eviction()

    def has(self, key: K) -> bool:
        """Return whether a live entry exists, without touching recency."""
        now = self._now()
        with self._lock:
            item = self._store.get(key)
            if item is None:
                return False
            if now >= item[0]:
                del self._store[key]
                self._record_expired(1)
                return False
            return True

    def delete(self, key: K) -> bool:
        """Remove ``key``; return True if a live entry was removed."""
        now = self._now()
        with self._lock:
            item = self._store.pop(key, None)
        return item is not None and now < item[0]

    def items(self) -> Iterator[Tuple[K, V]]:
        """Yield live ``(key, value)`` pairs, most recently used first.

        Traversal works on a snapshot taken under the lock and does not
        change recency.
        """
        now = self._now()
        with self._lock:
            snapshot = list(reversed(self._store.items()))
            stale = [key for key, (expiry, _) in snapshot if now >= expiry]
            for key in stale:
                del self._store[key]
            if stale:
                self._record_expired(len(stale))
        for key, (expiry, value) in snapshot:
            if now < expiry:
                yield key, value

    def purge_expired(self) -> int:
        now = self._now()
        with self._lock:
            return self._purge_expired_locked(now)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        """Number of entries physically held, including expired ones not yet removed."""
        with self._lock:
            return len(self._store)

    def _purge_expired_locked(self, now: float) -> int:
        stale = [key for key, (expiry, _) in self._store.items() if now >= expiry]
        for key in stale:
            del self._store[key]
        if stale:
            self._record_expired(len(stale))
        return len(stale)

    def _record_hit(self) -> None:
        if self._stats is not None:
            self._stats.record_hit()

    def _record_miss(self) -> None:
        if self._stats is not None:
            self._stats.record_miss()

    def _record_expired(self, count: int) -> None:
        if self._stats is not None:
            self._stats.record_expiration(count)
