# services/memory_cache.py
"""
In-process TTL cache used in front of MongoDB.
- One MemoryCache per namespace (see cache_registry)
- Expired entries are evicted lazily on read and by the janitor sweep
- Hit/miss counters live for the lifetime of the process
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_TTL = 300  # 5 minutes


@dataclass
class CacheEntry:
    value: Any
    created_at: float
    expires_at: Optional[float]
    last_accessed_at: float

    def is_valid(self, now: float) -> bool:
        return self.expires_at is None or now < self.expires_at


class MemoryCache:
    def __init__(self, name: str, default_ttl: int = DEFAULT_TTL, clock: Callable[[], float] = time.time):
        self.name = name
        self.default_ttl = default_ttl
        self._clock = clock
        self._store: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def _now(self) -> float:
        return self._clock()

    def _resolve_ttl(self, ttl_seconds: Any) -> float:
        # callers never validate TTLs, so anything unusable falls back to the namespace default
        if isinstance(ttl_seconds, bool) or not isinstance(ttl_seconds, (int, float)) or not ttl_seconds > 0:
            if ttl_seconds is not None:
                logger.debug(f"[{self.name}] invalid ttl {ttl_seconds!r}, using default {self.default_ttl}s")
            return self.default_ttl
        return ttl_seconds

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None when the key is missing or expired."""
        with self._lock:
            try:
                entry = self._store.get(key)
                if entry is None:
                    self.misses += 1
                    return None

                now = self._now()
                if not entry.is_valid(now):
                    # lazy eviction
                    self._store.pop(key, None)
                    self.misses += 1
                    return None

                entry.last_accessed_at = now
                self.hits += 1
                return entry.value
            except Exception as e:
                # a broken store degrades to "always miss"
                logger.error(f"[{self.name}] cache read failed for {key}: {str(e)}")
                self.misses += 1
                return None

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None, *, persistent: bool = False) -> None:
        now = self._now()
        expires_at = None if persistent else now + self._resolve_ttl(ttl_seconds)
        with self._lock:
            self._store[key] = CacheEntry(
                value=value,
                created_at=now,
                expires_at=expires_at,
                last_accessed_at=now,
            )

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def clear(self) -> int:
        """Drop every entry. Hit/miss counters are lifetime stats and survive."""
        with self._lock:
            count = len(self._store)
            self._store.clear()
        return count

    def get_stats(self) -> Dict[str, int]:
        with self._lock:
            now = self._now()
            total = len(self._store)
            active = sum(1 for entry in self._store.values() if entry.is_valid(now))
            return {
                "total": total,
                "active": active,
                "expired": total - active,
                "hits": self.hits,
                "misses": self.misses,
            }

    def cleanup(self) -> int:
        """Remove every expired entry and return how many were removed."""
        with self._lock:
            now = self._now()
            expired = [key for key, entry in self._store.items() if not entry.is_valid(now)]
            for key in expired:
                del self._store[key]
        return len(expired)

    def __repr__(self) -> str:
        return f"MemoryCache(name={self.name!r}, entries={len(self._store)})"
