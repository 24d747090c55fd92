# services/cache_registry.py
import time
from typing import Callable, Dict, List, Tuple

from propertysnap.services.memory_cache import DEFAULT_TTL, MemoryCache

NAMESPACES = ("report", "ads", "config")
CLEAR_TYPES = ("all",) + NAMESPACES


class CacheTTL:
    """TTL policy in seconds, shared by every caching call site."""
    DEFAULT = DEFAULT_TTL        # 5 min, also the cache config maxAge default
    PROPERTY_LIST = 30           # paginated "my properties" listing
    CACHE_CONFIG = 600           # cached CacheConfig records
    USER_ID = 300                # uid:{email} lookups


class CacheRegistry:
    """
    The process-wide set of cache namespaces.

    Built once at startup and stored on ``app.state.cache``; tests build their
    own instances with a fake clock.
    """

    def __init__(self, clock: Callable[[], float] = time.time, default_ttl: int = DEFAULT_TTL):
        self.report = MemoryCache("report", default_ttl=default_ttl, clock=clock)
        self.ads = MemoryCache("ads", default_ttl=default_ttl, clock=clock)
        self.config = MemoryCache("config", default_ttl=default_ttl, clock=clock)

    def namespaces(self) -> List[Tuple[str, MemoryCache]]:
        return [(name, getattr(self, name)) for name in NAMESPACES]

    def namespace(self, name: str) -> MemoryCache:
        if name not in NAMESPACES:
            raise KeyError(f"Unknown cache namespace: {name}")
        return getattr(self, name)

    def clear(self, cache_type: str) -> int:
        """Clear one namespace or all of them; returns the number of namespaces cleared."""
        if cache_type not in CLEAR_TYPES:
            raise ValueError(f"Invalid cache type: {cache_type}")
        targets = NAMESPACES if cache_type == "all" else (cache_type,)
        for name in targets:
            self.namespace(name).clear()
        return len(targets)

    def get_stats(self) -> Dict[str, Dict[str, int]]:
        return {name: cache.get_stats() for name, cache in self.namespaces()}

    def cleanup(self) -> Dict[str, int]:
        return {name: cache.cleanup() for name, cache in self.namespaces()}
