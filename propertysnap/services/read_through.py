# services/read_through.py
import logging
from typing import Any, Awaitable, Callable, Optional, Tuple

from propertysnap.services.memory_cache import MemoryCache

logger = logging.getLogger(__name__)


async def read_through(
    cache: MemoryCache,
    key: str,
    ttl_seconds: int,
    loader: Callable[[], Awaitable[Optional[Any]]],
) -> Tuple[Optional[Any], bool]:
    """
    Serve `key` from the namespace or load it from the database.

    Returns (payload, hit). The loader must return the fully shaped response
    payload; None means "not found" and is never cached. Loader errors
    propagate to the caller untouched.
    """
    cached = cache.get(key)
    if cached is not None:
        logger.debug(f"[{cache.name}] HIT {key}")
        return cached, True

    logger.debug(f"[{cache.name}] MISS {key}")
    payload = await loader()
    if payload is not None:
        cache.set(key, payload, ttl_seconds)
    return payload, False
