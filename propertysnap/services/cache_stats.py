# services/cache_stats.py
import time
from typing import Dict, Any
from redis.asyncio import Redis
from propertysnap.services.cache_keys import cache_stats_key

STATS_FIELDS = ("total", "active", "expired", "hits", "misses")

async def publish_snapshot(r: Redis, stats: Dict[str, Dict[str, int]]) -> None:
    """Write one hash per namespace so monitoring can read the worker's cache state."""
    published_at = int(time.time())
    async with r.pipeline() as pipe:
        for namespace, ns_stats in stats.items():
            mapping = {field: int(ns_stats.get(field, 0)) for field in STATS_FIELDS}
            mapping["published_at"] = published_at
            pipe.hset(cache_stats_key(namespace), mapping=mapping)
        await pipe.execute()

async def get_published_snapshot(r: Redis, namespace: str) -> Dict[str, Any]:
    raw = await r.hgetall(cache_stats_key(namespace)) or {}
    # convert str->int
    return {k: int(v) for k, v in raw.items()}
