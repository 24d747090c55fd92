# services/cache_config_service.py
import logging
from pymongo.database import Database
from fastapi.concurrency import run_in_threadpool

from propertysnap.repos import cache_configs as repo
from propertysnap.schemas.cache_schema import CacheConfigOut, CacheConfigUpdate
from propertysnap.services.cache_keys import cache_config_key
from propertysnap.services.cache_registry import CacheRegistry, CacheTTL

logger = logging.getLogger(__name__)

ADS_API = "ads_api"
SHARE_PAGE = "share_page"


def _to_config(doc: dict) -> CacheConfigOut:
    return CacheConfigOut(
        enabled=doc.get("enabled", True),
        maxAge=doc.get("maxAge", CacheTTL.DEFAULT),
        staleWhileRevalidate=doc.get("staleWhileRevalidate", True),
    )


async def get_cache_config(db: Database, cache: CacheRegistry, config_type: str) -> CacheConfigOut:
    """Resolve the caching policy for `config_type`, creating the defaults on first use."""
    key = cache_config_key(config_type)
    cached = cache.config.get(key)
    if cached is not None:
        return cached

    doc = await run_in_threadpool(repo.get_or_create_config, db, config_type)
    config = _to_config(doc)
    # the policy record has its own fixed TTL, independent of config.maxAge
    cache.config.set(key, config, CacheTTL.CACHE_CONFIG)
    return config


async def update_cache_config(db: Database, cache: CacheRegistry, update: CacheConfigUpdate) -> CacheConfigOut:
    patch = update.model_dump(exclude={"type"}, exclude_none=True)
    doc = await run_in_threadpool(repo.upsert_config, db, update.type, patch)
    config = _to_config(doc)
    cache.config.set(cache_config_key(update.type), config, CacheTTL.CACHE_CONFIG)
    logger.info(f"Cache config '{update.type}' updated: {config.model_dump()}")
    return config
