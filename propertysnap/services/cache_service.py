import logging
from typing import Dict, Any

from propertysnap.services.cache_registry import CacheRegistry, CLEAR_TYPES

logger = logging.getLogger(__name__)

# ---------------------------
# Clear cache
# ---------------------------
def clear_cache(cache: CacheRegistry, cache_type: str) -> Dict[str, Any]:
    if cache_type not in CLEAR_TYPES:
        logger.warning(f"Invalid cache type requested: {cache_type}")
        raise ValueError(f"Invalid cache type: {cache_type}")

    cleared = cache.clear(cache_type)
    logger.info(f"Cache cleared: type={cache_type} cleared={cleared}")
    return {
        "success": True,
        "message": "Cache cleared successfully",
        "type": cache_type,
        "cleared": cleared,
    }

# ---------------------------
# Cache Stats
# ---------------------------
def get_cache_stats(cache: CacheRegistry) -> Dict[str, Any]:
    return {"success": True, "stats": cache.get_stats()}
