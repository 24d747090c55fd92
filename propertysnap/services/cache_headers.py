# services/cache_headers.py
"""
HTTP caching headers for responses served through the memory cache.

`Cache-Control`/`CDN-Cache-Control` follow the stored CacheConfig policy,
`X-Cache`/`X-Cache-Source` report whether the payload came from memory.
"""

from typing import Dict, Optional

from starlette.responses import Response

from propertysnap.schemas.cache_schema import CacheConfigOut

STALE_WHILE_REVALIDATE_SECONDS = 60


def cache_control_value(config: CacheConfigOut) -> str:
    if config.staleWhileRevalidate:
        return f"public, s-maxage={config.maxAge}, stale-while-revalidate={STALE_WHILE_REVALIDATE_SECONDS}"
    return f"public, s-maxage={config.maxAge}"


def build_cache_headers(config: Optional[CacheConfigOut], hit: bool) -> Dict[str, str]:
    headers: Dict[str, str] = {}
    if config is not None and config.enabled:
        headers["Cache-Control"] = cache_control_value(config)
        headers["CDN-Cache-Control"] = f"public, s-maxage={config.maxAge}"
    headers["X-Cache"] = "HIT" if hit else "MISS"
    headers["X-Cache-Source"] = "memory" if hit else "database"
    return headers


def apply_cache_headers(response: Response, config: Optional[CacheConfigOut], hit: bool) -> None:
    for name, value in build_cache_headers(config, hit).items():
        response.headers[name] = value
