from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from propertysnap.deps import get_cache
from propertysnap.auth.dependencies import require_role
from propertysnap.schemas.cache_schema import CacheClearRequest, CacheClearResponse, CacheStatsResponse
from propertysnap.services import cache_service
from propertysnap.services.cache_registry import CacheRegistry, CLEAR_TYPES

router = APIRouter(prefix="/api/cache", tags=["cache"], dependencies=[Depends(require_role("admin"))])

@router.post("/clear", response_model=CacheClearResponse)
async def clear_cache(body: CacheClearRequest, cache: CacheRegistry = Depends(get_cache)):
    if body.type not in CLEAR_TYPES:
        return JSONResponse(status_code=400, content={"success": False, "error": "Invalid cache type"})
    return cache_service.clear_cache(cache, body.type)

@router.get("/clear", response_model=CacheStatsResponse)
@router.get("/stats", response_model=CacheStatsResponse)
async def cache_stats(cache: CacheRegistry = Depends(get_cache)):
    return cache_service.get_cache_stats(cache)
