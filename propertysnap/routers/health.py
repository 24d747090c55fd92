from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool
from datetime import datetime, timezone
from typing import Awaitable, Callable, Dict, Optional
from propertysnap.deps import get_redis, get_db, get_cache
from propertysnap.services.cache_registry import CacheRegistry
from redis.asyncio import Redis
from pymongo.database import Database
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"], prefix="/api/v1")


async def _probe(name: str, ping: Callable[[], Awaitable]) -> Dict[str, Optional[str]]:
    try:
        await ping()
        return {"status": "connected", "error": None}
    except ConnectionError as e:
        logger.warning(f"{name} connection failed: {str(e)}")
        return {"status": "disconnected", "error": "Connection failed"}
    except Exception as e:
        logger.error(f"{name} health check error: {str(e)}")
        return {"status": "disconnected", "error": "Health check failed"}


@router.get("/health", summary="Health Check", description="Report MongoDB and Redis reachability plus per-namespace memory cache stats")
async def health_check(
    r: Redis = Depends(get_redis),
    db: Database = Depends(get_db),
    cache: CacheRegistry = Depends(get_cache),
):
    services = {
        "mongodb": await _probe("MongoDB", lambda: run_in_threadpool(db.command, "ping")),
        "redis": await _probe("Redis", r.ping),
    }

    # Reads only need MongoDB; Redis carries the janitor's stats snapshots
    mongo_up = services["mongodb"]["status"] == "connected"
    redis_up = services["redis"]["status"] == "connected"
    if mongo_up:
        overall_status = "healthy" if redis_up else "degraded"
    else:
        overall_status = "unhealthy"

    response = {
        "status": overall_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": services,
        "cache": cache.get_stats(),
    }

    if overall_status == "unhealthy":
        raise HTTPException(status_code=503, detail=response)

    return response
