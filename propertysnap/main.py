# main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.concurrency import run_in_threadpool
import logging
import sys
from propertysnap import __version__
from propertysnap.config import settings
from propertysnap.deps import create_mongo_client, create_redis_client
from propertysnap.logging_config import setup_logging
from propertysnap.middleware.error_handler import ErrorHandlerMiddleware
from propertysnap.repos import ads as ads_repo
from propertysnap.repos import cache_configs as cache_configs_repo
from propertysnap.repos import property_reports as reports_repo
from propertysnap.repos import users as users_repo
from propertysnap.routers.health import router as health_router
from propertysnap.routers.ads_route import ads
from propertysnap.routers.cache_route import cache
from propertysnap.routers.property_route import property_snap
from propertysnap.services.cache_registry import CacheRegistry
from propertysnap.tasks.scheduler import create_scheduler, schedule_jobs


log_level = "DEBUG" if settings.DEBUG else "INFO"
log_file = "logs/app.log" if settings.is_production else None
setup_logging(log_level=log_level, log_file=log_file)

logger = logging.getLogger(__name__)

INDEXED_REPOS = (users_repo, ads_repo, reports_repo, cache_configs_repo)


app = FastAPI(
    title="Property Snap API",
    description="Property share pages, owner listings and ad slots served through an in-memory read-through cache",
    version=__version__
)

# One registry per worker process; it starts empty on every restart.
app.state.cache = CacheRegistry(default_ttl=settings.CACHE_DEFAULT_TTL_SECONDS)


async def _connect_stores() -> None:
    app.state.mongo_client = create_mongo_client(settings.MONGO_URI)
    app.state.db = app.state.mongo_client[settings.MONGO_DB_NAME]
    logger.info(f"MongoDB client ready (database '{settings.MONGO_DB_NAME}')")

    app.state.redis = create_redis_client(settings.REDIS_URL)
    await app.state.redis.ping()
    logger.info("Redis connection established")

async def _ensure_indexes() -> None:
    for repo in INDEXED_REPOS:
        await run_in_threadpool(repo.ensure_indexes, app.state.db)
    logger.info(f"Indexes ensured for {len(INDEXED_REPOS)} collections")

def _start_janitor() -> None:
    app.state.scheduler = create_scheduler()
    schedule_jobs(
        app.state.scheduler,
        app.state.cache,
        app.state.redis,
        cleanup_interval=settings.CACHE_CLEANUP_INTERVAL_SECONDS,
        stats_interval=settings.CACHE_STATS_INTERVAL_SECONDS,
    )
    app.state.scheduler.start()
    logger.info(
        f"Cache janitor started (sweep every {settings.CACHE_CLEANUP_INTERVAL_SECONDS}s, "
        f"stats every {settings.CACHE_STATS_INTERVAL_SECONDS}s)"
    )


@app.on_event("startup")
async def startup():
    logger.info(f"Starting Property Snap API {__version__}...")

    try:
        await _connect_stores()
    except Exception as e:
        logger.critical(f"Could not reach MongoDB/Redis: {str(e)}")
        sys.exit(1)

    try:
        await _ensure_indexes()
    except Exception as e:
        # reads still work without the indexes, only slower
        logger.error(f"Failed to ensure database indexes: {str(e)}")

    try:
        _start_janitor()
    except Exception as e:
        # lazy eviction still bounds what get() returns
        logger.error(f"Failed to start cache janitor: {str(e)}")

    logger.info("Application startup completed")

@app.on_event("shutdown")
async def shutdown():
    logger.info("Starting application shutdown...")

    # janitor first, so no sweep runs against closing clients
    if hasattr(app.state, 'scheduler'):
        try:
            app.state.scheduler.shutdown(wait=False)
            logger.info("Cache janitor stopped")
        except Exception as e:
            logger.error(f"Error stopping cache janitor: {str(e)}")

    if hasattr(app.state, 'redis'):
        try:
            await app.state.redis.close()
            logger.info("Redis connection closed")
        except Exception as e:
            logger.error(f"Error closing Redis connection: {str(e)}")

    if hasattr(app.state, 'mongo_client'):
        try:
            app.state.mongo_client.close()
            logger.info("MongoDB connection closed")
        except Exception as e:
            logger.error(f"Error closing MongoDB connection: {str(e)}")

    logger.info(f"Application shutdown completed; cache at exit: {app.state.cache.get_stats()}")

# JSON error envelope for anything a route raises
app.add_middleware(ErrorHandlerMiddleware)

# CORS; the X-Cache diagnostics must be readable from the browser
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Cache", "X-Cache-Source"],
)

app.include_router(health_router)
app.include_router(cache.router)
app.include_router(ads.router)
app.include_router(property_snap.router)
