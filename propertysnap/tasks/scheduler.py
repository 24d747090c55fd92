# tasks/scheduler.py
"""
Background janitor for the in-memory cache.

Two APScheduler interval jobs run on the application's event loop:
- cache_cleanup sweeps expired entries out of every namespace
- cache_stats logs a stats snapshot and publishes it to Redis for monitoring

Both job bodies catch and log their own errors so one bad run never stops
the next one.
"""

import logging
from typing import Dict, Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from redis.asyncio import Redis

from propertysnap.services.cache_registry import CacheRegistry
from propertysnap.services.cache_stats import publish_snapshot

logger = logging.getLogger(__name__)

CLEANUP_JOB_ID = "cache_cleanup"
STATS_JOB_ID = "cache_stats"


def create_scheduler() -> AsyncIOScheduler:
    return AsyncIOScheduler()


def schedule_jobs(
    scheduler: AsyncIOScheduler,
    cache: CacheRegistry,
    r: Optional[Redis],
    *,
    cleanup_interval: int = 300,
    stats_interval: int = 900,
) -> None:
    scheduler.add_job(
        sweep_expired_entries,
        trigger=IntervalTrigger(seconds=cleanup_interval),
        args=[cache],
        id=CLEANUP_JOB_ID,
        replace_existing=True,
        coalesce=True,
        max_instances=1,
    )
    scheduler.add_job(
        report_cache_stats,
        trigger=IntervalTrigger(seconds=stats_interval),
        args=[cache, r],
        id=STATS_JOB_ID,
        replace_existing=True,
        coalesce=True,
        max_instances=1,
    )


def sweep_expired_entries(cache: CacheRegistry) -> Dict[str, int]:
    try:
        cleaned = cache.cleanup()
    except Exception as e:
        logger.error(f"Cache cleanup failed: {str(e)}")
        return {}

    if any(cleaned.values()):
        logger.info(f"Cache cleanup: {cleaned}")
    return cleaned


async def report_cache_stats(cache: CacheRegistry, r: Optional[Redis]) -> Dict[str, Dict[str, int]]:
    try:
        stats = {name: ns for name, ns in cache.get_stats().items() if ns["total"] > 0}
    except Exception as e:
        logger.error(f"Collecting cache stats failed: {str(e)}")
        return {}

    if not stats:
        return stats

    logger.info(f"Cache stats: {stats}")
    if r is not None:
        try:
            await publish_snapshot(r, stats)
        except Exception as e:
            logger.warning(f"Publishing cache stats to Redis failed: {str(e)}")
    return stats
