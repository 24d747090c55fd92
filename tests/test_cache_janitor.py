"""Tests for the background janitor jobs, driven by a fake clock."""

import asyncio
from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from apscheduler.schedulers.base import STATE_STOPPED

from propertysnap.services.cache_stats import get_published_snapshot
from propertysnap.tasks.scheduler import (
    CLEANUP_JOB_ID,
    STATS_JOB_ID,
    create_scheduler,
    report_cache_stats,
    schedule_jobs,
    sweep_expired_entries,
)


class TestSweep:

    def test_sweep_removes_expired_entries(self, registry, clock) -> None:
        registry.ads.set("ads_sidebar", [], 300)
        registry.report.set("tok", {}, 30)
        registry.config.set("share_page", {}, 600)
        clock.advance(301)

        assert sweep_expired_entries(registry) == {"report": 1, "ads": 1, "config": 0}
        assert registry.config.get_stats()["total"] == 1

    def test_sweep_logs_only_when_something_was_removed(self, registry, caplog) -> None:
        registry.ads.set("k", 1, 300)
        with caplog.at_level("INFO", logger="propertysnap.tasks.scheduler"):
            sweep_expired_entries(registry)
        assert "Cache cleanup" not in caplog.text

    def test_sweep_failure_is_contained(self, caplog) -> None:
        broken = MagicMock()
        broken.cleanup.side_effect = RuntimeError("boom")
        assert sweep_expired_entries(broken) == {}
        assert "Cache cleanup failed" in caplog.text

    def test_next_sweep_runs_after_a_failure(self, registry, clock) -> None:
        original = registry.cleanup
        registry.cleanup = MagicMock(side_effect=RuntimeError("boom"))
        sweep_expired_entries(registry)

        registry.cleanup = original
        registry.ads.set("k", 1, 1)
        clock.advance(2)
        assert sweep_expired_entries(registry)["ads"] == 1


class TestStatsReport:

    @pytest.mark.asyncio
    async def test_reports_only_non_empty_namespaces(self, registry, fake_redis) -> None:
        registry.report.set("tok", {"report": {}}, 60)
        registry.report.get("tok")

        stats = await report_cache_stats(registry, fake_redis)
        assert list(stats) == ["report"]

        published = await get_published_snapshot(fake_redis, "report")
        assert published["total"] == 1
        assert published["hits"] == 1
        assert "published_at" in published
        assert await get_published_snapshot(fake_redis, "ads") == {}

    @pytest.mark.asyncio
    async def test_empty_registry_publishes_nothing(self, registry, fake_redis) -> None:
        assert await report_cache_stats(registry, fake_redis) == {}
        assert await fake_redis.keys("cache_stats:*") == []

    @pytest.mark.asyncio
    async def test_redis_failure_does_not_raise(self, registry) -> None:
        registry.ads.set("k", 1, 60)
        broken_redis = MagicMock()
        broken_redis.pipeline.side_effect = ConnectionError("redis down")

        stats = await report_cache_stats(registry, broken_redis)
        assert stats["ads"]["total"] == 1

    @pytest.mark.asyncio
    async def test_works_without_redis(self, registry) -> None:
        registry.config.set("share_page", {}, 600)
        stats = await report_cache_stats(registry, None)
        assert stats["config"]["active"] == 1


class TestScheduling:

    def test_jobs_registered_with_intervals(self, registry, fake_redis) -> None:
        scheduler = create_scheduler()
        schedule_jobs(scheduler, registry, fake_redis, cleanup_interval=300, stats_interval=900)

        jobs = {job.id: job for job in scheduler.get_jobs()}
        assert set(jobs) == {CLEANUP_JOB_ID, STATS_JOB_ID}
        assert jobs[CLEANUP_JOB_ID].trigger.interval == timedelta(minutes=5)
        assert jobs[STATS_JOB_ID].trigger.interval == timedelta(minutes=15)

    @pytest.mark.asyncio
    async def test_scheduler_shuts_down_cleanly(self, registry, fake_redis) -> None:
        scheduler = create_scheduler()
        schedule_jobs(scheduler, registry, fake_redis)
        scheduler.start()
        assert scheduler.running
        scheduler.shutdown(wait=False)
        # the asyncio scheduler applies shutdown on its next loop turn
        await asyncio.sleep(0)
        assert scheduler.state == STATE_STOPPED
        assert not scheduler.running
