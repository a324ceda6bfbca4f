import asyncio
import logging
from datetime import datetime, timezone

from performance_engine.errors import RepositoryError
from performance_engine.schema import (
    ExternalIntensity,
    ExternalTask,
    FeedbackRecord,
    IntensityTotals,
    InternalIntensity,
    InternalTask,
    OwningEvent,
    PerformanceSummary,
)
from performance_engine.service import PerformanceService

TEMPLATE = "3f1c2d4e-5a6b-4c7d-8e9f-0a1b2c3d4e5f"


class FakeRepository:
    def __init__(self, fail_on=None):
        self.fail_on = fail_on
        self.calls = []

    async def _call(self, name, *args):
        self.calls.append((name, args))
        if name == self.fail_on:
            raise RepositoryError(name, "boom")

    async def fetch_internal_tasks(self, user_id, start, end):
        await self._call("fetch_internal_tasks", user_id, start, end)
        return [
            InternalTask("t1", "act-1", "2026-02-17", completed=True, task_template_id="tpl-1"),
            InternalTask("t2", "act-1", "2026-02-17", description=f"[auto-after-training:{TEMPLATE}]"),
        ]

    async def fetch_external_tasks(self, user_id, start, end):
        await self._call("fetch_external_tasks", user_id, start, end)
        return [ExternalTask("x1", False, OwningEvent("2026-02-20", False))]

    async def fetch_internal_intensity(self, user_id, start, end):
        await self._call("fetch_internal_intensity", user_id, start, end)
        return [InternalIntensity("act-1", "2026-02-17", True, 6)]

    async def fetch_external_intensity(self, user_id, start, end):
        await self._call("fetch_external_intensity", user_id, start, end)
        return [ExternalIntensity("m1", True, None, OwningEvent("2026-02-19", True))]

    async def fetch_feedback(self, user_id, activity_ids):
        await self._call("fetch_feedback", user_id, activity_ids)
        return [FeedbackRecord("act-1", TEMPLATE, rating=7)]


def test_weekly_summary_combines_tasks_and_intensity():
    repository = FakeRepository()
    service = PerformanceService(repository)
    summary = asyncio.run(service.weekly_summary("user-1", today="2026-02-19"))

    assert summary == PerformanceSummary(
        percentage=100,
        completed_tasks=3,
        total_tasks=3,
        completed_tasks_for_week=3,
        total_tasks_for_week=4,
    )
    assert ("fetch_internal_tasks", ("user-1", "2026-02-16", "2026-02-23")) in repository.calls
    assert ("fetch_feedback", ("user-1", ["act-1"])) in repository.calls


def test_weekly_summary_fails_closed(caplog):
    service = PerformanceService(FakeRepository(fail_on="fetch_external_intensity"))
    with caplog.at_level(logging.ERROR):
        summary = asyncio.run(service.weekly_summary("user-1", today="2026-02-19"))

    assert summary == PerformanceSummary()
    assert "reporting zero progress" in caplog.text


def test_feedback_failure_also_zeroes_summary():
    service = PerformanceService(FakeRepository(fail_on="fetch_feedback"))
    assert asyncio.run(service.weekly_summary("user-1", today="2026-02-19")) == PerformanceSummary()


def test_today_comes_from_clock_when_not_given():
    repository = FakeRepository()
    clock = lambda: datetime(2026, 2, 23, 12, 0, tzinfo=timezone.utc)
    service = PerformanceService(repository, tz_name="UTC", clock=clock)
    asyncio.run(service.weekly_summary("user-1"))
    assert ("fetch_internal_intensity", ("user-1", "2026-02-23", "2026-03-02")) in repository.calls


def test_intensity_totals():
    service = PerformanceService(FakeRepository())
    totals = asyncio.run(service.intensity_totals("user-1", today="2026-02-19"))
    assert totals == IntensityTotals(total_week=1, completed_week=1, total_today=1, completed_today=1)

    failing = PerformanceService(FakeRepository(fail_on="fetch_internal_intensity"))
    assert asyncio.run(failing.intensity_totals("user-1", today="2026-02-19")) == IntensityTotals()


class SlowSiblingRepository(FakeRepository):
    def __init__(self):
        super().__init__(fail_on="fetch_internal_tasks")
        self.external_finished = False
        self.external_cancelled = False

    async def fetch_external_tasks(self, user_id, start, end):
        try:
            await asyncio.sleep(0.05)
        except asyncio.CancelledError:
            self.external_cancelled = True
            raise
        self.external_finished = True
        return []


def test_failed_read_cancels_pending_siblings():
    repository = SlowSiblingRepository()
    service = PerformanceService(repository)

    async def run():
        summary = await service.weekly_summary("user-1", today="2026-02-19")
        await asyncio.sleep(0.1)
        return summary

    assert asyncio.run(run()) == PerformanceSummary()
    assert repository.external_cancelled
    assert not repository.external_finished
