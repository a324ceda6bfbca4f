"""Aggregation pass over live backend data."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from performance_engine.dates import day_key, query_bounds, today_iso
from performance_engine.errors import RepositoryError
from performance_engine.feedback import FeedbackIndex, is_feedback_task
from performance_engine.metrics import (
    calculate_intensity_performance_totals,
    calculate_task_performance_totals,
    combine_performance,
    empty_summary,
)
from performance_engine.schema import IntensityTotals, PerformanceSummary

logger = logging.getLogger(__name__)


async def _gather_or_cancel(*reads):
    """Await ``reads`` concurrently; on the first failure cancel the rest and re-raise."""

    tasks = [asyncio.ensure_future(read) for read in reads]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class PerformanceService:
    """Fetches the current week's rows and reduces them to progress counters.

    A failed read anywhere in the pass zeroes every counter; partially fetched
    data is never reported.
    """

    def __init__(self, repository, tz_name: Optional[str] = None, clock: Optional[Callable[[], datetime]] = None):
        self._repository = repository
        self._tz_name = tz_name
        self._clock = clock

    def _today(self, today: Optional[str]) -> str:
        if today:
            return day_key(today)
        now = self._clock() if self._clock is not None else None
        return today_iso(self._tz_name, now)

    async def _fetch_week(self, user_id: str, today: str):
        start, end = query_bounds(today)
        repo = self._repository
        return await _gather_or_cancel(
            repo.fetch_internal_tasks(user_id, start, end),
            repo.fetch_external_tasks(user_id, start, end),
            repo.fetch_internal_intensity(user_id, start, end),
            repo.fetch_external_intensity(user_id, start, end),
        )

    async def weekly_summary(self, user_id: str, today: Optional[str] = None) -> PerformanceSummary:
        """Return combined task + intensity progress for the week containing ``today``."""

        day = self._today(today)
        try:
            internal_tasks, external_tasks, internal_rows, external_rows = await self._fetch_week(user_id, day)

            activity_ids = sorted(
                {task.activity_id for task in internal_tasks if task.activity_id and is_feedback_task(task)}
            )
            feedback = FeedbackIndex.from_records(await self._repository.fetch_feedback(user_id, activity_ids))
        except RepositoryError:
            logger.exception("Performance pass failed for user %s, reporting zero progress", user_id)
            return empty_summary()

        task_totals = calculate_task_performance_totals(internal_tasks, external_tasks, day, feedback=feedback)
        intensity_totals = calculate_intensity_performance_totals(internal_rows, external_rows, day)
        summary = combine_performance(task_totals, intensity_totals)
        logger.debug("Performance for %s on %s: %s", user_id, day, summary)
        return summary

    async def intensity_totals(self, user_id: str, today: Optional[str] = None) -> IntensityTotals:
        day = self._today(today)
        start, end = query_bounds(day)
        try:
            internal_rows, external_rows = await _gather_or_cancel(
                self._repository.fetch_internal_intensity(user_id, start, end),
                self._repository.fetch_external_intensity(user_id, start, end),
            )
        except RepositoryError:
            logger.exception("Intensity pass failed for user %s, reporting zero progress", user_id)
            return IntensityTotals()

        return calculate_intensity_performance_totals(internal_rows, external_rows, day)
