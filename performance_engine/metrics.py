"""Weekly and daily performance counters."""

from __future__ import annotations

import math
from typing import Any, Callable, Iterable, Optional

from performance_engine.eligibility import (
    external_event_day,
    is_intensity_completed,
    should_include_external_intensity,
    should_include_external_task,
    should_include_internal_intensity,
)
from performance_engine.feedback import FeedbackIndex, is_feedback_task, is_internal_task_completed
from performance_engine.schema import (
    ExternalIntensity,
    ExternalTask,
    IntensityTotals,
    InternalIntensity,
    InternalTask,
    PerformanceSummary,
)


def _internal_day(record: Any) -> Optional[str]:
    value = getattr(record, "activity_date", None)
    return value[:10] if isinstance(value, str) and value else None


def _count(
    rows: list[tuple[Optional[str], bool]],
    today_iso: str,
) -> IntensityTotals:
    up_to_today = [completed for day, completed in rows if day is not None and day <= today_iso]
    return IntensityTotals(
        total_week=len(rows),
        completed_week=sum(1 for _, completed in rows if completed),
        total_today=len(up_to_today),
        completed_today=sum(1 for completed in up_to_today if completed),
    )


def calculate_intensity_performance_totals(
    internal_intensity_rows: Iterable[InternalIntensity],
    external_intensity_rows: Iterable[ExternalIntensity],
    today_iso: str,
) -> IntensityTotals:
    """Count eligible intensity rows for the week and up to ``today_iso``.

    Both inputs must already be scoped to the target week; "today" means every
    row dated on or before ``today_iso``.
    """

    rows = [
        (_internal_day(row), is_intensity_completed(row))
        for row in internal_intensity_rows
        if should_include_internal_intensity(row)
    ]
    rows += [
        (external_event_day(row), is_intensity_completed(row))
        for row in external_intensity_rows
        if should_include_external_intensity(row)
    ]
    return _count(rows, today_iso)


def calculate_task_performance_totals(
    internal_tasks: Iterable[InternalTask],
    external_tasks: Iterable[ExternalTask],
    today_iso: str,
    feedback: Optional[FeedbackIndex] = None,
    detector: Callable[[Any], bool] = is_feedback_task,
) -> IntensityTotals:
    """Count eligible regular and feedback tasks for the week and up to ``today_iso``."""

    rows = [
        (_internal_day(task), is_internal_task_completed(task, feedback, detector))
        for task in internal_tasks
        if _internal_day(task) is not None
    ]
    rows += [
        (external_event_day(task), getattr(task, "completed", None) is True)
        for task in external_tasks
        if should_include_external_task(task)
    ]
    return _count(rows, today_iso)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def combine_performance(task_totals: IntensityTotals, intensity_totals: IntensityTotals) -> PerformanceSummary:
    """Fold task and intensity counters into the progress summary."""

    completed_today = task_totals.completed_today + intensity_totals.completed_today
    total_today = task_totals.total_today + intensity_totals.total_today
    percentage = round_half_up(100 * completed_today / total_today) if total_today else 0

    return PerformanceSummary(
        percentage=percentage,
        completed_tasks=completed_today,
        total_tasks=total_today,
        completed_tasks_for_week=task_totals.completed_week + intensity_totals.completed_week,
        total_tasks_for_week=task_totals.total_week + intensity_totals.total_week,
    )


def empty_summary() -> PerformanceSummary:
    return PerformanceSummary()
