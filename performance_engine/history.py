"""Past-week performance history built from already fetched activities."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Optional

from performance_engine.duration import activity_effective_duration_minutes
from performance_engine.schema import HistoryWeek


def resolve_activity_datetime(activity: Any) -> Optional[datetime]:
    """Return when an activity took place; internal activities default to midday."""

    if not isinstance(activity, Mapping):
        return None

    activity_date = activity.get("activity_date")
    if activity_date:
        time_part = activity.get("activity_time") or "12:00"
        try:
            return datetime.fromisoformat(f"{str(activity_date)[:10]}T{time_part}")
        except ValueError:
            return None

    start_time = activity.get("start_time")
    if isinstance(start_time, str) and start_time:
        try:
            return datetime.fromisoformat(start_time)
        except ValueError:
            return None
    return None


def _activity_tasks(activity: Mapping) -> list:
    for key in ("tasks", "external_tasks", "calendar_tasks"):
        tasks = activity.get(key)
        if isinstance(tasks, list) and tasks:
            return tasks
    return []


def _monday(day: date) -> date:
    return day - timedelta(days=day.weekday())


def build_performance_history_weeks(
    activities: Optional[Iterable[Any]],
    now: Optional[datetime] = None,
) -> list[HistoryWeek]:
    """Group finished weeks of activities, newest week first.

    The current week is excluded. Minutes count only for activities without
    tasks or with every task completed.
    """

    current = now or datetime.now()
    current_week_start = _monday(current.date() if isinstance(current, datetime) else current)

    weeks: dict[date, HistoryWeek] = {}
    for activity in activities or []:
        resolved_at = resolve_activity_datetime(activity)
        if resolved_at is None:
            continue

        week_start = _monday(resolved_at.date())
        if week_start >= current_week_start:
            continue

        tasks = _activity_tasks(activity)
        completed = [task for task in tasks if isinstance(task, Mapping) and task.get("completed") is True]
        all_done = bool(tasks) and len(completed) == len(tasks)
        minutes = activity_effective_duration_minutes(activity) if not tasks or all_done else 0

        week = weeks.get(week_start)
        if week is None:
            week = weeks[week_start] = HistoryWeek(week_start=week_start, week_key=week_start.isoformat())
        week.activities.append({**activity, "resolved_at": resolved_at})
        week.activity_count += 1
        week.total_completed_tasks += len(completed)
        week.total_minutes += minutes

    for week in weeks.values():
        week.activities.sort(key=lambda item: item["resolved_at"].replace(tzinfo=None), reverse=True)
    return sorted(weeks.values(), key=lambda week: week.week_start, reverse=True)
