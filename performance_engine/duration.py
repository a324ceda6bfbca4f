"""Activity and task duration rules used for training-hours figures."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Optional

from performance_engine.adapters.rows import to_finite_number

DURATION_KEYS = ("duration", "durationMinutes", "duration_minutes")
TASK_DURATION_ENABLED_KEYS = ("taskDurationEnabled", "task_duration_enabled")
TASK_DURATION_MINUTES_KEYS = (
    "taskDurationMinutes",
    "task_duration_minutes",
    "durationMinutes",
    "duration_minutes",
    "duration",
)
FEEDBACK_TITLE_PREFIX = re.compile(r"^feedback\s+p(?:\u00e5|a\u030a|a)(?:\s*[:\s-]|$)", re.IGNORECASE)
TEMPLATE_MARKER_PREFIX = "[[feedback_template_id:"

def _parse_datetime(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        return None

def _parse_date_and_time(date_value: Any, time_value: Any) -> Optional[datetime]:
    if not isinstance(date_value, str) or not date_value.strip():
        return None
    time_part = time_value if isinstance(time_value, str) and time_value.strip() else "00:00:00"
    return _parse_datetime(f"{date_value.strip()[:10]}T{time_part.strip()}")

def _diff_minutes(start: Optional[datetime], end: Optional[datetime]) -> Optional[float]:
    if start is None or end is None:
        return None
    try:
        minutes = (end - start).total_seconds() / 60.0
    except TypeError:
        return None
    return minutes if minutes > 0 else None

def _first_datetime(activity: Mapping, keys: tuple[str, ...]) -> Optional[datetime]:
    for key in keys:
        parsed = _parse_datetime(activity.get(key))
        if parsed is not None:
            return parsed
    return None

def _time_of_day_minutes(value: Any) -> Optional[int]:
    if not isinstance(value, str) or not value.strip():
        return None
    parts = value.strip().split(":")
    try:
        hours = int(parts[0])
        minutes = int(parts[1]) if len(parts) > 1 else 0
    except ValueError:
        return None
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        return None
    return hours * 60 + minutes

def is_feedback_task_like(task: Any) -> bool:
    """Loose feedback detection over raw task mappings (flags, template id, title, markers)."""

    if not isinstance(task, Mapping):
        return False
    if task.get("isFeedbackTask") is True or task.get("is_feedback_task") is True:
        return True

    template_id = task.get("feedback_template_id") or task.get("feedbackTemplateId")
    if template_id is not None and str(template_id).strip():
        return True

    title = task.get("title").strip() if isinstance(task.get("title"), str) else ""
    if title and FEEDBACK_TITLE_PREFIX.search(title):
        return True

    description = task.get("description") if isinstance(task.get("description"), str) else ""
    return TEMPLATE_MARKER_PREFIX in description or TEMPLATE_MARKER_PREFIX in title

def _is_all_day_external_event(activity: Mapping) -> bool:
    if any(activity.get(key) is True for key in ("all_day", "is_all_day", "allDay")):
        return True

    start_date, end_date = activity.get("start_date"), activity.get("end_date")
    if not isinstance(start_date, str) or not isinstance(end_date, str):
        return False

    # midnight -> midnight, usually ending the next day
    if _time_of_day_minutes(activity.get("start_time")) != 0 or _time_of_day_minutes(activity.get("end_time")) != 0:
        return False

    start = _parse_date_and_time(start_date, "00:00:00")
    end = _parse_date_and_time(end_date, "00:00:00")
    return start is not None and end is not None and end > start

def activity_duration_minutes(activity: Any) -> float:
    """Return the planned duration of an internal or external activity in minutes."""

    if not isinstance(activity, Mapping):
        return 0

    for key in DURATION_KEYS:
        minutes = to_finite_number(activity.get(key))
        if minutes is not None and minutes > 0:
            return minutes

    internal = _diff_minutes(
        _parse_date_and_time(activity.get("activity_date"), activity.get("activity_time")),
        _parse_date_and_time(activity.get("activity_date"), activity.get("activity_end_time")),
    )
    if internal is not None:
        return internal

    if not _is_all_day_external_event(activity):
        external = _diff_minutes(
            _parse_date_and_time(activity.get("start_date"), activity.get("start_time")),
            _parse_date_and_time(activity.get("end_date"), activity.get("end_time")),
        )
        if external is not None:
            return external

    start = _first_datetime(activity, ("start_time", "start", "start_at"))
    end = _first_datetime(activity, ("end_time", "end", "end_at"))
    return _diff_minutes(start, end) or 0

def _task_duration_enabled(task: Mapping) -> bool:
    return any(task.get(key) is True for key in TASK_DURATION_ENABLED_KEYS)

def task_duration_minutes(task: Any) -> float:
    if not isinstance(task, Mapping) or is_feedback_task_like(task):
        return 0
    if not _task_duration_enabled(task):
        return 0

    for key in TASK_DURATION_MINUTES_KEYS:
        minutes = to_finite_number(task.get(key))
        if minutes is not None and minutes > 0:
            return minutes
    return 0

def activity_effective_duration_minutes(activity: Any) -> float:
    """Task durations win over the activity's own duration once any regular task has one enabled."""

    if not isinstance(activity, Mapping):
        return 0

    tasks = activity.get("tasks") if isinstance(activity.get("tasks"), list) else []
    has_task_duration = any(
        isinstance(task, Mapping) and not is_feedback_task_like(task) and _task_duration_enabled(task)
        for task in tasks
    )
    if has_task_duration:
        return sum(task_duration_minutes(task) for task in tasks)
    return activity_duration_minutes(activity)

def format_hours_da(minutes: Any) -> str:
    """Format minutes as Danish hours with at most one decimal, e.g. ``2,5 t``."""

    value = to_finite_number(minutes)
    if value is None or value <= 0:
        return "0 t"

    tenths = math.floor(value / 60 * 10 + 0.5) / 10
    if tenths <= 0:
        return "0 t"
    if tenths.is_integer():
        return f"{int(tenths)} t"
    return f"{tenths:.1f}".replace(".", ",") + " t"
