"""Rules deciding which task-like records count in performance statistics.

Every predicate follows the same shape: a record without a resolvable day is
excluded, a record whose external event was soft-deleted is excluded unless it
was already completed, anything else is included. Intensity rows must also be
enabled or already carry a value before the soft-delete rule applies.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Optional

from performance_engine.schema import ExternalIntensity, ExternalTask, InternalIntensity


def first_event(value: Any) -> Any:
    """Normalize an owning-event reference delivered as an object or a one-element list."""

    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def _event_field(event: Any, name: str) -> Any:
    if event is None:
        return None
    if isinstance(event, Mapping):
        return event.get(name)
    return getattr(event, name, None)


def _has_date(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def _event_start_date(event: Any) -> Optional[str]:
    start_date = _event_field(event, "start_date")
    return start_date if _has_date(start_date) else None


def _survives_soft_delete(event: Any, completed: bool) -> bool:
    return _event_field(event, "deleted") is not True or completed


def should_include_external_task(task: ExternalTask) -> bool:
    """Return True when an external task counts toward statistics."""

    event = first_event(getattr(task, "event", None))
    if _event_start_date(event) is None:
        return False
    return _survives_soft_delete(event, getattr(task, "completed", None) is True)


def is_intensity_completed(row: Any) -> bool:
    """An intensity row is completed once it holds a finite numeric value."""

    value = getattr(row, "intensity", None)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def should_include_internal_intensity(row: InternalIntensity) -> bool:
    if not _has_date(getattr(row, "activity_date", None)):
        return False
    return getattr(row, "intensity_enabled", None) is True or is_intensity_completed(row)


def should_include_external_intensity(row: ExternalIntensity) -> bool:
    event = first_event(getattr(row, "event", None))
    if _event_start_date(event) is None:
        return False

    completed = is_intensity_completed(row)
    if getattr(row, "intensity_enabled", None) is not True and not completed:
        return False
    return _survives_soft_delete(event, completed)


def external_event_day(record: Any) -> Optional[str]:
    """Return the calendar day of the event owning an external record."""

    start_date = _event_start_date(first_event(getattr(record, "event", None)))
    return start_date[:10] if start_date else None
