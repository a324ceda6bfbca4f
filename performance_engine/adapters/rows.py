"""Lenient mapping of backend rows into performance records.

Rows come straight from PostgREST responses, including embedded resources. A
malformed value never raises here; it becomes ``None``/``False`` so that the
eligibility rules simply leave the record out.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Optional

from performance_engine.eligibility import first_event
from performance_engine.schema import (
    ExternalIntensity,
    ExternalTask,
    FeedbackRecord,
    InternalIntensity,
    InternalTask,
    OwningEvent,
)


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _id(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def to_finite_number(value: Any) -> Optional[float]:
    """Coerce a numeric or numeric-string column to a finite float, else None."""

    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None


def _embedded(row: Mapping, key: str) -> Any:
    value = first_event(row.get(key))
    return value if isinstance(value, Mapping) else None


def to_owning_event(value: Any) -> Optional[OwningEvent]:
    event = first_event(value)
    if isinstance(event, OwningEvent):
        return event
    if not isinstance(event, Mapping):
        return None
    return OwningEvent(start_date=_text(event.get("start_date")), deleted=event.get("deleted") is True)


def _external_event(row: Mapping) -> Optional[OwningEvent]:
    if "events_external" in row:
        return to_owning_event(row.get("events_external"))
    meta = _embedded(row, "events_local_meta")
    if meta is not None:
        return to_owning_event(meta.get("events_external"))
    return None


def to_internal_task(row: Mapping) -> InternalTask:
    activity = _embedded(row, "activities") or {}
    return InternalTask(
        id=_id(row.get("id")) or "",
        activity_id=_id(row.get("activity_id") or activity.get("id")),
        activity_date=_text(row.get("activity_date") or activity.get("activity_date")),
        completed=row.get("completed") is True,
        title=_text(row.get("title")),
        description=_text(row.get("description")),
        task_template_id=_id(row.get("task_template_id")),
        feedback_template_id=_id(row.get("feedback_template_id")),
    )


def to_external_task(row: Mapping) -> ExternalTask:
    return ExternalTask(
        id=_id(row.get("id")) or "",
        completed=row.get("completed") is True,
        event=_external_event(row),
    )


def to_internal_intensity(row: Mapping) -> InternalIntensity:
    return InternalIntensity(
        id=_id(row.get("id")) or "",
        activity_date=_text(row.get("activity_date")),
        intensity_enabled=row.get("intensity_enabled") is True,
        intensity=row.get("intensity"),
    )


def to_external_intensity(row: Mapping) -> ExternalIntensity:
    return ExternalIntensity(
        id=_id(row.get("id")) or "",
        intensity_enabled=row.get("intensity_enabled") is True,
        intensity=row.get("intensity"),
        event=_external_event(row),
    )


def to_feedback_record(row: Mapping) -> FeedbackRecord:
    return FeedbackRecord(
        activity_id=_id(row.get("activity_id")),
        task_template_id=_id(row.get("task_template_id")),
        task_instance_id=_id(row.get("task_instance_id")),
        rating=row.get("rating"),
        note=_text(row.get("note")),
    )


def map_rows(rows: Any, mapper) -> list:
    """Apply ``mapper`` to every mapping in ``rows``; non-mapping entries are dropped."""

    if not isinstance(rows, list):
        return []
    return [mapper(row) for row in rows if isinstance(row, Mapping)]
