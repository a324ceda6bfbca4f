"""JSON adapter for performance snapshots."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from performance_engine.adapters.rows import (
    map_rows,
    to_external_intensity,
    to_external_task,
    to_feedback_record,
    to_internal_intensity,
    to_internal_task,
)
from performance_engine.schema import (
    ExternalIntensity,
    ExternalTask,
    FeedbackRecord,
    InternalIntensity,
    InternalTask,
)

_SECTIONS = {
    "internal_tasks": to_internal_task,
    "external_tasks": to_external_task,
    "internal_intensity": to_internal_intensity,
    "external_intensity": to_external_intensity,
    "feedback": to_feedback_record,
}


@dataclass
class PerformanceSnapshot:
    """Week-scoped rows captured from the backend, plus the day they were captured for."""

    today: Optional[str] = None
    internal_tasks: list[InternalTask] = field(default_factory=list)
    external_tasks: list[ExternalTask] = field(default_factory=list)
    internal_intensity: list[InternalIntensity] = field(default_factory=list)
    external_intensity: list[ExternalIntensity] = field(default_factory=list)
    feedback: list[FeedbackRecord] = field(default_factory=list)


def _parse_today(value) -> Optional[str]:
    if value is None:
        return None
    try:
        return date.fromisoformat(str(value)[:10]).isoformat()
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Snapshot: malformed today '{value}'") from exc


def parse_payload(payload) -> PerformanceSnapshot:
    """Convert a decoded snapshot object into a ``PerformanceSnapshot``."""

    if not isinstance(payload, dict):
        raise ValueError("JSON payload must be an object of row sections")

    sections = {}
    for name, mapper in _SECTIONS.items():
        rows = payload.get(name, [])
        if not isinstance(rows, list):
            raise ValueError(f"Section '{name}' must be a list of objects")
        sections[name] = map_rows(rows, mapper)

    return PerformanceSnapshot(today=_parse_today(payload.get("today")), **sections)


def parse(file_path: str) -> PerformanceSnapshot:
    """Parse a JSON snapshot file."""

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    return parse_payload(payload)
