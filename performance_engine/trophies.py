"""Weekly trophy history."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable

from performance_engine.adapters.rows import to_finite_number
from performance_engine.schema import Trophy

TROPHY_TYPES = ("gold", "silver", "bronze")

def _first_present(row: Mapping, *keys: str) -> Any:
    for key in keys:
        if row.get(key) is not None:
            return row[key]
    return None

def classify_trophy(percentage: float) -> str:
    if percentage >= 80:
        return "gold"
    if percentage >= 60:
        return "silver"
    return "bronze"

def normalize_performance_rows_to_trophies(rows: Iterable[Mapping]) -> list[Trophy]:
    """Map ``weekly_performance`` rows (and legacy trophy rows) to ``Trophy`` records."""

    trophies: list[Trophy] = []
    for row in rows:
        if not isinstance(row, Mapping):
            continue

        trophy_type = _first_present(row, "trophy_type", "type")
        if trophy_type not in TROPHY_TYPES:
            continue

        week = to_finite_number(_first_present(row, "week_number", "week"))
        year = to_finite_number(row.get("year"))
        if week is None or year is None:
            continue

        percentage = to_finite_number(row.get("percentage")) or 0.0
        completed = to_finite_number(_first_present(row, "completed_tasks", "completedTasks")) or 0.0
        total = to_finite_number(_first_present(row, "total_tasks", "totalTasks")) or 0.0

        trophies.append(
            Trophy(
                week=int(week),
                year=int(year),
                type=trophy_type,
                percentage=int(percentage) if percentage.is_integer() else percentage,
                completed_tasks=int(completed),
                total_tasks=int(total),
            )
        )
    return trophies

def sum_completed_tasks_by_trophy_type(rows: Iterable[Any]) -> dict[str, int]:
    """Sum completed tasks per trophy type; negative or unparsable counts add nothing."""

    totals = {trophy_type: 0 for trophy_type in TROPHY_TYPES}
    for row in rows:
        if isinstance(row, Trophy):
            trophy_type, raw = row.type, row.completed_tasks
        elif isinstance(row, Mapping):
            trophy_type = row.get("type")
            raw = _first_present(row, "completed_tasks", "completedTasks")
        else:
            continue

        if trophy_type not in totals:
            continue
        value = to_finite_number(raw)
        if value is None or value < 0:
            continue
        totals[trophy_type] += int(value)
    return totals
