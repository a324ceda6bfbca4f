"""Core data schema for performance records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional, Union


@dataclass
class OwningEvent:
    """External calendar event that owns an external task or intensity row."""

    start_date: Optional[str]
    deleted: bool = False


EventRef = Union[OwningEvent, list, None]


@dataclass
class InternalTask:
    """Task row attached to an activity created inside the app."""

    id: str
    activity_id: Optional[str]
    activity_date: Optional[str]
    completed: bool = False
    title: Optional[str] = None
    description: Optional[str] = None
    task_template_id: Optional[str] = None
    feedback_template_id: Optional[str] = None


@dataclass
class ExternalTask:
    """Task row attached to a synced external calendar event."""

    id: str
    completed: bool
    event: EventRef = None


@dataclass
class InternalIntensity:
    id: str
    activity_date: Optional[str]
    intensity_enabled: bool = False
    intensity: Any = None


@dataclass
class ExternalIntensity:
    id: str
    intensity_enabled: bool = False
    intensity: Any = None
    event: EventRef = None


@dataclass
class FeedbackRecord:
    """Self-feedback answer for a feedback template within an activity."""

    activity_id: Optional[str]
    task_template_id: Optional[str]
    task_instance_id: Optional[str] = None
    rating: Any = None
    note: Optional[str] = None


@dataclass
class IntensityTotals:
    """Week/today counters for one family of records."""

    total_week: int = 0
    completed_week: int = 0
    total_today: int = 0
    completed_today: int = 0


@dataclass
class PerformanceSummary:
    """Combined task + intensity progress consumed by the progress widget."""

    percentage: int = 0
    completed_tasks: int = 0
    total_tasks: int = 0
    completed_tasks_for_week: int = 0
    total_tasks_for_week: int = 0


@dataclass
class Trophy:
    week: int
    year: int
    type: str
    percentage: float
    completed_tasks: int
    total_tasks: int


@dataclass
class HistoryWeek:
    week_start: date
    week_key: str
    activities: list[dict] = field(default_factory=list)
    activity_count: int = 0
    total_completed_tasks: int = 0
    total_minutes: float = 0.0
