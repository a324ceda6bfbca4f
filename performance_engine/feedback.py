"""Feedback-task detection and the "answered feedback counts as done" rule."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from performance_engine.schema import FeedbackRecord, InternalTask

_UUID = r"[0-9a-f-]{8}-[0-9a-f-]{4}-[0-9a-f-]{4}-[0-9a-f-]{4}-[0-9a-f-]{12}"

AFTER_TRAINING_MARKER = re.compile(rf"\[auto-after-training(?::({_UUID}))?\]", re.IGNORECASE)
TEMPLATE_ID_MARKER = re.compile(r"\[\[feedback_template_id:([^\]\s]+)\]\]")


def _normalize_id(value: Any) -> Optional[str]:
    if value is None:
        return None
    normalized = str(value).strip()
    return normalized or None


def strip_feedback_markers(value: Optional[str]) -> str:
    """Remove feedback markers from a title or description."""

    if not value:
        return ""
    cleaned = AFTER_TRAINING_MARKER.sub(" ", value)
    cleaned = TEMPLATE_ID_MARKER.sub(" ", cleaned)
    return re.sub(r"\s{2,}", " ", cleaned).strip()


def parse_template_id_from_marker(value: Optional[str]) -> Optional[str]:
    """Return the feedback template id embedded in ``value``, if any."""

    if not isinstance(value, str) or not value:
        return None
    for pattern in (AFTER_TRAINING_MARKER, TEMPLATE_ID_MARKER):
        for match in pattern.finditer(value):
            if match.group(1):
                return match.group(1)
    return None


def resolve_feedback_template_id(task: Any) -> Optional[str]:
    explicit = _normalize_id(getattr(task, "feedback_template_id", None))
    if explicit:
        return explicit
    return parse_template_id_from_marker(getattr(task, "description", None)) or parse_template_id_from_marker(
        getattr(task, "title", None)
    )


def is_feedback_task(task: Any) -> bool:
    """A task is a feedback prompt when it has no task template but a feedback template."""

    if _normalize_id(getattr(task, "task_template_id", None)):
        return False
    return resolve_feedback_template_id(task) is not None


def has_feedback_answer(record: Optional[FeedbackRecord]) -> bool:
    if record is None:
        return False
    rating = record.rating
    if isinstance(rating, (int, float)) and not isinstance(rating, bool) and math.isfinite(rating):
        return True
    return isinstance(record.note, str) and bool(record.note.strip())


@dataclass
class FeedbackIndex:
    """Feedback records keyed by task instance and by template, both scoped to an activity."""

    by_instance: dict[tuple[str, str], FeedbackRecord] = field(default_factory=dict)
    by_template: dict[tuple[str, str], FeedbackRecord] = field(default_factory=dict)

    @classmethod
    def from_records(cls, records: Iterable[FeedbackRecord]) -> "FeedbackIndex":
        """Build the index; the first record for a key wins, so pass newest first."""

        index = cls()
        for record in records:
            activity_id = _normalize_id(record.activity_id)
            if activity_id is None:
                continue
            instance_id = _normalize_id(record.task_instance_id)
            if instance_id:
                index.by_instance.setdefault((activity_id, instance_id), record)
            template_id = _normalize_id(record.task_template_id)
            if template_id:
                index.by_template.setdefault((activity_id, template_id), record)
        return index

    def find(self, activity_id: Any, task_id: Any, template_id: Any) -> Optional[FeedbackRecord]:
        activity = _normalize_id(activity_id)
        if activity is None:
            return None

        task = _normalize_id(task_id)
        if task and (activity, task) in self.by_instance:
            return self.by_instance[(activity, task)]

        template = _normalize_id(template_id)
        if template:
            return self.by_template.get((activity, template))
        return None


def is_internal_task_completed(
    task: InternalTask,
    feedback: Optional[FeedbackIndex] = None,
    detector: Callable[[Any], bool] = is_feedback_task,
) -> bool:
    """Return True when the task is ticked off or, for feedback tasks, answered."""

    if getattr(task, "completed", None) is True:
        return True
    if feedback is None or not detector(task):
        return False

    record = feedback.find(
        getattr(task, "activity_id", None),
        getattr(task, "id", None),
        resolve_feedback_template_id(task),
    )
    return has_feedback_answer(record)
