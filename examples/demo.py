"""Demo script for the performance engine."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from performance_engine.adapters.json_adapter import parse
from performance_engine.feedback import FeedbackIndex
from performance_engine.metrics import (
    calculate_intensity_performance_totals,
    calculate_task_performance_totals,
    combine_performance,
)


def main() -> None:
    snapshot = parse(str(Path(__file__).with_name("sample_snapshot.json")))
    feedback = FeedbackIndex.from_records(snapshot.feedback)
    tasks = calculate_task_performance_totals(
        snapshot.internal_tasks, snapshot.external_tasks, snapshot.today, feedback=feedback
    )
    intensity = calculate_intensity_performance_totals(
        snapshot.internal_intensity, snapshot.external_intensity, snapshot.today
    )
    print("Tasks:", tasks)
    print("Intensity:", intensity)
    print("Summary:", combine_performance(tasks, intensity))


if __name__ == "__main__":
    main()
