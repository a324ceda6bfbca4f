"""Compute weekly performance from a JSON snapshot or live from Supabase."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from performance_engine.adapters import json_adapter
from performance_engine.config import load_settings
from performance_engine.dates import today_iso
from performance_engine.feedback import FeedbackIndex
from performance_engine.metrics import (
    calculate_intensity_performance_totals,
    calculate_task_performance_totals,
    combine_performance,
)
from performance_engine.repository import connect
from performance_engine.service import PerformanceService
from performance_engine.trophies import classify_trophy


def _report_from_snapshot(path: Path, today: str | None, tz_name: str) -> dict:
    snapshot = json_adapter.parse(str(path))
    day = today or snapshot.today or today_iso(tz_name)
    feedback = FeedbackIndex.from_records(snapshot.feedback)

    task_totals = calculate_task_performance_totals(
        snapshot.internal_tasks, snapshot.external_tasks, day, feedback=feedback
    )
    intensity_totals = calculate_intensity_performance_totals(
        snapshot.internal_intensity, snapshot.external_intensity, day
    )
    summary = combine_performance(task_totals, intensity_totals)
    return {
        "today": day,
        "tasks": asdict(task_totals),
        "intensity": asdict(intensity_totals),
        "summary": asdict(summary),
        "trophy": classify_trophy(summary.percentage),
    }


async def _report_live(user_id: str, today: str | None, settings) -> dict:
    repository = await connect(settings)
    service = PerformanceService(repository, tz_name=settings.timezone)
    summary = await service.weekly_summary(user_id, today=today)
    return {"user_id": user_id, "summary": asdict(summary), "trophy": classify_trophy(summary.percentage)}


def main() -> None:
    parser = argparse.ArgumentParser(description="Compute weekly training performance")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--data", help="Path to a JSON performance snapshot")
    source.add_argument("--user-id", help="Fetch the current week for this user from Supabase")
    parser.add_argument("--today", help="Override today's date (YYYY-MM-DD)")
    parser.add_argument("--env-file", help="Optional .env file with Supabase settings")
    args = parser.parse_args()

    settings = load_settings(args.env_file)
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.data:
        report = _report_from_snapshot(Path(args.data), args.today, settings.timezone)
    else:
        report = asyncio.run(_report_live(args.user_id, args.today, settings))

    print(json.dumps(report, indent=2))


if __name__ == "__main__":
    main()
