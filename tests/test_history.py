from datetime import datetime

from performance_engine.history import build_performance_history_weeks, resolve_activity_datetime

NOW = datetime(2026, 2, 28, 10, 0)


def activity(activity_id, activity_date, minutes, tasks=()):
    return {
        "id": activity_id,
        "activity_date": activity_date,
        "activity_time": "10:00:00",
        "duration_minutes": minutes,
        "tasks": list(tasks),
    }


def test_current_week_is_excluded():
    weeks = build_performance_history_weeks(
        [activity("past-1", "2026-02-18", 30), activity("current-1", "2026-02-26", 45)], NOW
    )
    assert len(weeks) == 1
    assert [item["id"] for item in weeks[0].activities] == ["past-1"]
    assert weeks[0].week_key == "2026-02-16"


def test_only_completed_tasks_are_counted():
    tasks = [{"id": "t-1", "completed": True}, {"id": "t-2", "completed": False}, {"id": "t-3", "completed": True}]
    weeks = build_performance_history_weeks([activity("past-2", "2026-02-18", 90, tasks)], NOW)
    assert weeks[0].total_completed_tasks == 2
    assert weeks[0].total_minutes == 0


def test_minutes_count_without_tasks_or_when_all_done():
    weeks = build_performance_history_weeks([activity("past-3", "2026-02-12", 75)], NOW)
    assert weeks[0].total_minutes == 75

    done = [{"id": "t-1", "completed": True}, {"id": "t-2", "completed": True}]
    weeks = build_performance_history_weeks([activity("past-4", "2026-02-11", 60, done)], NOW)
    assert weeks[0].total_minutes == 60
    assert weeks[0].total_completed_tasks == 2


def test_weeks_and_activities_sorted_newest_first():
    weeks = build_performance_history_weeks(
        [
            activity("a", "2026-02-03", 10),
            activity("b", "2026-02-17", 10),
            activity("c", "2026-02-19", 10),
            {"id": "broken"},
        ],
        NOW,
    )
    assert [week.week_key for week in weeks] == ["2026-02-16", "2026-02-02"]
    assert [item["id"] for item in weeks[0].activities] == ["c", "b"]
    assert weeks[0].activity_count == 2


def test_resolve_activity_datetime():
    assert resolve_activity_datetime({"activity_date": "2026-02-18"}) == datetime(2026, 2, 18, 12, 0)
    assert resolve_activity_datetime({"start_time": "2026-02-18T09:30:00"}) == datetime(2026, 2, 18, 9, 30)
    assert resolve_activity_datetime({"title": "no date"}) is None
    assert build_performance_history_weeks(None, NOW) == []
