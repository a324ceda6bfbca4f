from datetime import date, datetime, timezone

from performance_engine.dates import day_key, query_bounds, today_iso, week_bounds


def test_day_key():
    assert day_key("2026-02-12T23:59:59.000Z") == "2026-02-12"
    assert day_key("2026-02-12+01:00") == "2026-02-12"
    assert day_key(date(2026, 2, 12)) == "2026-02-12"
    assert day_key("") is None
    assert day_key(None) is None
    assert day_key(20260212) is None


def test_week_bounds_start_on_monday():
    assert week_bounds("2026-02-19") == (date(2026, 2, 16), date(2026, 2, 22))
    assert week_bounds(date(2026, 2, 16)) == (date(2026, 2, 16), date(2026, 2, 22))
    assert week_bounds("2026-02-22") == (date(2026, 2, 16), date(2026, 2, 22))


def test_query_bounds_end_is_exclusive_day_after_sunday():
    assert query_bounds("2026-02-19") == ("2026-02-16", "2026-02-23")


def test_today_iso_uses_timezone():
    late_utc = datetime(2026, 2, 18, 23, 30, tzinfo=timezone.utc)
    assert today_iso("Europe/Copenhagen", now=late_utc) == "2026-02-19"
    assert today_iso("UTC", now=late_utc) == "2026-02-18"
