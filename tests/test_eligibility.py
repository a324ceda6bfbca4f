import math

from performance_engine.eligibility import (
    first_event,
    is_intensity_completed,
    should_include_external_intensity,
    should_include_external_task,
    should_include_internal_intensity,
)
from performance_engine.schema import ExternalIntensity, ExternalTask, InternalIntensity, OwningEvent


def external_task(completed, start_date="2026-02-17", deleted=False):
    return ExternalTask("x1", completed, OwningEvent(start_date, deleted))


def test_external_task_soft_deleted_pending_is_excluded():
    assert should_include_external_task(external_task(False, deleted=True)) is False


def test_external_task_soft_deleted_completed_is_kept():
    assert should_include_external_task(external_task(True, deleted=True)) is True


def test_external_task_live_event_is_kept():
    assert should_include_external_task(external_task(False)) is True


def test_external_task_without_start_date_is_excluded():
    assert should_include_external_task(external_task(False, start_date=None)) is False
    assert should_include_external_task(external_task(True, start_date=None)) is False
    assert should_include_external_task(external_task(True, start_date="")) is False
    assert should_include_external_task(ExternalTask("x2", True, None)) is False


def test_external_task_with_non_string_date_is_excluded():
    assert should_include_external_task(external_task(True, start_date=20260217)) is False


def test_external_task_accepts_list_wrapped_event():
    task = ExternalTask("x3", False, [OwningEvent("2026-02-17", False)])
    assert should_include_external_task(task) is True
    assert should_include_external_task(ExternalTask("x4", False, [])) is False


def test_first_event_normalization():
    event = OwningEvent("2026-02-17")
    assert first_event([event]) is event
    assert first_event(event) is event
    assert first_event([]) is None
    assert first_event(None) is None


def test_intensity_completed_only_for_finite_numbers():
    assert is_intensity_completed(InternalIntensity("a", "2026-02-17", True, 7))
    assert is_intensity_completed(InternalIntensity("a", "2026-02-17", True, 0))
    assert is_intensity_completed(InternalIntensity("a", "2026-02-17", True, 6.5))
    for value in (None, "7", math.nan, math.inf, -math.inf, True):
        assert not is_intensity_completed(InternalIntensity("a", "2026-02-17", True, value))


def test_internal_intensity_requires_date():
    assert should_include_internal_intensity(InternalIntensity("a", None, True, 7)) is False
    assert should_include_internal_intensity(InternalIntensity("a", "", True, 7)) is False


def test_internal_intensity_enabled_or_completed():
    assert should_include_internal_intensity(InternalIntensity("a", "2026-02-17", True, None)) is True
    assert should_include_internal_intensity(InternalIntensity("a", "2026-02-17", False, 8)) is True
    assert should_include_internal_intensity(InternalIntensity("a", "2026-02-17", False, None)) is False


def test_external_intensity_disabled_without_value_is_excluded():
    row = ExternalIntensity("e1", False, None, OwningEvent("2026-02-17", False))
    assert should_include_external_intensity(row) is False


def test_external_intensity_completed_survives_soft_delete():
    row = ExternalIntensity("e2", False, 8, OwningEvent("2026-02-17", True))
    assert should_include_external_intensity(row) is True


def test_external_intensity_pending_on_deleted_event_is_excluded():
    row = ExternalIntensity("e3", True, None, [OwningEvent("2026-02-17", True)])
    assert should_include_external_intensity(row) is False


def test_external_intensity_accepts_raw_event_mapping():
    row = ExternalIntensity("e4", True, None, [{"start_date": "2026-02-17", "deleted": False}])
    assert should_include_external_intensity(row) is True
