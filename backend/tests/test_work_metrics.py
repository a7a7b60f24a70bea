import logging
from datetime import datetime, timezone

from worktrack.core.enums import DayState
from worktrack.models.attendance import AttendanceRecord
from worktrack.services.attendance_service import (
    IN_PROGRESS,
    calculate_overtime_minutes,
    calculate_work_hours,
    calculate_work_minutes,
    format_duration,
    get_day_state,
    serialize_attendance,
)


def utc(hour, minute=0, second=0):
    return datetime(2024, 3, 4, hour, minute, second, tzinfo=timezone.utc)


def test_open_day_is_in_progress():
    assert calculate_work_minutes(utc(9), None, 0) is None
    assert calculate_work_hours(utc(9), None, 0) == IN_PROGRESS


def test_full_day_minus_breaks():
    assert calculate_work_hours(utc(9), utc(17, 30), 30) == "8h 0m"


def test_partial_minutes_are_floored():
    assert calculate_work_minutes(utc(9), utc(9, 45, 59), 0) == 45
    assert calculate_work_hours(utc(9), utc(10, 5, 30), 0) == "1h 5m"


def test_naive_values_are_treated_as_utc():
    naive_in = datetime(2024, 3, 4, 9, 0)
    assert calculate_work_minutes(naive_in, utc(10), 0) == 60


def test_breaks_longer_than_the_day_clamp_to_zero(caplog):
    with caplog.at_level(logging.WARNING, logger="worktrack.services.attendance_service"):
        assert calculate_work_minutes(utc(9), utc(10), 90) == 0
    assert "Negative work duration" in caplog.text


def test_format_duration():
    assert format_duration(0) == "0h 0m"
    assert format_duration(61) == "1h 1m"
    assert format_duration(600) == "10h 0m"


def test_overtime_above_standard_day():
    assert calculate_overtime_minutes(None) == 0
    assert calculate_overtime_minutes(400) == 0
    assert calculate_overtime_minutes(500) == 20
    assert calculate_overtime_minutes(500, standard_minutes=450) == 50


def test_day_state_progression():
    assert get_day_state(None) == DayState.NOT_STARTED

    record = AttendanceRecord(check_in=utc(9), total_break_minutes=0)
    assert get_day_state(record) == DayState.CHECKED_IN

    record.break_start = utc(12)
    assert get_day_state(record) == DayState.ON_BREAK

    record.break_end = utc(12, 30)
    assert get_day_state(record) == DayState.CHECKED_IN

    record.check_out = utc(17)
    assert get_day_state(record) == DayState.CHECKED_OUT


def test_serialized_record_carries_derived_fields():
    record = AttendanceRecord(
        id=1,
        user_id=7,
        date=utc(9).date(),
        check_in=utc(9),
        check_out=utc(18, 30),
        total_break_minutes=30,
    )

    data = serialize_attendance(record, now=utc(18, 35))

    assert data["date"] == "2024-03-04"
    assert data["state"] == "checked_out"
    assert data["work_minutes"] == 540
    assert data["work_hours"] == "9h 0m"
    assert data["overtime_minutes"] == 60
    assert data["can_undo_checkout"] is True
    assert data["check_in"] == "2024-03-04T09:00:00+00:00"
    assert data["status"] is None
    assert serialize_attendance(None) is None
