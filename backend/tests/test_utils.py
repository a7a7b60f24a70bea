import logging
import smtplib
from datetime import date, datetime, timezone

import pytest

from worktrack.core.exceptions import InputValidationError
from worktrack.core.validation import require_int, require_iso_date, require_non_empty_text
from worktrack.utils import email as email_utils
from worktrack.utils.generator import generate_employee_id, generate_temp_password
from worktrack.utils.timeutils import ensure_aware_utc, local_date, zone_for


def test_employee_id_format():
    assert generate_employee_id(0, year=2024) == "EMP20240001"
    assert generate_employee_id(41, year=2024) == "EMP20240042"


def test_temp_password():
    password = generate_temp_password()
    assert len(password) == 12
    assert generate_temp_password(20) != generate_temp_password(20)


def test_required_values():
    assert require_non_empty_text("  x ", "name") == "x"
    assert require_int("12", "user_id") == 12
    assert require_iso_date("2024-02-29", "date") == date(2024, 2, 29)

    for call in (
        lambda: require_non_empty_text("   ", "name"),
        lambda: require_int(None, "user_id"),
        lambda: require_int("1.5", "user_id"),
        lambda: require_iso_date("2024-02-30", "date"),
    ):
        with pytest.raises(InputValidationError):
            call()


def test_time_helpers():
    naive = datetime(2024, 3, 4, 23, 30)
    assert ensure_aware_utc(naive).tzinfo == timezone.utc
    assert ensure_aware_utc(None) is None
    assert local_date(naive, "UTC") == date(2024, 3, 4)
    assert local_date(naive, "Asia/Tokyo") == date(2024, 3, 5)
    assert zone_for("Nowhere/Special") == timezone.utc
    assert zone_for("America") == timezone.utc


def test_invite_failures_are_logged_not_raised(monkeypatch, caplog):
    def refuse(*args, **kwargs):
        raise OSError("connection refused")

    monkeypatch.setattr(smtplib, "SMTP", refuse)

    with caplog.at_level(logging.WARNING, logger="worktrack.utils.email"):
        email_utils.send_invite_email_safely(
            to_email="new@example.com",
            employee_id="EMP20240001",
            temp_password="secret",
            full_name="New Person",
        )

    assert "Invite email to new@example.com failed" in caplog.text
