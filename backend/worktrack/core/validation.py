from __future__ import annotations

from datetime import date
from typing import Any

from sqlalchemy.orm import Session

from worktrack.core.exceptions import InputValidationError, NotFoundError
from worktrack.models.profile import Profile


def require_non_empty_text(value: Any, field_name: str) -> str:
    text = str(value or "").strip()
    if not text:
        raise InputValidationError(f"{field_name} is required")
    return text


def require_int(value: Any, field_name: str) -> int:
    text = require_non_empty_text(value, field_name)
    try:
        return int(text)
    except ValueError:
        raise InputValidationError(f"{field_name} must be an integer")


def require_iso_date(value: Any, field_name: str) -> date:
    text = require_non_empty_text(value, field_name)
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise InputValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def require_profile_exists(db: Session, user_id: int, detail: str = "User not found") -> Profile:
    profile = db.query(Profile).filter(Profile.id == user_id).first()
    if not profile:
        raise NotFoundError(detail)
    return profile
