import json
import logging
from datetime import date, datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from worktrack.config import settings
from worktrack.core.enums import AttendanceStatus, DayState, WorkMode
from worktrack.core.exceptions import ConflictError, InputValidationError, UndoWindowExpired
from worktrack.models.attendance import AttendanceRecord
from worktrack.models.attendance_edit_log import AttendanceEditLog
from worktrack.models.profile import Profile
from worktrack.utils.timeutils import ensure_aware_utc, isoformat_or_none, local_date, utcnow

logger = logging.getLogger(__name__)

IN_PROGRESS = "In progress"

TIMESTAMP_FIELDS = ("check_in", "check_out", "break_start", "break_end")

# Fields an admin override may touch, with the value an explicit null resets to.
ADMIN_EDITABLE_FIELDS = {
    "check_in": None,
    "check_out": None,
    "break_start": None,
    "break_end": None,
    "total_break_minutes": 0,
    "status": AttendanceStatus.PRESENT,
    "work_mode": WorkMode.OFFICE,
    "location_name": None,
    "notes": None,
}


# ================= DERIVED METRICS =================

def _whole_minutes(start: datetime, end: datetime) -> int:
    seconds = (ensure_aware_utc(end) - ensure_aware_utc(start)).total_seconds()
    return int(seconds // 60)


def calculate_work_minutes(
    check_in: datetime | None,
    check_out: datetime | None,
    total_break_minutes: int = 0,
) -> int | None:
    """Worked minutes for a day, or None while the day is still open."""
    if check_out is None or check_in is None:
        return None

    minutes = _whole_minutes(check_in, check_out) - int(total_break_minutes or 0)
    if minutes < 0:
        logger.warning(
            "Negative work duration (%s min) for check_in=%s check_out=%s breaks=%s; clamped to 0",
            minutes, check_in, check_out, total_break_minutes,
        )
        return 0
    return minutes


def format_duration(minutes: int) -> str:
    hours, remainder = divmod(minutes, 60)
    return f"{hours}h {remainder}m"


def calculate_work_hours(
    check_in: datetime | None,
    check_out: datetime | None,
    total_break_minutes: int = 0,
) -> str:
    minutes = calculate_work_minutes(check_in, check_out, total_break_minutes)
    if minutes is None:
        return IN_PROGRESS
    return format_duration(minutes)


def calculate_overtime_minutes(work_minutes: int | None, standard_minutes: int | None = None) -> int:
    if work_minutes is None:
        return 0
    standard = settings.STANDARD_WORK_MINUTES if standard_minutes is None else standard_minutes
    return max(0, work_minutes - standard)


# ================= DAY STATE =================

def get_day_state(record: AttendanceRecord | None) -> DayState:
    if record is None or record.check_in is None:
        return DayState.NOT_STARTED
    if record.check_out is not None:
        return DayState.CHECKED_OUT
    if record.break_start is not None and record.break_end is None:
        return DayState.ON_BREAK
    return DayState.CHECKED_IN


def can_undo_checkout(
    record: AttendanceRecord | None,
    now: datetime | None = None,
    window_minutes: int | None = None,
) -> bool:
    if record is None or record.check_out is None:
        return False
    window = settings.UNDO_WINDOW_MINUTES if window_minutes is None else window_minutes
    elapsed = ensure_aware_utc(now or utcnow()) - ensure_aware_utc(record.check_out)
    return elapsed <= timedelta(minutes=window)


def serialize_attendance(record: AttendanceRecord | None, now: datetime | None = None) -> dict | None:
    if record is None:
        return None
    work_minutes = calculate_work_minutes(record.check_in, record.check_out, record.total_break_minutes)
    return {
        "id": record.id,
        "user_id": record.user_id,
        "date": record.date.isoformat(),
        "check_in": isoformat_or_none(record.check_in),
        "check_out": isoformat_or_none(record.check_out),
        "break_start": isoformat_or_none(record.break_start),
        "break_end": isoformat_or_none(record.break_end),
        "total_break_minutes": int(record.total_break_minutes or 0),
        "status": record.status.value if record.status else None,
        "work_mode": record.work_mode.value if record.work_mode else None,
        "location_name": record.location_name,
        "notes": record.notes,
        "state": get_day_state(record).value,
        "work_minutes": work_minutes,
        "work_hours": IN_PROGRESS if work_minutes is None else format_duration(work_minutes),
        "overtime_minutes": calculate_overtime_minutes(work_minutes),
        "can_undo_checkout": can_undo_checkout(record, now),
    }


# ================= QUERIES =================

def get_day_record(db: Session, user_id: int, day: date) -> AttendanceRecord | None:
    return db.query(AttendanceRecord).filter(
        AttendanceRecord.user_id == user_id,
        AttendanceRecord.date == day,
    ).first()


def get_today_record(db: Session, profile: Profile, now: datetime | None = None) -> AttendanceRecord | None:
    today = local_date(now or utcnow(), profile.timezone)
    return get_day_record(db, profile.id, today)


def list_history(
    db: Session,
    user_id: int,
    *,
    limit: int = 200,
    start: date | None = None,
    end: date | None = None,
) -> list[AttendanceRecord]:
    query = db.query(AttendanceRecord).filter(AttendanceRecord.user_id == user_id)
    if start:
        query = query.filter(AttendanceRecord.date >= start)
    if end:
        query = query.filter(AttendanceRecord.date <= end)
    return query.order_by(AttendanceRecord.date.desc()).limit(limit).all()


# ================= TRANSITIONS =================

def _duplicate_check_in(record: AttendanceRecord) -> ConflictError:
    if record.check_out is None:
        return ConflictError("You are already checked in for today.", code="already_checked_in")
    return ConflictError("Today's attendance is already completed.", code="already_completed")


def _require_record(db: Session, profile: Profile, now: datetime) -> AttendanceRecord:
    record = get_today_record(db, profile, now)
    if record is None or record.check_in is None:
        raise ConflictError("You have not checked in today.", code="not_checked_in")
    return record


def _save(db: Session, record: AttendanceRecord) -> AttendanceRecord:
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(record)
    return record


def check_in(
    db: Session,
    profile: Profile,
    now: datetime | None = None,
    *,
    work_mode: WorkMode = WorkMode.OFFICE,
    location_name: str | None = None,
    notes: str | None = None,
) -> AttendanceRecord:
    now = ensure_aware_utc(now or utcnow())
    today = local_date(now, profile.timezone)

    existing = get_day_record(db, profile.id, today)
    if existing is not None:
        logger.info("Refused check-in for user %s on %s: record exists", profile.id, today)
        raise _duplicate_check_in(existing)

    record = AttendanceRecord(
        user_id=profile.id,
        date=today,
        check_in=now,
        total_break_minutes=0,
        status=AttendanceStatus.PRESENT,
        work_mode=work_mode or WorkMode.OFFICE,
        location_name=location_name,
        notes=notes,
    )
    db.add(record)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent check-in for the same day.
        db.rollback()
        logger.info("Concurrent check-in for user %s on %s rejected by unique constraint", profile.id, today)
        raise ConflictError("You have already checked in today.", code="already_checked_in")
    db.refresh(record)
    logger.info("User %s checked in for %s", profile.id, today)
    return record


def start_break(db: Session, profile: Profile, now: datetime | None = None) -> AttendanceRecord:
    now = ensure_aware_utc(now or utcnow())
    record = _require_record(db, profile, now)
    state = get_day_state(record)
    if state == DayState.CHECKED_OUT:
        raise ConflictError("You have already checked out today.", code="already_checked_out")
    if state == DayState.ON_BREAK:
        raise ConflictError("You are already on a break.", code="already_on_break")

    record.break_start = now
    record.break_end = None
    _save(db, record)
    logger.info("User %s started a break", profile.id)
    return record


def end_break(db: Session, profile: Profile, now: datetime | None = None) -> AttendanceRecord:
    now = ensure_aware_utc(now or utcnow())
    record = _require_record(db, profile, now)
    if get_day_state(record) != DayState.ON_BREAK:
        raise ConflictError("You are not on a break.", code="not_on_break")

    record.break_end = now
    record.total_break_minutes = int(record.total_break_minutes or 0) + max(
        0, _whole_minutes(record.break_start, now)
    )
    _save(db, record)
    logger.info("User %s ended a break (total %s min)", profile.id, record.total_break_minutes)
    return record


def check_out(db: Session, profile: Profile, now: datetime | None = None) -> AttendanceRecord:
    now = ensure_aware_utc(now or utcnow())
    record = _require_record(db, profile, now)
    state = get_day_state(record)
    if state == DayState.CHECKED_OUT:
        raise ConflictError("You have already checked out today.", code="already_checked_out")
    if state == DayState.ON_BREAK:
        raise ConflictError("End your break before checking out.", code="on_break")

    record.check_out = now
    _save(db, record)
    logger.info("User %s checked out", profile.id)
    return record


def undo_checkout(db: Session, profile: Profile, now: datetime | None = None) -> AttendanceRecord:
    now = ensure_aware_utc(now or utcnow())
    record = _require_record(db, profile, now)
    if record.check_out is None:
        raise ConflictError("You have not checked out today.", code="not_checked_out")
    if not can_undo_checkout(record, now):
        logger.info("Undo checkout refused for user %s: window expired", profile.id)
        raise UndoWindowExpired(
            f"Undo window expired. You can undo within {settings.UNDO_WINDOW_MINUTES} minutes of checkout."
        )

    record.check_out = None
    _save(db, record)
    logger.info("User %s undid checkout", profile.id)
    return record


# ================= ADMIN OVERRIDE =================

def _validate_record(record: AttendanceRecord) -> None:
    check_in_at = ensure_aware_utc(record.check_in)
    check_out_at = ensure_aware_utc(record.check_out)
    break_start_at = ensure_aware_utc(record.break_start)
    break_end_at = ensure_aware_utc(record.break_end)

    if check_out_at and not check_in_at:
        raise InputValidationError("check_out requires check_in")
    if check_out_at and check_out_at < check_in_at:
        raise InputValidationError("check_out cannot be earlier than check_in")
    if break_start_at and not check_in_at:
        raise InputValidationError("break_start requires check_in")
    if break_end_at and not break_start_at:
        raise InputValidationError("break_end requires break_start")
    if break_end_at and break_end_at < break_start_at:
        raise InputValidationError("break_end cannot be earlier than break_start")
    if int(record.total_break_minutes or 0) < 0:
        raise InputValidationError("total_break_minutes cannot be negative")


def _audit_payload(record: AttendanceRecord | None) -> dict:
    if record is None:
        return {}
    payload = serialize_attendance(record) or {}
    return {key: payload[key] for key in ("id", "date", *ADMIN_EDITABLE_FIELDS)}


def append_edit_log(
    db: Session,
    *,
    attendance_id: int | None,
    user_id: int,
    admin_id: int,
    target_date: date,
    action: str,
    old_payload: dict,
    new_payload: dict,
) -> None:
    db.add(AttendanceEditLog(
        attendance_id=attendance_id,
        user_id=user_id,
        admin_id=admin_id,
        date=target_date,
        action=action,
        old_payload=json.dumps(old_payload or {}),
        new_payload=json.dumps(new_payload or {}),
    ))


def admin_upsert_day(
    db: Session,
    admin: Profile,
    user_id: int,
    day: date,
    patch: dict,
) -> AttendanceRecord:
    """Create or update a day record with arbitrary field values.

    No transition guard applies here; the resulting row only has to satisfy
    the record invariants.
    """
    if db.query(Profile.id).filter(Profile.id == user_id).first() is None:
        raise InputValidationError(f"user_id {user_id} does not reference an existing user")
    unknown = set(patch) - set(ADMIN_EDITABLE_FIELDS)
    if unknown:
        raise InputValidationError(f"Unknown attendance fields: {', '.join(sorted(unknown))}")

    record = get_day_record(db, user_id, day)
    old_payload = _audit_payload(record)
    action = "update" if record else "create"
    if record is None:
        record = AttendanceRecord(
            user_id=user_id,
            date=day,
            total_break_minutes=0,
            status=AttendanceStatus.PRESENT,
            work_mode=WorkMode.OFFICE,
        )

    for field, value in patch.items():
        if value is None:
            value = ADMIN_EDITABLE_FIELDS[field]
        elif field in TIMESTAMP_FIELDS:
            value = ensure_aware_utc(value)
        setattr(record, field, value)

    try:
        _validate_record(record)
    except InputValidationError:
        db.rollback()
        raise

    try:
        if action == "create":
            db.add(record)
        db.flush()
        append_edit_log(
            db,
            attendance_id=record.id,
            user_id=user_id,
            admin_id=admin.id,
            target_date=day,
            action=action,
            old_payload=old_payload,
            new_payload=_audit_payload(record),
        )
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise InputValidationError(f"Could not save attendance: {exc.orig}")
    except Exception:
        db.rollback()
        raise

    db.refresh(record)
    logger.info("Admin %s %sd attendance for user %s on %s", admin.id, action, user_id, day)
    return record


def admin_delete_day(db: Session, admin: Profile, user_id: int, day: date) -> bool:
    record = get_day_record(db, user_id, day)
    if record is None:
        return False

    append_edit_log(
        db,
        attendance_id=record.id,
        user_id=user_id,
        admin_id=admin.id,
        target_date=day,
        action="delete",
        old_payload=_audit_payload(record),
        new_payload={},
    )
    db.delete(record)
    db.commit()
    logger.info("Admin %s deleted attendance for user %s on %s", admin.id, user_id, day)
    return True
