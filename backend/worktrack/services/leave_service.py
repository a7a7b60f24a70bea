import logging
from datetime import date, datetime, timezone

from sqlalchemy.orm import Session

from worktrack.config import settings
from worktrack.core.enums import LeaveStatus, LeaveType, NotificationType
from worktrack.core.exceptions import ConflictError, InputValidationError, NotFoundError
from worktrack.models.leave import LeaveRequest
from worktrack.models.profile import Profile
from worktrack.schemas.leave import LeaveCreate
from worktrack.services.notification_service import push_notification

logger = logging.getLogger(__name__)


def count_leave_days(start_date: date, end_date: date) -> int:
    """Inclusive number of calendar days between two dates."""
    if end_date < start_date:
        raise InputValidationError("End date cannot be before start date")
    return (end_date - start_date).days + 1


def _get_leave(db: Session, leave_id: int) -> LeaveRequest:
    leave = db.query(LeaveRequest).filter(LeaveRequest.id == leave_id).first()
    if not leave:
        raise NotFoundError("Leave request not found")
    return leave


def _require_pending(leave: LeaveRequest, action: str) -> None:
    if leave.status != LeaveStatus.PENDING:
        raise ConflictError(
            f"Only pending leave requests can be {action} (current status: {leave.status.value})",
            code="leave_not_pending",
        )


# ======================================
# EMPLOYEE
# ======================================
def create_leave_request(db: Session, profile: Profile, payload: LeaveCreate) -> LeaveRequest:
    leave = LeaveRequest(
        user_id=profile.id,
        leave_type=payload.leave_type,
        start_date=payload.start_date,
        end_date=payload.end_date,
        total_days=count_leave_days(payload.start_date, payload.end_date),
        reason=payload.reason,
        status=LeaveStatus.PENDING,
    )
    db.add(leave)
    db.commit()
    db.refresh(leave)
    logger.info("User %s requested %s leave %s..%s", profile.id, leave.leave_type.value, leave.start_date, leave.end_date)
    return leave


def list_my_leave_requests(db: Session, user_id: int, status: LeaveStatus | None = None) -> list[LeaveRequest]:
    query = db.query(LeaveRequest).filter(LeaveRequest.user_id == user_id)
    if status:
        query = query.filter(LeaveRequest.status == status)
    return query.order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc()).all()


def cancel_leave_request(db: Session, profile: Profile, leave_id: int) -> LeaveRequest:
    leave = _get_leave(db, leave_id)
    # Someone else's request looks the same as a missing one.
    if leave.user_id != profile.id:
        raise NotFoundError("Leave request not found")
    _require_pending(leave, "cancelled")

    leave.status = LeaveStatus.CANCELLED
    db.commit()
    db.refresh(leave)
    logger.info("User %s cancelled leave request %s", profile.id, leave.id)
    return leave


def leave_balance(db: Session, user_id: int, year: int) -> dict:
    approved = db.query(LeaveRequest).filter(
        LeaveRequest.user_id == user_id,
        LeaveRequest.status == LeaveStatus.APPROVED,
        LeaveRequest.start_date >= date(year, 1, 1),
        LeaveRequest.end_date <= date(year, 12, 31),
    ).all()

    def used(leave_type: LeaveType) -> int:
        return sum(int(l.total_days or 0) for l in approved if l.leave_type == leave_type)

    return {
        "year": year,
        "vacation_days": settings.VACATION_DAYS_PER_YEAR,
        "sick_days": settings.SICK_DAYS_PER_YEAR,
        "personal_days": settings.PERSONAL_DAYS_PER_YEAR,
        "used_vacation": used(LeaveType.VACATION),
        "used_sick": used(LeaveType.SICK),
        "used_personal": used(LeaveType.PERSONAL),
    }


# ======================================
# MANAGER / ADMIN
# ======================================
def list_leave_requests(db: Session, status: LeaveStatus | None = None) -> list[LeaveRequest]:
    query = db.query(LeaveRequest)
    if status:
        query = query.filter(LeaveRequest.status == status)
    return query.order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc()).all()


def _decide(
    db: Session,
    approver: Profile,
    leave_id: int,
    decision: LeaveStatus,
    rejection_reason: str | None = None,
    now: datetime | None = None,
) -> LeaveRequest:
    leave = _get_leave(db, leave_id)
    verb = "approved" if decision == LeaveStatus.APPROVED else "rejected"
    _require_pending(leave, verb)

    leave.status = decision
    leave.approved_by = approver.id
    leave.approved_at = now or datetime.now(timezone.utc)
    if decision == LeaveStatus.REJECTED:
        leave.rejection_reason = (rejection_reason or "").strip() or None
    db.commit()
    db.refresh(leave)
    logger.info("Leave request %s %s by %s", leave.id, verb, approver.id)

    message = (
        f"Your {leave.leave_type.value} leave from {leave.start_date} to {leave.end_date} "
        f"has been {verb}."
    )
    if leave.rejection_reason:
        message += f" Reason: {leave.rejection_reason}"
    push_notification(
        db,
        user_id=leave.user_id,
        notification_type=NotificationType.LEAVE_APPROVAL,
        title=f"Leave request {verb}",
        message=message,
    )
    return leave


def approve_leave_request(db: Session, approver: Profile, leave_id: int, now: datetime | None = None) -> LeaveRequest:
    return _decide(db, approver, leave_id, LeaveStatus.APPROVED, now=now)


def reject_leave_request(
    db: Session,
    approver: Profile,
    leave_id: int,
    rejection_reason: str | None = None,
    now: datetime | None = None,
) -> LeaveRequest:
    return _decide(db, approver, leave_id, LeaveStatus.REJECTED, rejection_reason, now=now)
