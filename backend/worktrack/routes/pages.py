from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from worktrack.core.dependencies import get_current_admin
from worktrack.core.enums import LeaveStatus
from worktrack.database.session import get_db
from worktrack.models.attendance import AttendanceRecord
from worktrack.models.leave import LeaveRequest
from worktrack.models.profile import Profile
from worktrack.schemas.leave import LeaveOut
from worktrack.schemas.profile import ProfileOut
from worktrack.services import admin_service, leave_service
from worktrack.services.attendance_service import serialize_attendance
from worktrack.utils.timeutils import utcnow

# Everything under /admin is also guarded by AdminRouteGate, which redirects
# before these handlers run; the dependency below keeps them safe without it.
router = APIRouter(prefix="/admin", tags=["Admin pages"])


@router.get("")
def admin_home(
    db: Session = Depends(get_db),
    admin: Profile = Depends(get_current_admin)
):
    today = utcnow().date()
    return {
        "users": db.query(func.count(Profile.id)).scalar(),
        "active_users": db.query(func.count(Profile.id)).filter(Profile.is_active == True).scalar(),  # noqa: E712
        "pending_leaves": db.query(func.count(LeaveRequest.id)).filter(
            LeaveRequest.status == LeaveStatus.PENDING
        ).scalar(),
        "checked_in_today": db.query(func.count(AttendanceRecord.id)).filter(
            AttendanceRecord.date == today,
            AttendanceRecord.check_in != None  # noqa: E711
        ).scalar(),
    }


@router.get("/users")
def admin_users_page(
    db: Session = Depends(get_db),
    admin: Profile = Depends(get_current_admin)
):
    users = admin_service.list_users(db)
    return {"data": [ProfileOut.model_validate(u).model_dump(mode="json") for u in users]}


@router.get("/attendance")
def admin_attendance_page(
    day: Optional[date] = Query(default=None, alias="date"),
    db: Session = Depends(get_db),
    admin: Profile = Depends(get_current_admin)
):
    now = utcnow()
    target = day or now.date()
    rows = db.query(AttendanceRecord).filter(AttendanceRecord.date == target).order_by(
        AttendanceRecord.user_id.asc()
    ).all()
    return {"date": target.isoformat(), "data": [serialize_attendance(r, now) for r in rows]}


@router.get("/leave-approvals")
def admin_leave_approvals_page(
    db: Session = Depends(get_db),
    admin: Profile = Depends(get_current_admin)
):
    pending = leave_service.list_leave_requests(db, LeaveStatus.PENDING)
    return {"data": [LeaveOut.model_validate(l).model_dump(mode="json") for l in pending]}
