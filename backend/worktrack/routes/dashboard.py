from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from worktrack.core.dependencies import get_current_user
from worktrack.core.enums import LeaveStatus
from worktrack.database.session import get_db
from worktrack.models.profile import Profile
from worktrack.schemas.leave import LeaveOut
from worktrack.schemas.profile import ProfileOut
from worktrack.schemas.summary import SummaryOut
from worktrack.services import attendance_service, leave_service, summary_service
from worktrack.services.attendance_service import serialize_attendance
from worktrack.utils.timeutils import local_date, utcnow

router = APIRouter(tags=["Dashboard"])

RECENT_DAYS = 7


@router.get("/dashboard")
def get_dashboard(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    now = utcnow()
    today = local_date(now, current_user.timezone)
    record = attendance_service.get_day_record(db, current_user.id, today)
    summary = summary_service.current_month_summary(db, current_user.id, today)
    recent = attendance_service.list_history(db, current_user.id, limit=RECENT_DAYS)
    pending = leave_service.list_my_leave_requests(db, current_user.id, LeaveStatus.PENDING)

    return {
        "profile": ProfileOut.model_validate(current_user).model_dump(mode="json"),
        "today": {
            "date": today.isoformat(),
            "state": attendance_service.get_day_state(record).value,
            "data": serialize_attendance(record, now),
        },
        "monthly_summary": SummaryOut.model_validate(summary).model_dump(mode="json") if summary else None,
        "recent_attendance": [serialize_attendance(r, now) for r in recent],
        "pending_leaves": [LeaveOut.model_validate(l).model_dump(mode="json") for l in pending],
    }
