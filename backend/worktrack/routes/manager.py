from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from worktrack.config import settings
from worktrack.core.dependencies import get_current_manager
from worktrack.core.exceptions import InputValidationError
from worktrack.core.validation import require_int
from worktrack.database.session import get_db
from worktrack.models.profile import Profile
from worktrack.services import attendance_service
from worktrack.services.attendance_service import serialize_attendance
from worktrack.utils.timeutils import utcnow

router = APIRouter(prefix="/api/manager", tags=["Manager"])


@router.get("/attendance")
def get_user_attendance(
    user_id: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    manager: Profile = Depends(get_current_manager)
):
    """Read-only attendance history of any user, newest first."""
    target_user = require_int(user_id, "user_id")
    row_limit = require_int(limit, "limit") if limit else settings.MANAGER_ATTENDANCE_DEFAULT_LIMIT
    if row_limit < 1:
        raise InputValidationError("limit must be positive")

    now = utcnow()
    rows = attendance_service.list_history(db, target_user, limit=row_limit)
    return {"data": [serialize_attendance(r, now) for r in rows]}
