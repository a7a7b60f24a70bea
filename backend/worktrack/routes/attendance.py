from datetime import date
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from worktrack.core.dependencies import get_current_user
from worktrack.database.session import get_db
from worktrack.models.profile import Profile
from worktrack.schemas.attendance import CheckInRequest
from worktrack.services import attendance_service
from worktrack.services.attendance_service import serialize_attendance
from worktrack.utils.timeutils import local_date, utcnow

router = APIRouter()


@router.get("/today")
def get_today(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    now = utcnow()
    record = attendance_service.get_today_record(db, current_user, now)
    return {
        "date": local_date(now, current_user.timezone).isoformat(),
        "state": attendance_service.get_day_state(record).value,
        "data": serialize_attendance(record, now),
    }


@router.post("/check-in", status_code=201)
def check_in(
    payload: Optional[CheckInRequest] = Body(default=None),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    payload = payload or CheckInRequest()
    record = attendance_service.check_in(
        db,
        current_user,
        work_mode=payload.work_mode,
        location_name=payload.location_name,
        notes=payload.notes,
    )
    return {"message": "Checked in", "data": serialize_attendance(record)}


@router.post("/break/start")
def start_break(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    record = attendance_service.start_break(db, current_user)
    return {"message": "Break started", "data": serialize_attendance(record)}


@router.post("/break/end")
def end_break(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    record = attendance_service.end_break(db, current_user)
    return {"message": "Break ended", "data": serialize_attendance(record)}


@router.post("/check-out")
def check_out(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    record = attendance_service.check_out(db, current_user)
    return {"message": "Checked out", "data": serialize_attendance(record)}


@router.post("/undo-checkout")
def undo_checkout(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    record = attendance_service.undo_checkout(db, current_user)
    return {
        "message": "Checkout undone. You are currently checked in.",
        "data": serialize_attendance(record),
    }


@router.get("/history")
def get_history(
    limit: int = Query(default=200, ge=1, le=1000),
    start: Optional[date] = Query(default=None),
    end: Optional[date] = Query(default=None),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    now = utcnow()
    rows = attendance_service.list_history(db, current_user.id, limit=limit, start=start, end=end)
    return {"data": [serialize_attendance(r, now) for r in rows]}
