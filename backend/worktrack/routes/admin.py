from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from worktrack.core.dependencies import get_attendance_editor, get_current_admin
from worktrack.core.validation import require_int, require_iso_date
from worktrack.database.session import get_db
from worktrack.models.profile import Profile
from worktrack.schemas.attendance import AdminAttendanceDelete, AdminAttendanceUpsert
from worktrack.schemas.profile import AdminUserUpdate, CreateUserRequest, ProfileOut
from worktrack.services import admin_service, attendance_service
from worktrack.services.attendance_service import serialize_attendance
from worktrack.utils.email import send_invite_email_safely

router = APIRouter(prefix="/api/admin", tags=["Admin"])


# ================= ATTENDANCE OVERRIDE =================
@router.get("/attendance")
def get_day_attendance(
    user_id: Optional[str] = Query(default=None),
    date: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    admin: Profile = Depends(get_attendance_editor)
):
    target_user = require_int(user_id, "user_id")
    target_date = require_iso_date(date, "date")
    record = attendance_service.get_day_record(db, target_user, target_date)
    return {"data": serialize_attendance(record)}


@router.put("/attendance")
def upsert_day_attendance(
    payload: AdminAttendanceUpsert,
    db: Session = Depends(get_db),
    admin: Profile = Depends(get_attendance_editor)
):
    record = attendance_service.admin_upsert_day(
        db,
        admin,
        payload.user_id,
        payload.date,
        payload.patch.model_dump(exclude_unset=True),
    )
    return {"data": serialize_attendance(record)}


@router.delete("/attendance")
def delete_day_attendance(
    payload: AdminAttendanceDelete,
    db: Session = Depends(get_db),
    admin: Profile = Depends(get_attendance_editor)
):
    attendance_service.admin_delete_day(db, admin, payload.user_id, payload.date)
    return {"ok": True}


# ================= USER PROVISIONING =================
@router.post("/create-user")
def create_user(
    payload: CreateUserRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: Profile = Depends(get_current_admin)
):
    profile, temp_password = admin_service.create_user(
        db,
        email=payload.email,
        role=payload.role,
        full_name=payload.full_name,
        department=payload.department,
        position=payload.position,
    )

    background_tasks.add_task(
        send_invite_email_safely,
        to_email=profile.email,
        employee_id=profile.employee_id,
        temp_password=temp_password,
        full_name=profile.full_name,
    )

    return {"ok": True, "user_id": profile.id}


@router.get("/users", response_model=List[ProfileOut])
def get_users(
    db: Session = Depends(get_db),
    admin: Profile = Depends(get_current_admin)
):
    return admin_service.list_users(db)


@router.patch("/users/{user_id}", response_model=ProfileOut)
def update_user(
    user_id: int,
    payload: AdminUserUpdate,
    db: Session = Depends(get_db),
    admin: Profile = Depends(get_current_admin)
):
    return admin_service.update_user(db, admin, user_id, payload.model_dump(exclude_unset=True))
