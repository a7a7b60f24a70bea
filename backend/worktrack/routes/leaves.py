from datetime import date
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from worktrack.core.dependencies import get_current_user, get_leave_approver
from worktrack.core.enums import LeaveStatus
from worktrack.database.session import get_db
from worktrack.models.profile import Profile
from worktrack.schemas.leave import LeaveBalance, LeaveCreate, LeaveOut, LeaveReject
from worktrack.services import leave_service

router = APIRouter(prefix="/leaves", tags=["Leaves"])


# ======================================
# EMPLOYEE APPLY LEAVE
# ======================================
@router.post("", response_model=LeaveOut, status_code=201)
def apply_leave(
    payload: LeaveCreate,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    return leave_service.create_leave_request(db, current_user, payload)


# ======================================
# EMPLOYEE VIEW OWN LEAVES
# ======================================
@router.get("/my", response_model=list[LeaveOut])
def get_my_leaves(
    status: Optional[LeaveStatus] = Query(default=None),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    return leave_service.list_my_leave_requests(db, current_user.id, status)


@router.get("/balance", response_model=LeaveBalance)
def get_leave_balance(
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    return leave_service.leave_balance(db, current_user.id, year or date.today().year)


@router.post("/{leave_id}/cancel", response_model=LeaveOut)
def cancel_leave(
    leave_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    return leave_service.cancel_leave_request(db, current_user, leave_id)


# ======================================
# MANAGER / ADMIN
# ======================================
@router.get("", response_model=list[LeaveOut])
def get_all_leaves(
    status: Optional[LeaveStatus] = Query(default=None),
    db: Session = Depends(get_db),
    approver: Profile = Depends(get_leave_approver)
):
    return leave_service.list_leave_requests(db, status)


@router.put("/{leave_id}/approve", response_model=LeaveOut)
def approve_leave(
    leave_id: int,
    db: Session = Depends(get_db),
    approver: Profile = Depends(get_leave_approver)
):
    return leave_service.approve_leave_request(db, approver, leave_id)


@router.put("/{leave_id}/reject", response_model=LeaveOut)
def reject_leave(
    leave_id: int,
    payload: Optional[LeaveReject] = Body(default=None),
    db: Session = Depends(get_db),
    approver: Profile = Depends(get_leave_approver)
):
    reason = payload.rejection_reason if payload else None
    return leave_service.reject_leave_request(db, approver, leave_id, reason)
