from pydantic import BaseModel, field_validator, model_validator
from datetime import date, datetime
from typing import Optional

from worktrack.core.enums import LeaveStatus, LeaveType


# -------- CREATE --------
class LeaveCreate(BaseModel):
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: Optional[str] = None

    @field_validator("reason")
    @classmethod
    def normalize_reason(cls, value: Optional[str]):
        if value is None:
            return value
        return value.strip() or None

    @model_validator(mode="after")
    def validate_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date")
        return self


class LeaveReject(BaseModel):
    rejection_reason: Optional[str] = None


# -------- RESPONSE --------
class LeaveOut(BaseModel):
    id: int
    user_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    total_days: int
    reason: Optional[str] = None
    status: LeaveStatus
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class LeaveBalance(BaseModel):
    year: int
    vacation_days: int
    sick_days: int
    personal_days: int
    used_vacation: int
    used_sick: int
    used_personal: int
