from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from worktrack.core.enums import AttendanceStatus, WorkMode


class CheckInRequest(BaseModel):
    work_mode: WorkMode = WorkMode.OFFICE
    location_name: Optional[str] = "Office Location"
    notes: Optional[str] = None


class AttendancePatch(BaseModel):
    """Fields an admin may set or clear on a day record.

    Only keys present in the request are applied; an explicit ``null``
    clears the field.
    """

    model_config = ConfigDict(extra="forbid")

    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    break_start: Optional[datetime] = None
    break_end: Optional[datetime] = None
    total_break_minutes: Optional[int] = Field(default=None, ge=0)
    status: Optional[AttendanceStatus] = None
    work_mode: Optional[WorkMode] = None
    location_name: Optional[str] = None
    notes: Optional[str] = None


class AdminAttendanceUpsert(BaseModel):
    user_id: int
    date: date
    patch: AttendancePatch


class AdminAttendanceDelete(BaseModel):
    user_id: int
    date: date
