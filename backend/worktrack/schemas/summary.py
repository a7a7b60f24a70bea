from datetime import date
from typing import Optional

from pydantic import BaseModel

from worktrack.core.enums import PeriodType


class SummaryOut(BaseModel):
    id: int
    period_type: PeriodType
    period_start: date
    period_end: date
    total_days: int
    present_days: int
    absent_days: int
    late_days: int
    early_leave_days: int
    leave_days: int
    holiday_days: int
    total_work_hours: float
    total_overtime_hours: float
    attendance_percentage: float
    punctuality_percentage: float

    model_config = {
        "from_attributes": True
    }


class YearlyRollup(BaseModel):
    months: int
    total_work_hours: float
    total_overtime_hours: float
    present_days: int
    absent_days: int
    late_days: int
    leave_days: int
    attendance_percentage: float
    punctuality_percentage: float


class StatusSlice(BaseModel):
    name: str
    value: int


class AnalyticsOverview(BaseModel):
    current: Optional[SummaryOut] = None
    yearly: Optional[YearlyRollup] = None
    distribution: list[StatusSlice] = []
