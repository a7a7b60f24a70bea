from sqlalchemy import Column, Date, Float, ForeignKey, Integer, UniqueConstraint

from worktrack.core.enums import PeriodType
from worktrack.database.base import Base, enum_type


class AttendanceSummary(Base):
    """Pre-aggregated attendance figures, written by an external job."""

    __tablename__ = "attendance_summaries"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)

    period_type = Column(enum_type(PeriodType), nullable=False)
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)

    total_days = Column(Integer, nullable=False, default=0)
    present_days = Column(Integer, nullable=False, default=0)
    absent_days = Column(Integer, nullable=False, default=0)
    late_days = Column(Integer, nullable=False, default=0)
    early_leave_days = Column(Integer, nullable=False, default=0)
    leave_days = Column(Integer, nullable=False, default=0)
    holiday_days = Column(Integer, nullable=False, default=0)

    total_work_hours = Column(Float, nullable=False, default=0)
    total_overtime_hours = Column(Float, nullable=False, default=0)
    attendance_percentage = Column(Float, nullable=False, default=0)
    punctuality_percentage = Column(Float, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("user_id", "period_type", "period_start", name="uq_summary_user_period"),
    )
