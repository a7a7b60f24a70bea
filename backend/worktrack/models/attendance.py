from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from worktrack.core.enums import AttendanceStatus, WorkMode
from worktrack.database.base import Base, enum_type


class AttendanceRecord(Base):
    __tablename__ = "attendance"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)

    date = Column(Date, nullable=False)

    check_in = Column(DateTime(timezone=True), nullable=True)
    check_out = Column(DateTime(timezone=True), nullable=True)
    break_start = Column(DateTime(timezone=True), nullable=True)
    break_end = Column(DateTime(timezone=True), nullable=True)

    total_break_minutes = Column(Integer, nullable=False, default=0)
    status = Column(enum_type(AttendanceStatus), nullable=False, default=AttendanceStatus.PRESENT)
    work_mode = Column(enum_type(WorkMode), nullable=False, default=WorkMode.OFFICE)
    location_name = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    profile = relationship("Profile")

    # The only guard against two concurrent check-ins for the same day.
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_attendance_user_date"),
    )
