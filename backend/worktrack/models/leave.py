from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from worktrack.core.enums import LeaveStatus, LeaveType
from worktrack.database.base import Base, enum_type


class LeaveRequest(Base):
    __tablename__ = "leave_requests"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)

    leave_type = Column(enum_type(LeaveType), nullable=False)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    total_days = Column(Integer, nullable=False)

    reason = Column(Text, nullable=True)

    status = Column(enum_type(LeaveStatus), nullable=False, default=LeaveStatus.PENDING)

    approved_by = Column(Integer, ForeignKey("profiles.id"), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    employee = relationship("Profile", foreign_keys=[user_id])
    approver = relationship("Profile", foreign_keys=[approved_by])
