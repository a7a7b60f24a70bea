from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text

from worktrack.database.base import Base


class AttendanceEditLog(Base):
    __tablename__ = "attendance_edit_logs"

    id = Column(Integer, primary_key=True, index=True)
    # No FK: the audited row may since have been deleted.
    attendance_id = Column(Integer, nullable=True)
    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=False)
    admin_id = Column(Integer, ForeignKey("profiles.id"), nullable=False)
    date = Column(Date, nullable=False)
    action = Column(String(16), nullable=False)  # create | update | delete
    old_payload = Column(Text, nullable=True)
    new_payload = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
