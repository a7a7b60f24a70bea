from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from worktrack.core.enums import Role
from worktrack.database.base import Base, enum_type


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)

    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    full_name = Column(String(255), nullable=True)
    employee_id = Column(String(32), unique=True, index=True, nullable=True)
    department = Column(String(100), nullable=True)
    position = Column(String(100), nullable=True)

    role = Column(enum_type(Role), nullable=False, default=Role.EMPLOYEE)

    # Self-service fields
    work_schedule = Column(String(32), nullable=False, default="9_to_5")
    timezone = Column(String(64), nullable=False, default="UTC")
    phone = Column(String(32), nullable=True)
    address = Column(Text, nullable=True)
    bio = Column(Text, nullable=True)
    avatar_url = Column(String(512), nullable=True)

    # Admin only
    is_active = Column(Boolean, nullable=False, default=True)
    force_password_change = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
