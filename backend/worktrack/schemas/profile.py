from pydantic import BaseModel, EmailStr, field_validator
from datetime import datetime
from typing import Optional
import re

from worktrack.core.enums import Role

PHONE_REGEX = re.compile(r"^\+?[0-9 ()-]{6,20}$")


class ProfileOut(BaseModel):
    id: int
    email: str
    full_name: Optional[str] = None
    employee_id: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    role: Role
    work_schedule: str
    timezone: str
    phone: Optional[str] = None
    address: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


# ---------------- SELF SERVICE ----------------

class ProfileUpdateSchema(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    bio: Optional[str] = None
    work_schedule: Optional[str] = None
    timezone: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def normalize_optional_strings(cls, value):
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: Optional[str]):
        if value is None:
            return value
        if not PHONE_REGEX.fullmatch(value):
            raise ValueError("Phone number is invalid")
        return value


# ---------------- ADMIN ----------------

class CreateUserRequest(BaseModel):
    email: EmailStr
    full_name: Optional[str] = None
    role: Role
    department: Optional[str] = None
    position: Optional[str] = None


class AdminUserUpdate(BaseModel):
    role: Optional[Role] = None
    is_active: Optional[bool] = None
    department: Optional[str] = None
    position: Optional[str] = None
