from pydantic import BaseModel, EmailStr, field_validator

from worktrack.core.enums import Role


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserInfo(BaseModel):
    id: int
    full_name: str | None = None
    role: Role


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str
    force_password_change: bool
    user: UserInfo


class RefreshRequest(BaseModel):
    refresh_token: str


class ChangePasswordRequest(BaseModel):
    new_password: str

    @field_validator("new_password")
    @classmethod
    def validate_length(cls, value: str):
        if len(value) < 8:
            raise ValueError("Password must be at least 8 characters")
        return value
