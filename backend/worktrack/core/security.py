from datetime import datetime, timedelta, timezone
import uuid

from fastapi import Request
from jose import jwt, JWTError
from passlib.context import CryptContext

from worktrack.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN_COOKIE = "access_token"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def _create_token(data: dict, expires_delta: timedelta) -> str:
    now = datetime.now(timezone.utc)
    to_encode = data.copy()
    to_encode["iat"] = int(now.timestamp())
    to_encode["exp"] = int((now + expires_delta).timestamp())
    if "jti" not in to_encode:
        to_encode["jti"] = uuid.uuid4().hex

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )


def create_access_token(data: dict, expires_minutes: int | None = None) -> str:
    minutes = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    payload = data.copy()
    payload["token_type"] = "access"
    return _create_token(payload, timedelta(minutes=minutes))


def create_refresh_token(data: dict, expires_days: int | None = None) -> str:
    days = expires_days if expires_days is not None else settings.REFRESH_TOKEN_EXPIRE_DAYS
    payload = data.copy()
    payload["token_type"] = "refresh"
    return _create_token(payload, timedelta(days=days))


def decode_token(token: str):
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
    except JWTError:
        return None


def extract_token(request: Request) -> str | None:
    """Bearer header first, then the session cookie set at login."""
    header = request.headers.get("Authorization") or ""
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    cookie = request.cookies.get(ACCESS_TOKEN_COOKIE)
    return cookie or None
