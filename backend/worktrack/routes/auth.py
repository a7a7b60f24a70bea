import logging
import uuid
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from worktrack.config import settings
from worktrack.core.dependencies import get_current_user
from worktrack.core.exceptions import NotAuthenticatedError, NotAuthorizedError
from worktrack.core.security import (
    ACCESS_TOKEN_COOKIE,
    create_access_token,
    create_refresh_token,
    decode_token,
    extract_token,
    hash_password,
    verify_password,
)
from worktrack.database.session import get_db
from worktrack.models.profile import Profile
from worktrack.models.user_session import UserSession
from worktrack.schemas.auth import ChangePasswordRequest, LoginRequest, RefreshRequest, TokenResponse
from worktrack.utils.timeutils import ensure_aware_utc

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])
login_router = APIRouter(tags=["Auth"])


def _create_user_session(user_id: int, db: Session, now: datetime) -> UserSession:
    session = UserSession(
        session_id=uuid.uuid4().hex,
        user_id=user_id,
        last_seen_at=now,
        expires_at=now + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def _build_auth_response(profile: Profile, session_id: str) -> dict:
    # The role claim is informational; the server always re-reads the profile.
    token_payload = {
        "sub": str(profile.id),
        "role": profile.role.value,
        "sid": session_id
    }
    return {
        "access_token": create_access_token(token_payload),
        "refresh_token": create_refresh_token(token_payload),
        "token_type": "bearer",
        "force_password_change": bool(profile.force_password_change),
        "user": {
            "id": profile.id,
            "full_name": profile.full_name,
            "role": profile.role
        }
    }


def _set_session_cookie(response: Response, access_token: str) -> None:
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
    )


@login_router.get("/login")
def login_entry():
    return {"detail": "Sign in with POST /auth/login", "login_url": settings.FRONTEND_LOGIN_URL}


@router.post("/login", response_model=TokenResponse)
def login(data: LoginRequest, response: Response, db: Session = Depends(get_db)):
    profile = db.query(Profile).filter(Profile.email == data.email.strip().lower()).first()

    if not profile or not verify_password(data.password, profile.password_hash):
        logger.info("Failed login for %s", data.email)
        raise NotAuthenticatedError("Invalid credentials")
    if not profile.is_active:
        raise NotAuthorizedError("Account is inactive")

    now = datetime.now(timezone.utc)
    session = _create_user_session(profile.id, db, now)
    body = _build_auth_response(profile, session.session_id)
    _set_session_cookie(response, body["access_token"])
    logger.info("User %s signed in", profile.id)
    return body


@router.post("/refresh", response_model=TokenResponse)
def refresh_token(data: RefreshRequest, response: Response, db: Session = Depends(get_db)):
    payload = decode_token(data.refresh_token)
    if payload is None or payload.get("token_type") != "refresh":
        raise NotAuthenticatedError("Invalid refresh token")

    sub = payload.get("sub")
    sid = payload.get("sid")
    if not sub or not sid:
        raise NotAuthenticatedError("Invalid refresh token payload")

    try:
        user_id = int(sub)
    except ValueError:
        raise NotAuthenticatedError("Invalid refresh token subject")

    profile = db.query(Profile).filter(Profile.id == user_id).first()
    if not profile or not profile.is_active:
        raise NotAuthenticatedError("User not available")

    now = datetime.now(timezone.utc)
    session = db.query(UserSession).filter(
        UserSession.session_id == sid,
        UserSession.user_id == user_id,
        UserSession.revoked_at == None  # noqa: E711
    ).first()

    if not session or ensure_aware_utc(session.expires_at) < now:
        raise NotAuthenticatedError("Refresh session expired")

    session.last_seen_at = now
    session.expires_at = now + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    db.commit()

    body = _build_auth_response(profile, session.session_id)
    _set_session_cookie(response, body["access_token"])
    return body


@router.post("/change-password")
def change_password(
    data: ChangePasswordRequest,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    current_user.password_hash = hash_password(data.new_password)
    current_user.force_password_change = False
    db.commit()

    return {"message": "Password updated successfully"}


@router.post("/logout")
def logout(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    payload = decode_token(extract_token(request) or "") or {}
    sid = payload.get("sid")
    if sid:
        session = db.query(UserSession).filter(
            UserSession.session_id == sid,
            UserSession.user_id == current_user.id,
            UserSession.revoked_at == None  # noqa: E711
        ).first()
        if session:
            session.revoked_at = datetime.now(timezone.utc)
            db.commit()

    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    logger.info("User %s signed out", current_user.id)
    return {"message": "Logged out successfully"}
