from datetime import datetime, timezone

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from worktrack.core.exceptions import NotAuthenticatedError, NotAuthorizedError
from worktrack.core.permissions import Capability, has_capability
from worktrack.core.security import decode_token, extract_token
from worktrack.database.session import get_db
from worktrack.models.profile import Profile
from worktrack.models.user_session import UserSession
from worktrack.utils.timeutils import ensure_aware_utc


def resolve_session_profile(db: Session, token: str | None, *, touch: bool = True) -> Profile:
    """Turn an access token into the caller's profile.

    The role comes from the stored profile, never from the token claims, so a
    demoted user loses access on their next request.
    """
    if not token:
        raise NotAuthenticatedError("Not authenticated")

    payload = decode_token(token)
    if payload is None:
        raise NotAuthenticatedError("Invalid or expired token")
    if payload.get("token_type") != "access":
        raise NotAuthenticatedError("Invalid token type")

    sub = payload.get("sub")
    session_id = payload.get("sid")
    if sub is None or not session_id:
        raise NotAuthenticatedError("Invalid token payload")

    try:
        user_id = int(sub)
    except ValueError:
        raise NotAuthenticatedError("Invalid token subject")

    now = datetime.now(timezone.utc)
    session = db.query(UserSession).filter(
        UserSession.session_id == session_id,
        UserSession.user_id == user_id,
        UserSession.revoked_at == None  # noqa: E711
    ).first()
    if not session or ensure_aware_utc(session.expires_at) < now:
        raise NotAuthenticatedError("Session expired")

    profile = db.query(Profile).filter(Profile.id == user_id).first()
    if not profile:
        raise NotAuthenticatedError("User not found")

    if touch:
        session.last_seen_at = now
        db.commit()
    return profile


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
) -> Profile:
    profile = resolve_session_profile(db, extract_token(request))
    if not profile.is_active:
        raise NotAuthorizedError("Account is inactive")
    return profile


def require_capability(capability: Capability):
    def dependency(current_user: Profile = Depends(get_current_user)) -> Profile:
        if not has_capability(current_user.role, capability):
            raise NotAuthorizedError("Insufficient role for this action")
        return current_user

    return dependency


get_current_manager = require_capability(Capability.VIEW_ANY_ATTENDANCE)
get_leave_approver = require_capability(Capability.DECIDE_LEAVE)
get_attendance_editor = require_capability(Capability.EDIT_ANY_ATTENDANCE)
get_current_admin = require_capability(Capability.MANAGE_USERS)
