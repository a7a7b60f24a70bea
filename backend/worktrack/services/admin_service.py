import logging

from sqlalchemy.orm import Session

from worktrack.config import settings
from worktrack.core.enums import NotificationType, Role
from worktrack.core.exceptions import InputValidationError, NotAuthorizedError, ServiceMisconfiguredError
from worktrack.core.permissions import role_rank
from worktrack.core.security import hash_password
from worktrack.core.validation import require_profile_exists
from worktrack.models.profile import Profile
from worktrack.services.notification_service import push_notification
from worktrack.utils.generator import generate_employee_id, generate_temp_password

logger = logging.getLogger(__name__)


def ensure_provisioning_configured() -> None:
    # New accounts receive their credentials by mail only.
    if not settings.SMTP_HOST:
        raise ServiceMisconfiguredError("Server not configured: SMTP_HOST missing")


def create_user(
    db: Session,
    email: str,
    role: Role,
    full_name: str | None = None,
    department: str | None = None,
    position: str | None = None,
):
    ensure_provisioning_configured()

    email = email.strip().lower()
    if db.query(Profile).filter(Profile.email == email).first():
        raise InputValidationError("Email already exists", code="email_taken")

    count = db.query(Profile).count()
    employee_id = generate_employee_id(count)
    while db.query(Profile).filter(Profile.employee_id == employee_id).first():
        count += 1
        employee_id = generate_employee_id(count)
    temp_password = generate_temp_password()

    profile = Profile(
        email=email,
        full_name=(full_name or "").strip() or None,
        employee_id=employee_id,
        department=department,
        position=position,
        role=role,
        password_hash=hash_password(temp_password),
        is_active=True,
        force_password_change=True,
    )

    db.add(profile)
    db.commit()
    db.refresh(profile)
    logger.info("Provisioned user %s (%s) with role %s", profile.id, employee_id, role.value)

    push_notification(
        db,
        user_id=profile.id,
        notification_type=NotificationType.SYSTEM_UPDATE,
        title="Welcome",
        message="Your account has been created. Please change your password after signing in.",
    )
    return profile, temp_password


def list_users(db: Session) -> list[Profile]:
    return db.query(Profile).order_by(Profile.full_name.asc(), Profile.id.asc()).all()


def update_user(
    db: Session,
    admin: Profile,
    user_id: int,
    updates: dict,
) -> Profile:
    profile = require_profile_exists(db, user_id)
    if profile.id == admin.id and (
        updates.get("is_active") is False
        or (updates.get("role") is not None and role_rank(updates["role"]) < role_rank(admin.role))
    ):
        raise NotAuthorizedError("Admins cannot demote or deactivate themselves")

    for field, value in updates.items():
        if value is None and field in {"role", "is_active"}:
            continue
        setattr(profile, field, value)

    db.commit()
    db.refresh(profile)
    logger.info("Admin %s updated user %s: %s", admin.id, user_id, sorted(updates))
    return profile
