from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from worktrack.core.dependencies import get_current_user
from worktrack.core.permissions import ROLE_CAPABILITIES, parse_role, visible_navigation
from worktrack.database.session import get_db
from worktrack.models.profile import Profile
from worktrack.schemas.profile import ProfileOut, ProfileUpdateSchema
from worktrack.utils.timeutils import zone_for

router = APIRouter(prefix="/profile", tags=["Profile"])


# ---------------- GET PROFILE ----------------
@router.get("", response_model=ProfileOut)
def get_profile(
    current_user: Profile = Depends(get_current_user)
):
    return current_user


# ---------------- UPDATE PROFILE ----------------
@router.put("", response_model=ProfileOut)
def update_profile(
    data: ProfileUpdateSchema,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    updates = data.model_dump(exclude_unset=True)
    if updates.get("timezone"):
        # Fall back silently on unknown zones, like the day boundary logic does.
        updates["timezone"] = str(zone_for(updates["timezone"]))
    for field, value in updates.items():
        if value is None and field in {"work_schedule", "timezone"}:
            continue
        setattr(current_user, field, value)

    db.commit()
    db.refresh(current_user)
    return current_user


# ---------------- NAVIGATION ----------------
@router.get("/navigation")
def get_navigation(
    current_user: Profile = Depends(get_current_user)
):
    role = parse_role(current_user.role)
    return {
        "role": role.value if role else None,
        "capabilities": sorted(c.value for c in ROLE_CAPABILITIES.get(role, ())),
        "navigation": visible_navigation(current_user.role),
    }
