from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from worktrack.core.dependencies import get_current_user
from worktrack.database.session import get_db
from worktrack.models.profile import Profile
from worktrack.schemas.notification import NotificationOut
from worktrack.services import notification_service

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=list[NotificationOut])
def get_my_notifications(
    limit: int = Query(default=50, ge=1, le=100),
    unread_only: bool = Query(default=False),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    return notification_service.list_notifications(
        db, current_user.id, limit=limit, unread_only=unread_only
    )


@router.get("/unread-count")
def get_unread_notification_count(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    return {"unread_count": notification_service.unread_count(db, current_user.id)}


@router.patch("/read-all")
def mark_all_notifications_read(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    updated = notification_service.mark_all_read(db, current_user.id)
    return {"message": "All notifications marked as read", "updated": updated}


@router.patch("/{notification_id}/read")
def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    notification_service.mark_read(db, current_user.id, notification_id)
    return {"message": "Notification marked as read"}
