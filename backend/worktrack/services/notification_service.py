import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from worktrack.core.enums import NotificationType
from worktrack.core.exceptions import NotFoundError
from worktrack.models.notification import AttendanceNotification

logger = logging.getLogger(__name__)


def push_notification(
    db: Session,
    *,
    user_id: int,
    notification_type: NotificationType,
    title: str,
    message: str,
    scheduled_for: Optional[datetime] = None,
) -> AttendanceNotification:
    notification = AttendanceNotification(
        user_id=user_id,
        notification_type=notification_type,
        title=title,
        message=message,
        is_read=False,
        scheduled_for=scheduled_for,
        sent_at=None if scheduled_for else datetime.now(timezone.utc),
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)
    logger.debug("Notification %s (%s) queued for user %s", notification.id, notification_type.value, user_id)
    return notification


def list_notifications(
    db: Session,
    user_id: int,
    *,
    limit: int = 50,
    unread_only: bool = False,
) -> list[AttendanceNotification]:
    query = db.query(AttendanceNotification).filter(AttendanceNotification.user_id == user_id)
    if unread_only:
        query = query.filter(AttendanceNotification.is_read == False)  # noqa: E712
    return query.order_by(
        AttendanceNotification.created_at.desc(),
        AttendanceNotification.id.desc(),
    ).limit(limit).all()


def unread_count(db: Session, user_id: int) -> int:
    return db.query(AttendanceNotification).filter(
        AttendanceNotification.user_id == user_id,
        AttendanceNotification.is_read == False  # noqa: E712
    ).count()


def mark_read(db: Session, user_id: int, notification_id: int) -> AttendanceNotification:
    notification = db.query(AttendanceNotification).filter(
        AttendanceNotification.id == notification_id,
        AttendanceNotification.user_id == user_id
    ).first()
    if not notification:
        raise NotFoundError("Notification not found")

    if not notification.is_read:
        notification.is_read = True
        db.commit()
    return notification


def mark_all_read(db: Session, user_id: int) -> int:
    updated = db.query(AttendanceNotification).filter(
        AttendanceNotification.user_id == user_id,
        AttendanceNotification.is_read == False  # noqa: E712
    ).update({"is_read": True}, synchronize_session=False)
    db.commit()
    return updated
