from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from worktrack.core.enums import NotificationType


class NotificationOut(BaseModel):
    id: int
    user_id: int
    notification_type: NotificationType
    title: str
    message: str
    is_read: bool
    is_email_sent: bool = False
    scheduled_for: Optional[datetime] = None
    sent_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
