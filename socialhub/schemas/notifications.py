from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from .common import PageMeta
from ..models.notifications import NotificationType

class NotificationOut(BaseModel):
    notification_id: str
    user_id: str
    actor_id: str
    post_id: Optional[str] = None
    comment_id: Optional[str] = None
    friendship_id: Optional[str] = None
    type: NotificationType
    is_read: bool
    created_date: datetime

    class Config:
        from_attributes = True

class NotificationsMeta(PageMeta):
    unreadCount: int = 0

class NotificationsPage(BaseModel):
    data: List[NotificationOut]
    meta: NotificationsMeta
