import enum
import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Enum, ForeignKey
from . import Base
from .utils import utcnow

class NotificationType(str, enum.Enum):
    LIKE = 'LIKE'
    COMMENT = 'COMMENT'
    FRIENDREQUEST = 'FRIENDREQUEST'

class Notification(Base):
    __tablename__ = 'notifications'
    notification_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), ForeignKey('users.user_id', ondelete='CASCADE'), index=True, nullable=False)
    actor_id = Column(String(64), ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False)
    post_id = Column(String(36), ForeignKey('posts.post_id', ondelete='CASCADE'), nullable=True)
    comment_id = Column(String(36), ForeignKey('comments.comment_id', ondelete='CASCADE'), nullable=True)
    friendship_id = Column(String(36), ForeignKey('friendships.friendship_id', ondelete='CASCADE'), nullable=True)
    type = Column(Enum(NotificationType, native_enum=False, length=16), nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_date = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
