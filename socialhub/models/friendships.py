import enum
import uuid
from sqlalchemy import Column, String, DateTime, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from . import Base
from .utils import utcnow

class FriendshipStatus(str, enum.Enum):
    PENDING = 'PENDING'
    ACCEPTED = 'ACCEPTED'
    REJECTED = 'REJECTED'
    UNFRIENDED = 'UNFRIENDED'

LIVE_STATUSES = (FriendshipStatus.PENDING, FriendshipStatus.ACCEPTED)
TERMINAL_STATUSES = (FriendshipStatus.REJECTED, FriendshipStatus.UNFRIENDED)

class Friendship(Base):
    __tablename__ = 'friendships'
    friendship_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    requester_id = Column(String(64), ForeignKey('users.user_id', ondelete='CASCADE'), index=True, nullable=False)
    receiver_id = Column(String(64), ForeignKey('users.user_id', ondelete='CASCADE'), index=True, nullable=False)
    status = Column(Enum(FriendshipStatus, native_enum=False, length=16), nullable=False, default=FriendshipStatus.PENDING)
    created_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    __table_args__ = (
        UniqueConstraint('requester_id', 'receiver_id', name='uix_friend_pair'),
    )

    requester = relationship('User', foreign_keys=[requester_id], lazy='raise')
    receiver = relationship('User', foreign_keys=[receiver_id], lazy='raise')
