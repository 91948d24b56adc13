import uuid
from sqlalchemy import Column, String, ForeignKey, UniqueConstraint
from . import Base

class Like(Base):
    __tablename__ = 'likes'
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    post_id = Column(String(36), ForeignKey('posts.post_id', ondelete='CASCADE'), nullable=False)
    user_id = Column(String(64), ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False)
    __table_args__ = (
        UniqueConstraint('post_id', 'user_id', name='uix_post_user_like'),
    )
