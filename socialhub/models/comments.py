import uuid
from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from . import Base
from .utils import utcnow

class Comment(Base):
    __tablename__ = 'comments'
    comment_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    post_id = Column(String(36), ForeignKey('posts.post_id', ondelete='CASCADE'), index=True, nullable=False)
    user_id = Column(String(64), ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False)
    content = Column(Text, nullable=False)
    created_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
