import uuid
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from . import Base
from .utils import utcnow

class Post(Base):
    __tablename__ = 'posts'
    post_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), ForeignKey('users.user_id', ondelete='CASCADE'), index=True, nullable=False)
    post_content = Column(Text, nullable=True)
    post_image_location = Column(String, nullable=True)
    post_image_url = Column(String, nullable=True)
    post_image_thumbnail = Column(String, nullable=True)
    post_image_aspect_ratio = Column(String(32), nullable=True)
    likes_count = Column(Integer, nullable=False, default=0)
    create_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    update_date = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    user = relationship('User', lazy='raise')
    likes = relationship('Like', lazy='raise', passive_deletes=True)
