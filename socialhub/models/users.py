from sqlalchemy import Column, String, DateTime, func
from . import Base

class User(Base):
    __tablename__ = 'users'
    # issued by the identity provider, not generated here
    user_id = Column(String(64), primary_key=True)
    username = Column(String(150), unique=True, index=True, nullable=False)
    user_email = Column(String(255), unique=True, index=True, nullable=False)
    first_name = Column(String(150), nullable=False)
    last_name = Column(String(150), nullable=False)
    user_avatar_url = Column(String, nullable=True)
    last_seen = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
