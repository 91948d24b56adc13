from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime

class RegisterIn(BaseModel):
    username: str
    user_email: EmailStr
    first_name: str
    last_name: str
    user_avatar_url: Optional[str] = None

class UserOut(BaseModel):
    user_id: str
    username: str
    first_name: str
    last_name: str
    user_avatar_url: Optional[str] = None

    class Config:
        from_attributes = True

class PresenceOut(BaseModel):
    userId: str
    isOnline: bool
    lastSeen: Optional[str] = None

class LastSeenOut(BaseModel):
    user_id: str
    is_online: bool
    last_seen: Optional[datetime] = None
