from pydantic import BaseModel
from typing import Optional
from .users import UserOut
from ..models.friendships import FriendshipStatus

class FriendRequestOut(BaseModel):
    friendship_id: str
    user_id: str
    username: str
    first_name: str
    last_name: str
    user_avatar_url: Optional[str] = None

class FriendshipOut(BaseModel):
    friendship_id: str
    requester_id: str
    receiver_id: str
    status: FriendshipStatus

    class Config:
        from_attributes = True

class FriendshipIdOut(BaseModel):
    friendship_id: str

class CountOut(BaseModel):
    count: int

FriendOut = UserOut
