from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from .users import UserOut

class PostUpdateIn(BaseModel):
    post_content: Optional[str] = None
    post_image_url: Optional[str] = None

class PostOut(BaseModel):
    post_id: str
    user_id: str
    post_content: Optional[str] = None
    post_image_url: Optional[str] = None
    post_image_thumbnail: Optional[str] = None
    post_image_aspect_ratio: Optional[str] = None
    likes_count: int
    create_date: datetime
    update_date: datetime

    class Config:
        from_attributes = True

class FeedPostOut(PostOut):
    user: UserOut
    liked_by: List[str] = []
    is_liked: bool = False

class CommentIn(BaseModel):
    content: str

class CommentOut(BaseModel):
    comment_id: str
    post_id: str
    user_id: str
    content: str

    class Config:
        from_attributes = True

class LikeOut(BaseModel):
    id: str
    likes_count: int
