from pydantic import BaseModel, Field
from typing import Generic, List, Optional, TypeVar

T = TypeVar('T')

class PageMeta(BaseModel):
    nextCursor: Optional[str] = None

class Page(BaseModel, Generic[T]):
    data: List[T]
    meta: PageMeta = Field(default_factory=PageMeta)

class ActionOkOut(BaseModel):
    ok: bool = True
    message: Optional[str] = None

def next_cursor(rows: list, limit: int, id_field: str) -> Optional[str]:
    """Cursor for the following page, or None once a short page signals the end"""
    if len(rows) < limit or not rows:
        return None
    last = rows[-1]
    return last[id_field] if isinstance(last, dict) else getattr(last, id_field)
