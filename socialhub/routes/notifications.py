from fastapi import APIRouter, Depends, Query
from typing import Optional
from ..schemas.notifications import NotificationsPage, NotificationsMeta, NotificationOut
from ..schemas.friendships import CountOut
from ..schemas.common import next_cursor
from ..crud import get_notifications, read_notification, get_notifications_count
from ..auth import get_current_user

router = APIRouter()

@router.get('/', response_model=NotificationsPage)
async def my_notifications(
    limit: int = Query(10, ge=1, le=50),
    last_cursor: Optional[str] = Query(None, alias='lastCursor'),
    current_user: dict = Depends(get_current_user),
):
    result = await get_notifications(current_user['id'], limit, last_cursor)
    rows = result['notifications']
    return NotificationsPage(
        data=[NotificationOut.model_validate(n) for n in rows],
        meta=NotificationsMeta(
            nextCursor=next_cursor(rows, limit, 'notification_id'),
            unreadCount=result['unread_count'],
        ),
    )

@router.get('/count', response_model=CountOut)
async def unread_count(current_user: dict = Depends(get_current_user)):
    return CountOut(count=await get_notifications_count(current_user['id']))

@router.post('/{notification_id}/read', response_model=NotificationOut)
async def mark_read(notification_id: str, current_user: dict = Depends(get_current_user)):
    return await read_notification(notification_id, current_user['id'])
