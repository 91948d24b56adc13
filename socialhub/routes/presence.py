from fastapi import APIRouter, Depends, HTTPException
from ..schemas.users import PresenceOut, LastSeenOut
from ..presence import set_online, set_offline, is_online
from ..crud import get_user_info, get_user_last_seen
from ..auth import get_current_user

router = APIRouter()


@router.post('/online', response_model=PresenceOut)
async def go_online(current_user: dict = Depends(get_current_user)):
    """Mark the caller online; clients call this again before the TTL runs out"""
    return await set_online(current_user['id'])


@router.post('/offline', response_model=PresenceOut)
async def go_offline(current_user: dict = Depends(get_current_user)):
    return await set_offline(current_user['id'])


@router.get('/{user_id}', response_model=LastSeenOut)
async def status(user_id: str):
    if not await get_user_info(user_id):
        raise HTTPException(404, 'User not found')
    return LastSeenOut(
        user_id=user_id,
        is_online=await is_online(user_id),
        last_seen=await get_user_last_seen(user_id),
    )
