from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional
from ..schemas.friendships import FriendRequestOut, FriendshipOut, FriendshipIdOut, FriendOut, CountOut
from ..schemas.common import Page, PageMeta, next_cursor
from ..crud import (
    send_friend_request,
    accept_friend_request,
    reject_friend_request,
    remove_friend,
    get_friendship_status,
    get_pending_friend_requests,
    get_friend_list,
    get_friend_requests_count,
    get_friends_suggestions,
    create_notification,
)
from ..auth import get_current_user

router = APIRouter()


@router.get('/', response_model=List[FriendOut])
async def my_friends(current_user: dict = Depends(get_current_user)):
    return await get_friend_list(current_user['id'])


@router.get('/requests', response_model=Page[FriendRequestOut])
async def pending_requests(
    limit: int = Query(10, ge=1, le=50),
    last_cursor: Optional[str] = Query(None, alias='lastCursor'),
    current_user: dict = Depends(get_current_user),
):
    requests = await get_pending_friend_requests(current_user['id'], limit, last_cursor)
    return Page(data=requests, meta=PageMeta(nextCursor=next_cursor(requests, limit, 'friendship_id')))


@router.get('/requests/count', response_model=CountOut)
async def pending_requests_count(current_user: dict = Depends(get_current_user)):
    return CountOut(count=await get_friend_requests_count(current_user['id']))


@router.get('/suggestions', response_model=Page[FriendOut])
async def suggestions(
    limit: int = Query(10, ge=1, le=50),
    last_cursor: Optional[str] = Query(None, alias='lastCursor'),
    current_user: dict = Depends(get_current_user),
):
    users = await get_friends_suggestions(current_user['id'], limit, last_cursor)
    return Page(data=users, meta=PageMeta(nextCursor=next_cursor(users, limit, 'user_id')))


@router.post('/{user_id}/request', response_model=FriendshipIdOut)
async def friend_request(user_id: str, current_user: dict = Depends(get_current_user)):
    if user_id == current_user['id']:
        raise HTTPException(400, 'Cannot send a friend request to yourself')

    # The data layer allows duplicates; refuse them here
    if await get_friendship_status(current_user['id'], user_id):
        raise HTTPException(409, 'Friend request already pending or users are already friends')

    friendship_id = await send_friend_request(current_user['id'], user_id)
    await create_notification(user_id=user_id, actor_id=current_user['id'], friendship_id=friendship_id)
    return FriendshipIdOut(friendship_id=friendship_id)


@router.post('/{user_id}/accept', response_model=FriendshipOut)
async def accept(user_id: str, current_user: dict = Depends(get_current_user)):
    return await accept_friend_request(current_user['id'], user_id)


@router.post('/{user_id}/reject', response_model=FriendshipOut)
async def reject(user_id: str, current_user: dict = Depends(get_current_user)):
    return await reject_friend_request(current_user['id'], user_id)


@router.delete('/{user_id}', response_model=FriendshipOut)
async def unfriend(user_id: str, current_user: dict = Depends(get_current_user)):
    return await remove_friend(current_user['id'], user_id)
