from fastapi import APIRouter, Depends, HTTPException, File, UploadFile, Query
from typing import List, Optional
from ..schemas.users import RegisterIn, UserOut
from ..schemas.common import ActionOkOut
from ..crud import (
    create_user,
    delete_user,
    get_user_id,
    get_user_info,
    search_users,
    update_user_profile_image,
)
from ..auth import get_current_user
from ..storage import generate_unique_filename, upload_image, get_image_url
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

AVATAR_BUCKET = 'avatars'


@router.post('/register', response_model=UserOut)
async def register(payload: RegisterIn, current_user: dict = Depends(get_current_user)):
    try:
        user = await create_user(
            payload.username,
            current_user['id'],
            payload.user_email,
            payload.first_name,
            payload.last_name,
            payload.user_avatar_url,
        )
    except ValueError as e:
        raise HTTPException(400, str(e))
    return user


@router.delete('/me', response_model=ActionOkOut)
async def delete_me(current_user: dict = Depends(get_current_user)):
    await delete_user(current_user['id'])
    return ActionOkOut(message='User deleted')


@router.get('/search', response_model=List[UserOut])
async def search(q: Optional[str] = Query(None), current_user: dict = Depends(get_current_user)):
    return await search_users(current_user['id'], q)


@router.get('/by-username/{username}')
async def user_id_for_username(username: str):
    user_id = await get_user_id(username)
    if not user_id:
        raise HTTPException(404, 'User not found')
    return {'user_id': user_id}


@router.post('/me/avatar', response_model=UserOut)
async def upload_avatar(file: UploadFile = File(...), current_user: dict = Depends(get_current_user)):
    """Store a new avatar and point the profile at its public URL"""
    location = f"{current_user['id']}/{generate_unique_filename(file.filename or 'avatar.jpg')}"
    content = await file.read()
    result = await upload_image(AVATAR_BUCKET, location, content, file.content_type or 'image/jpeg')
    if result['error']:
        raise HTTPException(502, f"Failed to upload avatar: {result['error']}")
    url = get_image_url(AVATAR_BUCKET, location)
    return await update_user_profile_image(current_user['id'], url)


@router.get('/{user_id}', response_model=UserOut)
async def get_user_profile(user_id: str):
    user = await get_user_info(user_id)
    if not user:
        raise HTTPException(404, 'User not found')
    return user
