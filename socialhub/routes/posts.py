from fastapi import APIRouter, Depends, HTTPException, File, Form, UploadFile, Query
from typing import List, Optional
from ..schemas.posts import PostOut, PostUpdateIn, FeedPostOut, CommentIn, CommentOut, LikeOut
from ..schemas.common import Page, PageMeta, ActionOkOut, next_cursor
from ..crud import (
    create_post,
    get_all_posts,
    get_posts_of_user,
    get_post_author,
    update_post,
    delete_post,
    like_post,
    remove_post_like,
    get_likes_count,
    create_comment,
    create_notification,
    public_user,
)
from ..auth import get_current_user
from ..storage import generate_unique_filename, upload_image, delete_image, get_image_url, make_thumbnail
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

POST_IMAGE_BUCKET = 'posts'


def _feed_item(post, current_user_id: str) -> dict:
    liked_by = [like.user_id for like in post.likes]
    return {
        **PostOut.model_validate(post).model_dump(),
        'user': public_user(post.user),
        'liked_by': liked_by,
        'is_liked': current_user_id in liked_by,
    }


async def _require_author(post_id: str, current_user: dict):
    author = await get_post_author(post_id)
    if author is None:
        raise HTTPException(404, 'Post not found')
    if author != current_user['id']:
        raise HTTPException(403, 'Only the author can change this post')


@router.post('/', response_model=PostOut)
async def create(
    post_content: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    current_user: dict = Depends(get_current_user),
):
    if not post_content and not image:
        raise HTTPException(400, 'A post needs content or an image')

    image_fields = {}
    if image:
        content = await image.read()
        try:
            thumbnail, aspect_ratio = make_thumbnail(content)
        except Exception as e:
            raise HTTPException(400, f'Invalid image file: {e}')
        file_name = generate_unique_filename(image.filename or 'image.jpg')
        location = f"{current_user['id']}/images/{file_name}"
        thumb_location = f"{current_user['id']}/thumbnails/{file_name}"
        for path, body, content_type in (
            (location, content, image.content_type or 'image/jpeg'),
            (thumb_location, thumbnail, 'image/jpeg'),
        ):
            result = await upload_image(POST_IMAGE_BUCKET, path, body, content_type)
            if result['error']:
                raise HTTPException(502, f"Failed to upload image: {result['error']}")
        image_fields = {
            'post_image_location': location,
            'post_image_url': get_image_url(POST_IMAGE_BUCKET, location),
            'post_image_thumbnail': get_image_url(POST_IMAGE_BUCKET, thumb_location),
            'post_image_aspect_ratio': aspect_ratio,
        }

    return await create_post(current_user['id'], post_content, **image_fields)


@router.get('/', response_model=Page[FeedPostOut])
async def feed(
    limit: int = Query(10, ge=1, le=50),
    last_cursor: Optional[str] = Query(None, alias='lastCursor'),
    current_user: dict = Depends(get_current_user),
):
    posts = await get_all_posts(current_user['id'], limit, last_cursor)
    return Page(
        data=[_feed_item(p, current_user['id']) for p in posts],
        meta=PageMeta(nextCursor=next_cursor(posts, limit, 'post_id')),
    )


@router.get('/user/{user_id}', response_model=List[FeedPostOut])
async def posts_of_user(user_id: str, current_user: dict = Depends(get_current_user)):
    posts = await get_posts_of_user(user_id, current_user['id'])
    return [_feed_item(p, current_user['id']) for p in posts]


@router.patch('/{post_id}', response_model=PostOut)
async def edit(post_id: str, payload: PostUpdateIn, current_user: dict = Depends(get_current_user)):
    await _require_author(post_id, current_user)
    return await update_post(post_id, payload.model_dump(exclude_unset=True))


@router.delete('/{post_id}', response_model=ActionOkOut)
async def remove(post_id: str, current_user: dict = Depends(get_current_user)):
    await _require_author(post_id, current_user)
    post = await delete_post(post_id)
    if post.post_image_location:
        folder, _, name = post.post_image_location.split('/', 2)
        file_name, _, extension = name.rpartition('.')
        for sub_folder in ('images', 'thumbnails'):
            result = await delete_image(POST_IMAGE_BUCKET, folder, sub_folder, file_name, extension)
            if result['error']:
                logger.warning({'msg': 'post_image_delete_failed', 'post_id': post_id, 'error': result['error']})
    return ActionOkOut(message='Post deleted')


@router.post('/{post_id}/like', response_model=LikeOut)
async def like(post_id: str, current_user: dict = Depends(get_current_user)):
    author = await get_post_author(post_id)
    if author is None:
        raise HTTPException(404, 'Post not found')
    like_id = await like_post(post_id, current_user['id'])
    await create_notification(user_id=author, actor_id=current_user['id'], post_id=post_id)
    return LikeOut(id=like_id, likes_count=await get_likes_count(post_id))


@router.delete('/{post_id}/like', response_model=LikeOut)
async def unlike(post_id: str, current_user: dict = Depends(get_current_user)):
    removed = await remove_post_like(post_id, current_user['id'])
    return LikeOut(id=removed.id, likes_count=await get_likes_count(post_id))


@router.post('/{post_id}/comments', response_model=CommentOut)
async def comment(post_id: str, payload: CommentIn, current_user: dict = Depends(get_current_user)):
    author = await get_post_author(post_id)
    if author is None:
        raise HTTPException(404, 'Post not found')
    c = await create_comment(post_id, current_user['id'], payload.content)
    await create_notification(user_id=author, actor_id=current_user['id'], comment_id=c.comment_id)
    return c
