import pytest
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError, NoResultFound

from socialhub.crud import create_post, like_post, remove_post_like, get_likes_count, delete_post
from socialhub.models import AsyncSessionLocal
from socialhub.models.likes import Like


async def like_rows(post_id):
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(Like.user_id).where(Like.post_id == post_id).order_by(Like.user_id))
        return q.scalars().all()


@pytest.mark.asyncio
async def test_like_and_unlike_keep_counter_in_step(users):
    post = await create_post('user_alice', 'hello')
    assert post.likes_count == 0

    await like_post(post.post_id, 'user_bob')
    await like_post(post.post_id, 'user_carol')
    assert await get_likes_count(post.post_id) == 2
    assert await like_rows(post.post_id) == ['user_bob', 'user_carol']

    removed = await remove_post_like(post.post_id, 'user_bob')
    assert removed.user_id == 'user_bob'
    assert await get_likes_count(post.post_id) == 1
    assert await like_rows(post.post_id) == ['user_carol']


@pytest.mark.asyncio
async def test_duplicate_like_is_rejected_and_counter_untouched(users):
    post = await create_post('user_alice', 'hello')
    await like_post(post.post_id, 'user_bob')

    with pytest.raises(IntegrityError):
        await like_post(post.post_id, 'user_bob')

    assert await get_likes_count(post.post_id) == 1


@pytest.mark.asyncio
async def test_like_on_missing_post_fails(users):
    with pytest.raises(IntegrityError):
        await like_post('no-such-post', 'user_bob')


@pytest.mark.asyncio
async def test_unlike_without_like_is_not_found(users):
    post = await create_post('user_alice', 'hello')
    with pytest.raises(NoResultFound):
        await remove_post_like(post.post_id, 'user_bob')
    assert await get_likes_count(post.post_id) == 0


@pytest.mark.asyncio
async def test_deleting_post_drops_its_likes(users):
    post = await create_post('user_alice', 'hello')
    await like_post(post.post_id, 'user_bob')
    await delete_post(post.post_id)

    async with AsyncSessionLocal() as session:
        q = await session.execute(select(func.count()).select_from(Like).where(Like.post_id == post.post_id))
        assert q.scalar_one() == 0
