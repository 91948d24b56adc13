import pytest
from sqlalchemy.exc import NoResultFound

from socialhub.crud import (
    create_post,
    create_comment,
    create_notification,
    get_notifications,
    get_notifications_count,
    read_notification,
    send_friend_request,
)
from socialhub.models.notifications import NotificationType


@pytest.mark.asyncio
async def test_self_actions_write_nothing(users):
    post = await create_post('user_alice', 'hello')
    rows = await create_notification(user_id='user_alice', actor_id='user_alice', post_id=post.post_id)
    assert rows == []
    assert await get_notifications_count('user_alice') == 0


@pytest.mark.asyncio
async def test_no_reference_writes_nothing(users):
    assert await create_notification(user_id='user_alice', actor_id='user_bob') == []


@pytest.mark.asyncio
async def test_one_row_per_reference(users):
    post = await create_post('user_alice', 'hello')
    comment = await create_comment(post.post_id, 'user_bob', 'nice')

    rows = await create_notification(
        user_id='user_alice', actor_id='user_bob', post_id=post.post_id, comment_id=comment.comment_id
    )

    assert [n.type for n in rows] == [NotificationType.COMMENT, NotificationType.LIKE]
    assert rows[0].comment_id == comment.comment_id and rows[0].post_id is None
    assert rows[1].post_id == post.post_id and rows[1].comment_id is None
    assert all(not n.is_read for n in rows)


@pytest.mark.asyncio
async def test_friend_request_notification(users):
    friendship_id = await send_friend_request('user_bob', 'user_alice')
    rows = await create_notification(user_id='user_alice', actor_id='user_bob', friendship_id=friendship_id)
    assert len(rows) == 1
    assert rows[0].type == NotificationType.FRIENDREQUEST
    assert rows[0].friendship_id == friendship_id


@pytest.mark.asyncio
async def test_listing_reports_unread_count(users):
    post = await create_post('user_alice', 'hello')
    for actor in ('user_bob', 'user_carol', 'user_dave'):
        await create_notification(user_id='user_alice', actor_id=actor, post_id=post.post_id)

    page = await get_notifications('user_alice', 2)
    assert len(page['notifications']) == 2
    assert page['unread_count'] == 3

    await read_notification(page['notifications'][0].notification_id)
    assert await get_notifications_count('user_alice') == 2
    rest = await get_notifications('user_alice', 2, page['notifications'][-1].notification_id)
    assert len(rest['notifications']) == 1
    assert rest['unread_count'] == 2


@pytest.mark.asyncio
async def test_read_is_scoped_to_recipient(users):
    post = await create_post('user_alice', 'hello')
    [n] = await create_notification(user_id='user_alice', actor_id='user_bob', post_id=post.post_id)

    with pytest.raises(NoResultFound):
        await read_notification(n.notification_id, 'user_bob')

    read = await read_notification(n.notification_id, 'user_alice')
    assert read.is_read is True


@pytest.mark.asyncio
async def test_read_unknown_notification(users):
    with pytest.raises(NoResultFound):
        await read_notification('missing')
