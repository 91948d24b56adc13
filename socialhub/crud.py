from .models import AsyncSessionLocal
from .models.users import User
from .models.posts import Post
from .models.comments import Comment
from .models.likes import Like
from .models.friendships import Friendship, FriendshipStatus, LIVE_STATUSES, TERMINAL_STATUSES
from .models.notifications import Notification, NotificationType
from .models.utils import utcnow
from .core import FRIENDSHIP_TRANSITIONS, NOTIFICATIONS_CREATED
from sqlalchemy import select, update, func, or_, and_
from sqlalchemy.orm import selectinload
import logging

logger = logging.getLogger(__name__)

PUBLIC_USER_FIELDS = ('user_id', 'username', 'first_name', 'last_name', 'user_avatar_url')

def public_user(user: User) -> dict:
    return {field: getattr(user, field) for field in PUBLIC_USER_FIELDS}

async def _page(session, stmt, id_col, limit: int, last_cursor: str | None, order_col=None):
    """Run ``stmt`` as one cursor page, newest first.

    The cursor row is excluded. Ordering falls back to ``id_col`` on equal
    ``order_col`` values so consecutive pages never overlap. An unknown
    cursor yields an empty page.
    """
    if order_col is None:
        stmt = stmt.order_by(id_col.desc())
    else:
        stmt = stmt.order_by(order_col.desc(), id_col.desc())
    if last_cursor:
        if order_col is None:
            stmt = stmt.where(id_col < last_cursor)
        else:
            q = await session.execute(select(order_col).where(id_col == last_cursor))
            anchor = q.scalars().first()
            if anchor is None:
                return []
            stmt = stmt.where(or_(order_col < anchor, and_(order_col == anchor, id_col < last_cursor)))
    res = await session.execute(stmt.limit(limit))
    return res.scalars().all()

# users
async def create_user(username: str, user_id: str, user_email: str, first_name: str, last_name: str, user_avatar_url: str | None = None):
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(User).where(User.user_email == user_email))
        if q.scalars().first():
            raise ValueError('User with this email already exists')
        user = User(
            user_id=user_id,
            username=username,
            user_email=user_email,
            first_name=first_name,
            last_name=last_name,
            user_avatar_url=user_avatar_url,
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)
        logger.info({'msg': 'user_created', 'user_id': user_id})
        return user

async def delete_user(user_id: str):
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(User).where(User.user_id == user_id))
        user = q.scalar_one()
        await session.delete(user)
        await session.commit()
        return user

async def get_user_id(username: str):
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(User.user_id).where(User.username == username))
        return q.scalars().first()

async def get_user_info(user_id: str):
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(User).where(User.user_id == user_id))
        user = q.scalars().first()
        if not user:
            return None
        return public_user(user)

async def update_user_profile_image(user_id: str, user_avatar_url: str):
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(User).where(User.user_id == user_id))
        user = q.scalar_one()
        user.user_avatar_url = user_avatar_url
        await session.commit()
        return user

async def update_user_last_seen(user_id: str, last_seen):
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(User).where(User.user_id == user_id))
        user = q.scalars().first()
        if not user:
            return None
        user.last_seen = last_seen
        await session.commit()
        return user

async def get_user_last_seen(user_id: str):
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(User.last_seen).where(User.user_id == user_id))
        return q.scalars().first()

async def search_users(user_id: str, query: str | None):
    if not query:
        return []
    pattern = f'%{query}%'
    async with AsyncSessionLocal() as session:
        q = await session.execute(
            select(User).where(
                User.user_id != user_id,
                or_(
                    User.first_name.ilike(pattern),
                    User.last_name.ilike(pattern),
                    User.username.ilike(pattern),
                ),
            )
        )
        return q.scalars().all()

# posts
async def create_post(user_id: str, post_content: str | None = None, post_image_location: str | None = None,
                      post_image_url: str | None = None, post_image_thumbnail: str | None = None,
                      post_image_aspect_ratio: str | None = None):
    now = utcnow()
    async with AsyncSessionLocal() as session:
        post = Post(
            user_id=user_id,
            post_content=post_content,
            post_image_location=post_image_location,
            post_image_url=post_image_url,
            post_image_thumbnail=post_image_thumbnail,
            post_image_aspect_ratio=post_image_aspect_ratio,
            create_date=now,
            update_date=now,
        )
        session.add(post)
        await session.commit()
        await session.refresh(post)
        return post

async def get_post_author(post_id: str):
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(Post.user_id).where(Post.post_id == post_id))
        return q.scalars().first()

async def get_all_posts(user_id: str, limit: int, last_cursor: str | None = None):
    # user_id is accepted for parity with the per-user feed; the global feed ignores it
    async with AsyncSessionLocal() as session:
        stmt = select(Post).options(selectinload(Post.likes), selectinload(Post.user))
        return await _page(session, stmt, Post.post_id, limit, last_cursor, order_col=Post.update_date)

async def get_posts_of_user(user_id: str, current_user_id: str):
    async with AsyncSessionLocal() as session:
        q = await session.execute(
            select(Post)
            .where(Post.user_id == user_id)
            .options(
                selectinload(Post.likes.and_(Like.user_id == current_user_id)),
                selectinload(Post.user),
            )
            .order_by(Post.update_date.desc(), Post.post_id.desc())
        )
        return q.scalars().all()

POST_EDITABLE_FIELDS = ('post_content', 'post_image_location', 'post_image_url',
                        'post_image_thumbnail', 'post_image_aspect_ratio')

async def update_post(post_id: str, fields: dict):
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(Post).where(Post.post_id == post_id))
        post = q.scalar_one()
        for key, value in fields.items():
            if key in POST_EDITABLE_FIELDS:
                setattr(post, key, value)
        post.update_date = utcnow()
        await session.commit()
        await session.refresh(post)
        return post

async def delete_post(post_id: str):
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(Post).where(Post.post_id == post_id))
        post = q.scalar_one()
        await session.delete(post)
        await session.commit()
        return post

async def create_comment(post_id: str, user_id: str, content: str):
    async with AsyncSessionLocal() as session:
        c = Comment(post_id=post_id, user_id=user_id, content=content)
        session.add(c)
        await session.commit()
        await session.refresh(c)
        return c

# likes: row and counter change in the same transaction
async def like_post(post_id: str, user_id: str):
    async with AsyncSessionLocal() as session:
        async with session.begin():
            like = Like(post_id=post_id, user_id=user_id)
            session.add(like)
            await session.flush()
            await session.execute(
                update(Post)
                .where(Post.post_id == post_id)
                .values(likes_count=Post.likes_count + 1)
                .execution_options(synchronize_session=False)
            )
        return like.id

async def remove_post_like(post_id: str, user_id: str):
    async with AsyncSessionLocal() as session:
        async with session.begin():
            q = await session.execute(select(Like).where(Like.post_id == post_id, Like.user_id == user_id))
            like = q.scalar_one()
            await session.delete(like)
            await session.execute(
                update(Post)
                .where(Post.post_id == post_id)
                .values(likes_count=Post.likes_count - 1)
                .execution_options(synchronize_session=False)
            )
        return like

async def get_likes_count(post_id: str):
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(Post.likes_count).where(Post.post_id == post_id))
        return q.scalar_one()

# friendships
def _between(user_a: str, user_b: str):
    return or_(
        and_(Friendship.requester_id == user_a, Friendship.receiver_id == user_b),
        and_(Friendship.requester_id == user_b, Friendship.receiver_id == user_a),
    )

async def send_friend_request(requester_id: str, receiver_id: str):
    """Open a PENDING request, reusing a rejected/unfriended row for the pair."""
    async with AsyncSessionLocal() as session:
        q = await session.execute(
            select(Friendship).where(
                _between(requester_id, receiver_id),
                Friendship.status.in_(TERMINAL_STATUSES),
            )
        )
        fr = q.scalars().first()
        if fr:
            fr.requester_id = requester_id
            fr.receiver_id = receiver_id
            fr.status = FriendshipStatus.PENDING
            fr.created_date = utcnow()
        else:
            fr = Friendship(
                requester_id=requester_id,
                receiver_id=receiver_id,
                status=FriendshipStatus.PENDING,
                created_date=utcnow(),
            )
            session.add(fr)
        await session.commit()
        FRIENDSHIP_TRANSITIONS.labels(status=FriendshipStatus.PENDING.value).inc()
        return fr.friendship_id

async def _answer_friend_request(receiver_id: str, requester_id: str, status: FriendshipStatus):
    async with AsyncSessionLocal() as session:
        q = await session.execute(
            select(Friendship).where(
                Friendship.requester_id == requester_id,
                Friendship.receiver_id == receiver_id,
                Friendship.status == FriendshipStatus.PENDING,
            )
        )
        fr = q.scalar_one()
        fr.status = status
        await session.commit()
        FRIENDSHIP_TRANSITIONS.labels(status=status.value).inc()
        return fr

async def accept_friend_request(receiver_id: str, requester_id: str):
    return await _answer_friend_request(receiver_id, requester_id, FriendshipStatus.ACCEPTED)

async def reject_friend_request(receiver_id: str, requester_id: str):
    return await _answer_friend_request(receiver_id, requester_id, FriendshipStatus.REJECTED)

async def remove_friend(user_id: str, target_user_id: str):
    async with AsyncSessionLocal() as session:
        q = await session.execute(
            select(Friendship).where(
                _between(user_id, target_user_id),
                Friendship.status.in_(LIVE_STATUSES),
            )
        )
        fr = q.scalar_one()
        fr.status = FriendshipStatus.UNFRIENDED
        await session.commit()
        FRIENDSHIP_TRANSITIONS.labels(status=FriendshipStatus.UNFRIENDED.value).inc()
        return fr

async def get_friendship_status(user_a: str, user_b: str):
    async with AsyncSessionLocal() as session:
        q = await session.execute(
            select(Friendship).where(_between(user_a, user_b), Friendship.status.in_(LIVE_STATUSES))
        )
        return q.scalars().first()

async def get_pending_friend_requests(user_id: str, limit: int, last_cursor: str | None = None):
    async with AsyncSessionLocal() as session:
        stmt = (
            select(Friendship)
            .where(Friendship.receiver_id == user_id, Friendship.status == FriendshipStatus.PENDING)
            .options(selectinload(Friendship.requester))
        )
        rows = await _page(session, stmt, Friendship.friendship_id, limit, last_cursor,
                           order_col=Friendship.created_date)
        return [{'friendship_id': fr.friendship_id, **public_user(fr.requester)} for fr in rows]

async def get_friend_list(user_id: str):
    async with AsyncSessionLocal() as session:
        q = await session.execute(
            select(Friendship)
            .where(
                or_(Friendship.requester_id == user_id, Friendship.receiver_id == user_id),
                Friendship.status == FriendshipStatus.ACCEPTED,
            )
            .options(selectinload(Friendship.requester), selectinload(Friendship.receiver))
        )
        friends = []
        for fr in q.scalars().all():
            other = fr.receiver if fr.requester_id == user_id else fr.requester
            friends.append(public_user(other))
        return friends

async def get_friend_requests_count(user_id: str):
    async with AsyncSessionLocal() as session:
        q = await session.execute(
            select(func.count())
            .select_from(Friendship)
            .where(Friendship.receiver_id == user_id, Friendship.status == FriendshipStatus.PENDING)
        )
        return q.scalar_one()

async def get_friends_suggestions(user_id: str, limit: int, last_cursor: str | None = None):
    related = (
        select(Friendship.friendship_id)
        .where(
            or_(
                and_(Friendship.requester_id == user_id, Friendship.receiver_id == User.user_id),
                and_(Friendship.receiver_id == user_id, Friendship.requester_id == User.user_id),
            ),
            Friendship.status.in_(LIVE_STATUSES),
        )
        .exists()
    )
    async with AsyncSessionLocal() as session:
        stmt = select(User).where(User.user_id != user_id, ~related)
        rows = await _page(session, stmt, User.user_id, limit, last_cursor)
        return [public_user(u) for u in rows]

# notifications
async def create_notification(user_id: str, actor_id: str, post_id: str | None = None,
                              comment_id: str | None = None, friendship_id: str | None = None):
    """Write one notification per reference given; nothing for self-actions."""
    if user_id == actor_id:
        return []
    rows = []
    if comment_id:
        rows.append(Notification(user_id=user_id, actor_id=actor_id, comment_id=comment_id,
                                 type=NotificationType.COMMENT))
    if post_id:
        rows.append(Notification(user_id=user_id, actor_id=actor_id, post_id=post_id,
                                 type=NotificationType.LIKE))
    if friendship_id:
        rows.append(Notification(user_id=user_id, actor_id=actor_id, friendship_id=friendship_id,
                                 type=NotificationType.FRIENDREQUEST))
    if not rows:
        return []
    async with AsyncSessionLocal() as session:
        session.add_all(rows)
        await session.commit()
    for n in rows:
        NOTIFICATIONS_CREATED.labels(type=n.type.value).inc()
    return rows

async def get_notifications(user_id: str, limit: int, last_cursor: str | None = None):
    async with AsyncSessionLocal() as session:
        async with session.begin():
            stmt = select(Notification).where(Notification.user_id == user_id)
            notifications = await _page(session, stmt, Notification.notification_id, limit, last_cursor,
                                        order_col=Notification.created_date)
            q = await session.execute(
                select(func.count())
                .select_from(Notification)
                .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            )
            unread_count = q.scalar_one()
        return {'notifications': notifications, 'unread_count': unread_count}

async def read_notification(notification_id: str, user_id: str | None = None):
    stmt = select(Notification).where(Notification.notification_id == notification_id)
    if user_id is not None:
        stmt = stmt.where(Notification.user_id == user_id)
    async with AsyncSessionLocal() as session:
        q = await session.execute(stmt)
        n = q.scalar_one()
        n.is_read = True
        await session.commit()
        return n

async def get_notifications_count(user_id: str):
    async with AsyncSessionLocal() as session:
        q = await session.execute(
            select(func.count())
            .select_from(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
        )
        return q.scalar_one()
