"""initial

Revision ID: 0001
Revises: 
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = '0001'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('users',
        sa.Column('user_id', sa.String(64), primary_key=True),
        sa.Column('username', sa.String(150), nullable=False),
        sa.Column('user_email', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(150), nullable=False),
        sa.Column('last_name', sa.String(150), nullable=False),
        sa.Column('user_avatar_url', sa.String(), nullable=True),
        sa.Column('last_seen', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now())
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_user_email', 'users', ['user_email'], unique=True)
    op.create_table('posts',
        sa.Column('post_id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(64), sa.ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False),
        sa.Column('post_content', sa.Text(), nullable=True),
        sa.Column('post_image_location', sa.String(), nullable=True),
        sa.Column('post_image_url', sa.String(), nullable=True),
        sa.Column('post_image_thumbnail', sa.String(), nullable=True),
        sa.Column('post_image_aspect_ratio', sa.String(32), nullable=True),
        sa.Column('likes_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('create_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('update_date', sa.DateTime(timezone=True), nullable=False)
    )
    op.create_index('ix_posts_user_id', 'posts', ['user_id'])
    op.create_index('ix_posts_update_date', 'posts', ['update_date'])
    op.create_table('comments',
        sa.Column('comment_id', sa.String(36), primary_key=True),
        sa.Column('post_id', sa.String(36), sa.ForeignKey('posts.post_id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(64), sa.ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_date', sa.DateTime(timezone=True), nullable=False)
    )
    op.create_index('ix_comments_post_id', 'comments', ['post_id'])
    op.create_table('likes',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('post_id', sa.String(36), sa.ForeignKey('posts.post_id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(64), sa.ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False),
        sa.UniqueConstraint('post_id', 'user_id', name='uix_post_user_like')
    )
    op.create_table('friendships',
        sa.Column('friendship_id', sa.String(36), primary_key=True),
        sa.Column('requester_id', sa.String(64), sa.ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False),
        sa.Column('receiver_id', sa.String(64), sa.ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sa.String(16), nullable=False),
        sa.Column('created_date', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('requester_id', 'receiver_id', name='uix_friend_pair')
    )
    op.create_index('ix_friendships_requester_id', 'friendships', ['requester_id'])
    op.create_index('ix_friendships_receiver_id', 'friendships', ['receiver_id'])
    op.create_table('notifications',
        sa.Column('notification_id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(64), sa.ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False),
        sa.Column('actor_id', sa.String(64), sa.ForeignKey('users.user_id', ondelete='CASCADE'), nullable=False),
        sa.Column('post_id', sa.String(36), sa.ForeignKey('posts.post_id', ondelete='CASCADE'), nullable=True),
        sa.Column('comment_id', sa.String(36), sa.ForeignKey('comments.comment_id', ondelete='CASCADE'), nullable=True),
        sa.Column('friendship_id', sa.String(36), sa.ForeignKey('friendships.friendship_id', ondelete='CASCADE'), nullable=True),
        sa.Column('type', sa.String(16), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_date', sa.DateTime(timezone=True), nullable=False)
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])
    op.create_index('ix_notifications_created_date', 'notifications', ['created_date'])

def downgrade():
    op.drop_table('notifications')
    op.drop_table('friendships')
    op.drop_table('likes')
    op.drop_table('comments')
    op.drop_table('posts')
    op.drop_table('users')
