"""initial_schema

Revision ID: 3f1c2a7b9d10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a7b9d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('username', sa.String(length=30), nullable=False),
        sa.Column('password', sa.String(), nullable=False),
        sa.Column('first_name', sa.String(length=50), nullable=True),
        sa.Column('last_name', sa.String(length=50), nullable=True),
        sa.Column('avatar', sa.String(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('email_verified', sa.Boolean(), nullable=False),
        sa.Column('verification_token', sa.String(), nullable=True),
        sa.Column('verification_token_expires', sa.DateTime(timezone=True), nullable=True),
        sa.Column('password_reset_token', sa.String(), nullable=True),
        sa.Column('password_reset_expires', sa.DateTime(timezone=True), nullable=True),
        sa.Column('login_attempts', sa.Integer(), nullable=False),
        sa.Column('lock_until', sa.DateTime(timezone=True), nullable=True),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('country', sa.String(), nullable=True),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_active_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('last_password_change', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])
    op.create_index('ix_users_status', 'users', ['status'])
    op.create_index('ix_users_verification_token', 'users', ['verification_token'])
    op.create_index('ix_users_password_reset_token', 'users', ['password_reset_token'])
    op.create_index('ix_users_last_active_at', 'users', ['last_active_at'])
    op.create_index('ix_users_created_at', 'users', ['created_at'])

    op.create_table(
        'genres',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
        sa.Column('icon', sa.String(), nullable=True),
        sa.Column('color', sa.String(), nullable=True),
        sa.Column('comic_count', sa.Integer(), nullable=False),
        sa.Column('featured', sa.Boolean(), nullable=False),
        sa.Column('meta_title', sa.String(length=60), nullable=True),
        sa.Column('meta_description', sa.String(length=160), nullable=True),
        sa.Column('order', sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_genres_id', 'genres', ['id'])
    op.create_index('ix_genres_name', 'genres', ['name'], unique=True)
    op.create_index('ix_genres_slug', 'genres', ['slug'], unique=True)
    op.create_index('ix_genres_featured', 'genres', ['featured'])

    op.create_table(
        'tags',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('description', sa.String(length=300), nullable=True),
        sa.Column('comic_count', sa.Integer(), nullable=False),
        sa.Column('featured', sa.Boolean(), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_tags_id', 'tags', ['id'])
    op.create_index('ix_tags_name', 'tags', ['name'], unique=True)
    op.create_index('ix_tags_slug', 'tags', ['slug'], unique=True)
    op.create_index('ix_tags_comic_count', 'tags', ['comic_count'])
    op.create_index('ix_tags_featured', 'tags', ['featured'])
    op.create_index('ix_tags_type', 'tags', ['type'])

    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('description', sa.String(length=200), nullable=True),
        sa.Column('icon', sa.String(), nullable=True),
        sa.Column('color', sa.String(), nullable=True),
        sa.Column('parent', sa.String(), nullable=True),
        sa.Column('post_count', sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_categories_id', 'categories', ['id'])
    op.create_index('ix_categories_name', 'categories', ['name'], unique=True)
    op.create_index('ix_categories_slug', 'categories', ['slug'], unique=True)
    op.create_index('ix_categories_parent', 'categories', ['parent'])
    op.create_index('ix_categories_post_count', 'categories', ['post_count'])

    op.create_table(
        'comics',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('subtitle', sa.String(), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('short_description', sa.String(), nullable=True),
        sa.Column('cover_image', sa.String(), nullable=False),
        sa.Column('thumbnail', sa.String(), nullable=True),
        sa.Column('banner_image', sa.String(), nullable=True),
        sa.Column('preview_images', sa.JSON(), nullable=True),
        sa.Column('pdf_url', sa.String(), nullable=True),
        sa.Column('format', sa.String(), nullable=False),
        sa.Column('content_type', sa.String(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('availability', sa.String(), nullable=False),
        sa.Column('age_rating', sa.String(), nullable=False),
        sa.Column('language', sa.String(), nullable=False),
        sa.Column('featured', sa.Boolean(), nullable=False),
        sa.Column('is_free', sa.Boolean(), nullable=False),
        sa.Column('price', sa.Float(), nullable=True),
        sa.Column('currency', sa.String(), nullable=False),
        sa.Column('total_pages', sa.Integer(), nullable=False),
        sa.Column('estimated_read_time', sa.String(), nullable=True),
        sa.Column('views', sa.BigInteger(), nullable=False),
        sa.Column('likes', sa.BigInteger(), nullable=False),
        sa.Column('readers', sa.BigInteger(), nullable=False),
        sa.Column('average_rating', sa.Float(), nullable=False),
        sa.Column('rating_count', sa.Integer(), nullable=False),
        sa.Column('writer', sa.String(), nullable=True),
        sa.Column('artist', sa.String(), nullable=True),
        sa.Column('colorist', sa.String(), nullable=True),
        sa.Column('letterer', sa.String(), nullable=True),
        sa.Column('issue_number', sa.Integer(), nullable=True),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('scheduled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_comics_id', 'comics', ['id'])
    op.create_index('ix_comics_slug', 'comics', ['slug'], unique=True)
    op.create_index('ix_comics_title', 'comics', ['title'])
    op.create_index('ix_comics_featured', 'comics', ['featured'])
    op.create_index('ix_comics_is_free', 'comics', ['is_free'])
    op.create_index('ix_comics_views', 'comics', ['views'])
    op.create_index('ix_comics_average_rating', 'comics', ['average_rating'])
    op.create_index('ix_comics_status_published_at', 'comics', ['status', 'published_at'])

    op.create_table(
        'comic_genres',
        sa.Column('comic_id', sa.Integer(), sa.ForeignKey('comics.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('genre_id', sa.Integer(), sa.ForeignKey('genres.id', ondelete='CASCADE'), primary_key=True),
    )
    op.create_index('ix_comic_genres_genre_id', 'comic_genres', ['genre_id'])

    op.create_table(
        'comic_tags',
        sa.Column('comic_id', sa.Integer(), sa.ForeignKey('comics.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('tag_id', sa.Integer(), sa.ForeignKey('tags.id', ondelete='CASCADE'), primary_key=True),
    )
    op.create_index('ix_comic_tags_tag_id', 'comic_tags', ['tag_id'])

    op.create_table(
        'comic_pages',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('comic_id', sa.Integer(), sa.ForeignKey('comics.id', ondelete='CASCADE'), nullable=False),
        sa.Column('page_number', sa.Integer(), nullable=False),
        sa.Column('image_url', sa.String(), nullable=False),
        sa.Column('image_url_high_res', sa.String(), nullable=True),
        sa.Column('image_url_thumbnail', sa.String(), nullable=True),
        sa.Column('width', sa.Integer(), nullable=True),
        sa.Column('height', sa.Integer(), nullable=True),
        sa.Column('alt_text', sa.String(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('panel_count', sa.Integer(), nullable=True),
        sa.Column('is_double_spread', sa.Boolean(), nullable=False),
        sa.Column('is_processed', sa.Boolean(), nullable=False),
        sa.Column('processing_status', sa.String(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('comic_id', 'page_number', name='unique_comic_page_number'),
    )
    op.create_index('ix_comic_pages_id', 'comic_pages', ['id'])
    op.create_index('ix_comic_pages_comic_id', 'comic_pages', ['comic_id'])

    op.create_table(
        'blog_posts',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('author', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('featured_image', sa.String(), nullable=True),
        sa.Column('reading_time', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('featured', sa.Boolean(), nullable=False),
        sa.Column('meta_title', sa.String(), nullable=True),
        sa.Column('meta_description', sa.Text(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('views', sa.BigInteger(), nullable=False),
        sa.Column('likes', sa.BigInteger(), nullable=False),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('scheduled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_blog_posts_id', 'blog_posts', ['id'])
    op.create_index('ix_blog_posts_slug', 'blog_posts', ['slug'], unique=True)
    op.create_index('ix_blog_posts_author', 'blog_posts', ['author'])
    op.create_index('ix_blog_posts_category', 'blog_posts', ['category'])
    op.create_index('ix_blog_posts_status', 'blog_posts', ['status'])
    op.create_index('ix_blog_posts_featured', 'blog_posts', ['featured'])
    op.create_index('ix_blog_posts_published_at', 'blog_posts', ['published_at'])
    op.create_index('ix_blog_posts_likes_published_at', 'blog_posts', ['likes', 'published_at'])
    op.create_index('ix_blog_posts_views_published_at', 'blog_posts', ['views', 'published_at'])

    op.create_table(
        'comic_likes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('comic_id', sa.Integer(), sa.ForeignKey('comics.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_identifier', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('comic_id', 'user_identifier', name='unique_comic_like'),
    )
    op.create_index('ix_comic_likes_id', 'comic_likes', ['id'])
    op.create_index('ix_comic_likes_comic_id', 'comic_likes', ['comic_id'])
    op.create_index('ix_comic_likes_user_identifier', 'comic_likes', ['user_identifier'])

    op.create_table(
        'blog_post_likes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('post_id', sa.Integer(), sa.ForeignKey('blog_posts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_identifier', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('post_id', 'user_identifier', name='unique_blog_post_like'),
    )
    op.create_index('ix_blog_post_likes_id', 'blog_post_likes', ['id'])
    op.create_index('ix_blog_post_likes_post_id', 'blog_post_likes', ['post_id'])
    op.create_index('ix_blog_post_likes_user_identifier', 'blog_post_likes', ['user_identifier'])

    op.create_table(
        'email_subscribers',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('preferences', sa.JSON(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('verification_token', sa.String(), nullable=True),
        sa.Column('verification_sent_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('verified_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_subscribed', sa.Boolean(), nullable=False),
        sa.Column('unsubscribe_token', sa.String(), nullable=True),
        sa.Column('unsubscribed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('source', sa.String(), nullable=True),
        sa.Column('campaign', sa.String(), nullable=True),
        sa.Column('referral', sa.String(), nullable=True),
        sa.Column('country', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('timezone', sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_email_subscribers_id', 'email_subscribers', ['id'])
    op.create_index('ix_email_subscribers_email', 'email_subscribers', ['email'], unique=True)
    op.create_index('ix_email_subscribers_verification_token', 'email_subscribers', ['verification_token'])
    op.create_index('ix_email_subscribers_unsubscribe_token', 'email_subscribers', ['unsubscribe_token'])
    op.create_index('ix_email_subscribers_created_at', 'email_subscribers', ['created_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('email_subscribers')
    op.drop_table('blog_post_likes')
    op.drop_table('comic_likes')
    op.drop_table('blog_posts')
    op.drop_table('comic_pages')
    op.drop_table('comic_tags')
    op.drop_table('comic_genres')
    op.drop_table('comics')
    op.drop_table('categories')
    op.drop_table('tags')
    op.drop_table('genres')
    op.drop_table('users')
