"""
Like tracker models

Each row records one identifier (user id or client IP) that liked an entity.
The unique constraint keeps ``likes == count(rows)`` even when two identical
requests race.
"""
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.sql import func

from app.core.database import Base


class ComicLike(Base):
    """Model for comic likes"""
    __tablename__ = "comic_likes"

    id = Column(Integer, primary_key=True, index=True)
    comic_id = Column(Integer, ForeignKey("comics.id", ondelete="CASCADE"), nullable=False, index=True)
    user_identifier = Column(String, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Unique constraint - an identifier can only like a comic once
    __table_args__ = (
        UniqueConstraint("comic_id", "user_identifier", name="unique_comic_like"),
    )


class BlogPostLike(Base):
    """Model for blog post likes"""
    __tablename__ = "blog_post_likes"

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("blog_posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_identifier = Column(String, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("post_id", "user_identifier", name="unique_blog_post_like"),
    )
