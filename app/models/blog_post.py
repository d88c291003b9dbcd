"""
Blog post model - SQLAlchemy ORM
"""
import math
import re

from sqlalchemy import Column, Integer, String, Text, DateTime, BigInteger, Boolean, JSON, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


WORDS_PER_MINUTE = 200


def reading_time_for(content: str) -> int:
    """Minutes needed to read ``content`` at 200 words per minute"""
    words = [w for w in re.split(r"\s+", content or "") if w]
    return math.ceil(len(words) / WORDS_PER_MINUTE)


class BlogPost(Base):
    """Blog post with MDX content and engagement counters"""

    __tablename__ = "blog_posts"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    slug = Column(String, nullable=False, unique=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    content = Column(Text, nullable=False)  # MDX content

    author = Column(String, nullable=False, index=True)
    category = Column(String, nullable=False, index=True)
    featured_image = Column(String, nullable=True)
    reading_time = Column(Integer, nullable=True)

    status = Column(String, default="draft", nullable=False, index=True)
    featured = Column(Boolean, default=False, nullable=False, index=True)

    # SEO
    meta_title = Column(String, nullable=True)
    meta_description = Column(Text, nullable=True)
    tags = Column(JSON, nullable=True)  # Array of strings

    # Engagement metrics
    views = Column(BigInteger, default=0, nullable=False)
    likes = Column(BigInteger, default=0, nullable=False)

    # Dates
    published_at = Column(DateTime(timezone=True), nullable=True, index=True)
    scheduled_at = Column(DateTime(timezone=True), nullable=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    liked_by = relationship("BlogPostLike", cascade="all, delete-orphan", lazy="select")

    __table_args__ = (
        Index("ix_blog_posts_likes_published_at", "likes", "published_at"),
        Index("ix_blog_posts_views_published_at", "views", "published_at"),
    )

    def __repr__(self):
        return f"<BlogPost(id={self.id}, slug={self.slug})>"

    def refresh_reading_time(self):
        self.reading_time = reading_time_for(self.content)

    @property
    def is_published(self) -> bool:
        return self.status == "published"
