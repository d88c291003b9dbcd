"""
Blog post Pydantic schemas
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal
from datetime import datetime
from app.schemas.common import ORMConfig


PostStatus = Literal["draft", "published", "scheduled", "archived"]


# ============ Request Schemas ============

class BlogPostCreate(BaseModel):
    """Schema for creating a blog post"""
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    content: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, description="Category slug or name")
    featured_image: Optional[str] = None
    status: PostStatus = "draft"
    featured: bool = False
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    tags: Optional[List[str]] = None
    published_at: Optional[datetime] = None
    scheduled_at: Optional[datetime] = None


class BlogPostUpdate(BaseModel):
    """Schema for updating a blog post; only sent fields change"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    content: Optional[str] = Field(None, min_length=1)
    author: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1)
    featured_image: Optional[str] = None
    status: Optional[PostStatus] = None
    featured: Optional[bool] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    tags: Optional[List[str]] = None
    published_at: Optional[datetime] = None
    scheduled_at: Optional[datetime] = None

    @field_validator("title", "content", "author", "category", "status", "featured")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("cannot be null")
        return v


# ============ Response Schemas ============

class BlogPostListItem(BaseModel):
    """Blog post without its content body"""
    id: int
    slug: str
    title: str
    description: Optional[str]
    author: str
    category: str
    featured_image: Optional[str]
    reading_time: Optional[int]
    status: str
    featured: bool
    tags: Optional[List[str]]
    views: int
    likes: int
    published_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    model_config = ORMConfig


class BlogPostDetail(BlogPostListItem):
    """Full blog post"""
    content: str
    meta_title: Optional[str]
    meta_description: Optional[str]
    scheduled_at: Optional[datetime]

    model_config = ORMConfig


class RecentPost(BaseModel):
    """Post summary shown under a category"""
    slug: str
    title: str
    description: Optional[str]
    featured_image: Optional[str]
    published_at: Optional[datetime]
    reading_time: Optional[int]

    model_config = ORMConfig
