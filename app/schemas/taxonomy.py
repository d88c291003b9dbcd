"""
Genre, Tag and Category Pydantic schemas
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, Literal
from datetime import datetime
from app.schemas.common import ORMConfig


HEX_COLOR_PATTERN = r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$"

TagType = Literal["genre", "theme", "character", "setting", "style", "audience", "format"]


# ============ Request Schemas ============

class GenreCreate(BaseModel):
    """Schema for creating a genre"""
    name: str = Field(..., min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=120, description="Generated from name when omitted")
    description: Optional[str] = Field(None, max_length=500)
    icon: Optional[str] = None
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    featured: bool = False
    meta_title: Optional[str] = Field(None, max_length=60)
    meta_description: Optional[str] = Field(None, max_length=160)
    order: int = Field(0, ge=0)


class GenreUpdate(BaseModel):
    """Schema for updating a genre"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=120)
    description: Optional[str] = Field(None, max_length=500)
    icon: Optional[str] = None
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    featured: Optional[bool] = None
    meta_title: Optional[str] = Field(None, max_length=60)
    meta_description: Optional[str] = Field(None, max_length=160)
    order: Optional[int] = Field(None, ge=0)

    @field_validator("name", "slug", "featured", "order")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("cannot be null")
        return v


class TagCreate(BaseModel):
    """Schema for creating a tag"""
    name: str = Field(..., min_length=1, max_length=50)
    slug: Optional[str] = Field(None, max_length=80)
    description: Optional[str] = Field(None, max_length=300)
    featured: bool = False
    type: TagType = "theme"


class TagUpdate(BaseModel):
    """Schema for updating a tag"""
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    slug: Optional[str] = Field(None, max_length=80)
    description: Optional[str] = Field(None, max_length=300)
    featured: Optional[bool] = None
    type: Optional[TagType] = None

    @field_validator("name", "slug", "featured", "type")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("cannot be null")
        return v


class CategoryCreate(BaseModel):
    """Schema for creating a blog category"""
    name: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=200)
    icon: Optional[str] = None
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    parent: Optional[str] = Field(None, description="Slug of the parent category")


# ============ Response Schemas ============

class GenreBrief(BaseModel):
    """Genre as embedded in comic payloads"""
    id: int
    name: str
    slug: str
    color: Optional[str]
    icon: Optional[str]

    model_config = ORMConfig


class TagBrief(BaseModel):
    """Tag as embedded in comic payloads"""
    id: int
    name: str
    slug: str
    type: str

    model_config = ORMConfig


class GenreResponse(GenreBrief):
    """Full genre response schema"""
    description: Optional[str]
    color_light: str
    comic_count: int
    featured: bool
    meta_title: Optional[str]
    meta_description: Optional[str]
    order: int
    created_at: datetime
    updated_at: datetime

    model_config = ORMConfig


class TagResponse(TagBrief):
    """Full tag response schema"""
    description: Optional[str]
    comic_count: int
    featured: bool
    created_at: datetime
    updated_at: datetime

    model_config = ORMConfig


class TagCloudItem(BaseModel):
    """Tag sized for a tag cloud"""
    id: int
    name: str
    slug: str
    type: str
    comic_count: int
    font_size: int


class CategoryResponse(BaseModel):
    """Blog category response schema"""
    id: int
    name: str
    slug: str
    description: Optional[str]
    icon: Optional[str]
    color: Optional[str]
    parent: Optional[str]
    post_count: int
    created_at: datetime

    model_config = ORMConfig
