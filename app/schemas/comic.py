"""
Comic Pydantic schemas for request/response validation
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal
from datetime import datetime
from app.schemas.common import ORMConfig
from app.schemas.taxonomy import GenreBrief, TagBrief


ComicFormat = Literal["digital", "print", "both"]
ContentType = Literal["images", "pdf", "both"]
ComicStatus = Literal["draft", "published", "scheduled", "archived"]
Availability = Literal["Completed", "Ongoing", "Coming Soon"]
AgeRating = Literal["ALL", "13+", "16+", "18+"]


# ============ Request Schemas ============

class ComicCreate(BaseModel):
    """Schema for creating a comic"""
    title: str = Field(..., min_length=1, max_length=200)
    slug: Optional[str] = Field(None, max_length=220, description="Generated from title when omitted")
    subtitle: Optional[str] = None
    description: str = Field(..., min_length=1)
    short_description: Optional[str] = Field(None, max_length=300)

    # Media
    cover_image: str = Field(..., min_length=1)
    thumbnail: Optional[str] = None
    banner_image: Optional[str] = None
    preview_images: Optional[List[str]] = None
    pdf_url: Optional[str] = None

    # Content configuration
    format: ComicFormat = "digital"
    content_type: ContentType = "images"
    status: ComicStatus = "draft"
    availability: Availability = "Ongoing"
    age_rating: AgeRating = "13+"
    language: str = "en"
    featured: bool = False

    # Pricing
    is_free: bool = False
    price: Optional[float] = Field(None, ge=0)
    currency: str = "USD"

    # Metadata
    total_pages: int = Field(0, ge=0)
    estimated_read_time: Optional[str] = None
    writer: Optional[str] = None
    artist: Optional[str] = None
    colorist: Optional[str] = None
    letterer: Optional[str] = None
    issue_number: Optional[int] = None

    # Relations
    genres: List[int] = Field(..., min_length=1, description="Genre IDs")
    tags: List[int] = Field(default_factory=list, description="Tag IDs")

    scheduled_at: Optional[datetime] = None
    published_at: Optional[datetime] = None


class ComicUpdate(BaseModel):
    """Schema for updating a comic; only sent fields change"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = Field(None, max_length=220)
    subtitle: Optional[str] = None
    description: Optional[str] = Field(None, min_length=1)
    short_description: Optional[str] = Field(None, max_length=300)
    cover_image: Optional[str] = None
    thumbnail: Optional[str] = None
    banner_image: Optional[str] = None
    preview_images: Optional[List[str]] = None
    pdf_url: Optional[str] = None
    format: Optional[ComicFormat] = None
    content_type: Optional[ContentType] = None
    status: Optional[ComicStatus] = None
    availability: Optional[Availability] = None
    age_rating: Optional[AgeRating] = None
    language: Optional[str] = None
    featured: Optional[bool] = None
    is_free: Optional[bool] = None
    price: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = None
    estimated_read_time: Optional[str] = None
    writer: Optional[str] = None
    artist: Optional[str] = None
    colorist: Optional[str] = None
    letterer: Optional[str] = None
    issue_number: Optional[int] = None
    genres: Optional[List[int]] = Field(None, min_length=1)
    tags: Optional[List[int]] = None
    scheduled_at: Optional[datetime] = None
    published_at: Optional[datetime] = None

    @field_validator(
        "title", "slug", "description", "cover_image", "format", "content_type", "status",
        "availability", "age_rating", "language", "featured", "is_free", "currency"
    )
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("cannot be null")
        return v


class ComicPageCreate(BaseModel):
    """Schema for adding a page to a comic"""
    page_number: int = Field(..., ge=1)
    image_url: str = Field(..., min_length=1)
    image_url_high_res: Optional[str] = None
    image_url_thumbnail: Optional[str] = None
    width: Optional[int] = Field(None, gt=0)
    height: Optional[int] = Field(None, gt=0)
    alt_text: Optional[str] = None
    description: Optional[str] = None
    panel_count: Optional[int] = Field(None, ge=0)
    is_double_spread: bool = False


class RateComic(BaseModel):
    """Schema for rating a comic"""
    rating: int = Field(..., ge=1, le=5)


# ============ Response Schemas ============

class ComicPageResponse(BaseModel):
    """Comic page as listed in the reader"""
    id: int
    page_number: int
    image_url: str
    image_url_thumbnail: Optional[str]
    is_double_spread: bool

    model_config = ORMConfig


class ComicListItem(BaseModel):
    """Comic list item schema (for listing)"""
    id: int
    slug: str
    title: str
    subtitle: Optional[str]
    description: str
    short_description: Optional[str]
    cover_image: str
    thumbnail: Optional[str]
    status: str
    availability: str
    age_rating: str
    featured: bool
    is_free: bool
    price: Optional[float]
    currency: str
    total_pages: int
    views: int
    likes: int
    average_rating: float
    rating_count: int
    published_at: Optional[datetime]
    created_at: datetime
    genres: List[GenreBrief] = []
    tags: List[TagBrief] = []

    model_config = ORMConfig


class ComicDetail(ComicListItem):
    """Full comic detail schema"""
    banner_image: Optional[str]
    preview_images: Optional[List[str]]
    pdf_url: Optional[str]
    format: str
    content_type: str
    language: str
    estimated_read_time: Optional[str]
    readers: int
    writer: Optional[str]
    artist: Optional[str]
    colorist: Optional[str]
    letterer: Optional[str]
    issue_number: Optional[int]
    scheduled_at: Optional[datetime]
    updated_at: datetime

    model_config = ORMConfig


class ComicWithPages(ComicDetail):
    """Comic with its ordered pages"""
    pages: List[ComicPageResponse] = []

    model_config = ORMConfig
