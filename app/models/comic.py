"""
Comic model - SQLAlchemy ORM
"""
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, BigInteger, Boolean, Float,
    ForeignKey, JSON, Table, UniqueConstraint, Index
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


# Many-to-Many pivot tables
comic_genres = Table(
    "comic_genres",
    Base.metadata,
    Column("comic_id", Integer, ForeignKey("comics.id", ondelete="CASCADE"), primary_key=True),
    Column("genre_id", Integer, ForeignKey("genres.id", ondelete="CASCADE"), primary_key=True, index=True),
)

comic_tags = Table(
    "comic_tags",
    Base.metadata,
    Column("comic_id", Integer, ForeignKey("comics.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True, index=True),
)


class Comic(Base):
    """Comic model for comic content and metadata"""

    __tablename__ = "comics"

    # Primary Key
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    slug = Column(String, nullable=False, unique=True, index=True)
    title = Column(String, nullable=False, index=True)
    subtitle = Column(String, nullable=True)
    description = Column(Text, nullable=False)
    short_description = Column(String, nullable=True)

    # Media
    cover_image = Column(String, nullable=False)
    thumbnail = Column(String, nullable=True)
    banner_image = Column(String, nullable=True)
    preview_images = Column(JSON, nullable=True)  # Array of URLs
    pdf_url = Column(String, nullable=True)

    # Content
    format = Column(String, default="digital", nullable=False)
    content_type = Column(String, default="images", nullable=False)
    status = Column(String, default="draft", nullable=False)
    availability = Column(String, default="Ongoing", nullable=False)
    age_rating = Column(String, default="13+", nullable=False)
    language = Column(String, default="en", nullable=False)
    featured = Column(Boolean, default=False, nullable=False, index=True)

    # Pricing
    is_free = Column(Boolean, default=False, nullable=False, index=True)
    price = Column(Float, nullable=True)
    currency = Column(String, default="USD", nullable=False)

    # Statistics
    total_pages = Column(Integer, default=0, nullable=False)
    estimated_read_time = Column(String, nullable=True)
    views = Column(BigInteger, default=0, nullable=False, index=True)
    likes = Column(BigInteger, default=0, nullable=False)
    readers = Column(BigInteger, default=0, nullable=False)
    average_rating = Column(Float, default=0, nullable=False, index=True)
    rating_count = Column(Integer, default=0, nullable=False)

    # Credits
    writer = Column(String, nullable=True)
    artist = Column(String, nullable=True)
    colorist = Column(String, nullable=True)
    letterer = Column(String, nullable=True)
    issue_number = Column(Integer, nullable=True)

    # Dates
    published_at = Column(DateTime(timezone=True), nullable=True)
    scheduled_at = Column(DateTime(timezone=True), nullable=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    genres = relationship("Genre", secondary=comic_genres, lazy="selectin", order_by="Genre.name")
    tags = relationship("Tag", secondary=comic_tags, lazy="selectin", order_by="Tag.name")
    pages = relationship(
        "ComicPage",
        back_populates="comic",
        cascade="all, delete-orphan",
        order_by="ComicPage.page_number",
    )
    liked_by = relationship("ComicLike", cascade="all, delete-orphan", lazy="select")

    __table_args__ = (
        Index("ix_comics_status_published_at", "status", "published_at"),
    )

    def __repr__(self):
        return f"<Comic(id={self.id}, slug={self.slug})>"

    @property
    def is_published(self) -> bool:
        return self.status == "published"


class ComicPage(Base):
    """Single page image of a comic"""

    __tablename__ = "comic_pages"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    comic_id = Column(Integer, ForeignKey("comics.id", ondelete="CASCADE"), nullable=False, index=True)
    page_number = Column(Integer, nullable=False)

    # Images
    image_url = Column(String, nullable=False)
    image_url_high_res = Column(String, nullable=True)
    image_url_thumbnail = Column(String, nullable=True)

    # Dimensions
    width = Column(Integer, nullable=True)
    height = Column(Integer, nullable=True)

    # Metadata
    alt_text = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    panel_count = Column(Integer, nullable=True)
    is_double_spread = Column(Boolean, default=False, nullable=False)

    # Processing
    is_processed = Column(Boolean, default=False, nullable=False)
    processing_status = Column(String, default="pending", nullable=False)  # pending, processing, completed, failed

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    comic = relationship("Comic", back_populates="pages")

    __table_args__ = (
        UniqueConstraint("comic_id", "page_number", name="unique_comic_page_number"),
    )
