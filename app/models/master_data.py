"""
Taxonomy models: Genre, Tag, Category
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean
from sqlalchemy.sql import func
from app.core.database import Base


SITE_NAME = "Royalbird Studios"


class Genre(Base):
    """Genre model for comic genres"""

    __tablename__ = "genres"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True, index=True)
    slug = Column(String, nullable=False, unique=True, index=True)
    description = Column(String(500), nullable=True)
    icon = Column(String, default="BookOpen", nullable=True)
    color = Column(String, default="#4F46E5", nullable=True)

    # Statistics
    comic_count = Column(Integer, default=0, nullable=False)
    featured = Column(Boolean, default=False, nullable=False, index=True)

    # SEO
    meta_title = Column(String(60), nullable=True)
    meta_description = Column(String(160), nullable=True)

    # Ordering
    order = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Genre(id={self.id}, name={self.name})>"

    def apply_meta_defaults(self):
        """Fill SEO fields that were left empty"""
        if not self.meta_title and self.name:
            self.meta_title = f"{self.name} Comics - {SITE_NAME}"[:60]
        if not self.meta_description and self.description:
            self.meta_description = self.description[:157] + "..."

    @property
    def color_light(self) -> str:
        """Color lightened by 90% for backgrounds"""
        if not self.color:
            return "#EEF2FF"

        hex_value = self.color.lstrip("#")
        if len(hex_value) == 3:
            hex_value = "".join(ch * 2 for ch in hex_value)

        r, g, b = (int(hex_value[i:i + 2], 16) for i in (0, 2, 4))
        light = [round(c + (255 - c) * 0.9) for c in (r, g, b)]
        return f"rgb({light[0]}, {light[1]}, {light[2]})"


class Tag(Base):
    """Tag model for free-form comic tagging"""

    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(50), nullable=False, unique=True, index=True)
    slug = Column(String, nullable=False, unique=True, index=True)
    description = Column(String(300), nullable=True)

    # Statistics
    comic_count = Column(Integer, default=0, nullable=False, index=True)
    featured = Column(Boolean, default=False, nullable=False, index=True)

    type = Column(String, default="theme", nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Tag(id={self.id}, name={self.name})>"

    def apply_description_default(self):
        if not self.description and self.name:
            self.description = f"Explore {self.name} comics and stories at {SITE_NAME}."


class Category(Base):
    """Blog category; posts reference it by slug"""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(50), nullable=False, unique=True, index=True)
    slug = Column(String, nullable=False, unique=True, index=True)
    description = Column(String(200), nullable=True)
    icon = Column(String, default="FileText", nullable=True)
    color = Column(String, default="#10B981", nullable=True)

    # Slug of the parent category
    parent = Column(String, nullable=True, index=True)

    post_count = Column(Integer, default=0, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Category(id={self.id}, slug={self.slug})>"
