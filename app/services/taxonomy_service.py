"""
Taxonomy Service
Genres, tags and blog categories
"""
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Optional, Dict, Any
import math
import logging

from app.models.comic import Comic, comic_genres, comic_tags
from app.models.master_data import Genre, Tag, Category
from app.models.blog_post import BlogPost
from app.utils.slug import slugify, generate_unique_slug

logger = logging.getLogger(__name__)

MIN_FONT_SIZE = 12
MAX_FONT_SIZE = 32


def tag_font_size(count: int, min_count: int, max_count: int) -> int:
    """
    Font size for a tag cloud entry

    Scales linearly from MIN_FONT_SIZE at ``min_count`` to MAX_FONT_SIZE at
    ``max_count``, rounding halves up.
    """
    divisor = max(max_count - min_count, 1)
    size = MIN_FONT_SIZE + ((count - min_count) / divisor) * (MAX_FONT_SIZE - MIN_FONT_SIZE)
    return int(math.floor(size + 0.5))


def build_tag_cloud(tags: List[Tag], min_count: int) -> List[Dict[str, Any]]:
    """Size tags already sorted by comic_count descending"""
    if not tags:
        return []

    max_count = max(tag.comic_count for tag in tags)
    return [
        {
            "id": tag.id,
            "name": tag.name,
            "slug": tag.slug,
            "type": tag.type,
            "comic_count": tag.comic_count,
            "font_size": tag_font_size(tag.comic_count, min_count, max_count)
        }
        for tag in tags
    ]


def _published_comics(db: Session):
    return db.query(Comic).filter(Comic.status == "published", Comic.deleted_at.is_(None))


class TaxonomyService:
    """Service for genre, tag and category operations"""

    # ============ Genres ============

    @staticmethod
    def published_counts_by_genre(db: Session) -> Dict[int, int]:
        """Live count of published comics per genre id"""
        rows = db.query(comic_genres.c.genre_id, func.count(Comic.id)).join(
            Comic, Comic.id == comic_genres.c.comic_id
        ).filter(
            Comic.status == "published", Comic.deleted_at.is_(None)
        ).group_by(comic_genres.c.genre_id).all()
        return dict(rows)

    @staticmethod
    def create_genre(db: Session, data: Dict[str, Any]) -> Genre:
        """
        Create genre

        Raises:
            ValueError: If a genre with the same name or slug exists
        """
        slug = slugify(data.get("slug") or data["name"])
        if not slug:
            raise ValueError("Genre name must contain letters or digits")

        existing = db.query(Genre).filter(
            (Genre.slug == slug) | (func.lower(Genre.name) == data["name"].lower())
        ).first()
        if existing:
            raise ValueError("Genre already exists")

        genre = Genre(**{**data, "slug": slug})
        genre.apply_meta_defaults()

        db.add(genre)
        db.commit()
        db.refresh(genre)
        logger.info(f"Genre created: {genre.slug}")
        return genre

    @staticmethod
    def update_genre(db: Session, genre: Genre, data: Dict[str, Any]) -> Genre:
        if "slug" in data and data["slug"]:
            data["slug"] = generate_unique_slug(db, Genre, data["slug"], exclude_id=genre.id)
        elif data.get("name") and data["name"] != genre.name:
            data["slug"] = generate_unique_slug(db, Genre, data["name"], exclude_id=genre.id)

        if data.get("name") and data["name"] != genre.name:
            clash = db.query(Genre.id).filter(Genre.name == data["name"], Genre.id != genre.id).first()
            if clash:
                raise ValueError("Genre already exists")

        for field, value in data.items():
            setattr(genre, field, value)
        genre.apply_meta_defaults()

        db.commit()
        db.refresh(genre)
        return genre

    @staticmethod
    def delete_genre(db: Session, genre: Genre):
        """
        Delete genre

        Raises:
            ValueError: While any comic still references the genre
        """
        referencing = db.query(func.count(comic_genres.c.comic_id)).filter(
            comic_genres.c.genre_id == genre.id
        ).scalar() or 0
        if referencing > 0:
            raise ValueError(
                f"Cannot delete genre with {referencing} comics. Remove comics from this genre first."
            )

        db.delete(genre)
        db.commit()

    @staticmethod
    def genre_detail(db: Session, genre: Genre) -> Dict[str, Any]:
        """Latest and most viewed comics of a genre plus aggregate stats"""
        in_genre = _published_comics(db).filter(Comic.genres.any(Genre.id == genre.id))

        latest = in_genre.order_by(Comic.published_at.desc()).limit(12).all()
        popular = in_genre.order_by(Comic.views.desc()).limit(6).all()

        total_views, comic_count = db.query(
            func.coalesce(func.sum(Comic.views), 0), func.count(Comic.id)
        ).filter(
            Comic.status == "published",
            Comic.deleted_at.is_(None),
            Comic.genres.any(Genre.id == genre.id)
        ).first()

        average_rating = db.query(func.avg(Comic.average_rating)).filter(
            Comic.status == "published",
            Comic.deleted_at.is_(None),
            Comic.average_rating > 0,
            Comic.genres.any(Genre.id == genre.id)
        ).scalar()

        return {
            "comics": latest,
            "popular_comics": popular,
            "stats": {
                "comic_count": comic_count or 0,
                "total_views": int(total_views or 0),
                "average_rating": round(float(average_rating or 0), 2)
            }
        }

    # ============ Tags ============

    @staticmethod
    def create_tag(db: Session, data: Dict[str, Any]) -> Tag:
        slug = slugify(data.get("slug") or data["name"])
        if not slug:
            raise ValueError("Tag name must contain letters or digits")

        existing = db.query(Tag).filter(
            (Tag.slug == slug) | (func.lower(Tag.name) == data["name"].lower())
        ).first()
        if existing:
            raise ValueError("Tag already exists")

        tag = Tag(**{**data, "slug": slug})
        tag.apply_description_default()

        db.add(tag)
        db.commit()
        db.refresh(tag)
        return tag

    @staticmethod
    def update_tag(db: Session, tag: Tag, data: Dict[str, Any]) -> Tag:
        if "slug" in data and data["slug"]:
            data["slug"] = generate_unique_slug(db, Tag, data["slug"], exclude_id=tag.id)
        elif data.get("name") and data["name"] != tag.name:
            data["slug"] = generate_unique_slug(db, Tag, data["name"], exclude_id=tag.id)

        if data.get("name") and data["name"] != tag.name:
            clash = db.query(Tag.id).filter(Tag.name == data["name"], Tag.id != tag.id).first()
            if clash:
                raise ValueError("Tag already exists")

        for field, value in data.items():
            setattr(tag, field, value)
        tag.apply_description_default()

        db.commit()
        db.refresh(tag)
        return tag

    @staticmethod
    def delete_tag(db: Session, tag: Tag):
        """
        Delete tag

        Raises:
            ValueError: While any comic still references the tag
        """
        referencing = db.query(func.count(comic_tags.c.comic_id)).filter(
            comic_tags.c.tag_id == tag.id
        ).scalar() or 0
        if referencing > 0:
            raise ValueError(
                f"Cannot delete tag with {referencing} comics. Remove tag from comics first."
            )

        db.delete(tag)
        db.commit()

    @staticmethod
    def tag_cloud(db: Session, min_count: int = 1, limit: int = 50) -> List[Dict[str, Any]]:
        tags = db.query(Tag).filter(Tag.comic_count >= min_count).order_by(
            Tag.comic_count.desc(), Tag.name.asc()
        ).limit(limit).all()
        return build_tag_cloud(tags, min_count)

    @staticmethod
    def tag_comics(db: Session, tag: Tag, limit: int = 12) -> List[Comic]:
        return _published_comics(db).filter(
            Comic.tags.any(Tag.id == tag.id)
        ).order_by(Comic.published_at.desc()).limit(limit).all()

    # ============ Categories ============

    @staticmethod
    def create_category(db: Session, data: Dict[str, Any]) -> Category:
        slug = slugify(data["name"])
        if not slug:
            raise ValueError("Category name must contain letters or digits")

        existing = db.query(Category).filter(
            (Category.slug == slug) | (func.lower(Category.name) == data["name"].lower())
        ).first()
        if existing:
            raise ValueError("Category already exists")

        if data.get("parent") and not db.query(Category.id).filter(Category.slug == data["parent"]).first():
            raise ValueError(f"Parent category '{data['parent']}' not found")

        # Posts may already reference this slug
        post_count = db.query(func.count(BlogPost.id)).filter(
            BlogPost.category == slug, BlogPost.deleted_at.is_(None)
        ).scalar() or 0

        category = Category(**{**data, "slug": slug, "post_count": post_count})
        db.add(category)
        db.commit()
        db.refresh(category)
        return category

    @staticmethod
    def delete_category(db: Session, category: Category):
        """
        Delete category

        Raises:
            ValueError: While live posts or child categories reference it
        """
        posts = db.query(func.count(BlogPost.id)).filter(
            BlogPost.category == category.slug, BlogPost.deleted_at.is_(None)
        ).scalar() or 0
        if posts > 0:
            raise ValueError(f"Cannot delete category with {posts} posts. Move the posts first.")

        if db.query(Category.id).filter(Category.parent == category.slug).first():
            raise ValueError("Cannot delete category that has child categories")

        db.delete(category)
        db.commit()

    @staticmethod
    def resolve_category_slug(db: Session, value: str) -> str:
        """Map a category name or slug onto an existing category's slug"""
        category = db.query(Category).filter(
            (Category.slug == value) | (Category.name == value) | (Category.slug == slugify(value))
        ).first()
        return category.slug if category else value

    @staticmethod
    def categories_with_posts(db: Session, recent: int = 5) -> List[Dict[str, Any]]:
        categories = db.query(Category).order_by(Category.name.asc()).all()

        result = []
        for category in categories:
            posts = db.query(BlogPost).filter(
                BlogPost.category == category.slug,
                BlogPost.status == "published",
                BlogPost.deleted_at.is_(None)
            ).order_by(BlogPost.published_at.desc()).limit(recent).all()
            result.append({"category": category, "recent_posts": posts})

        return result

    @staticmethod
    def get_by_slug(db: Session, model, slug: str) -> Optional[Any]:
        return db.query(model).filter(model.slug == slug).first()
