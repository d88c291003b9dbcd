"""
Counter Service
Atomic increments for denormalized counters (views, likes, comic_count, post_count)
"""
from sqlalchemy.orm import Session
from sqlalchemy import func, select
from typing import Iterable, Optional, Dict
import logging

from app.models.comic import Comic, comic_genres, comic_tags
from app.models.master_data import Genre, Tag, Category
from app.models.blog_post import BlogPost

logger = logging.getLogger(__name__)


class CounterService:
    """
    Service for counter maintenance

    Every change is a single ``UPDATE ... SET n = n + k`` so concurrent
    requests never lose an increment. Decrements are guarded with ``n > 0``.
    Callers own the transaction (no commit here).
    """

    @staticmethod
    def increment(db: Session, model, field: str, ids: Iterable[int], amount: int = 1) -> int:
        """
        Add ``amount`` to ``model.field`` for every row in ``ids``

        Returns:
            Number of rows touched
        """
        ids = list(set(ids))
        if not ids:
            return 0

        column = getattr(model, field)
        return db.query(model).filter(model.id.in_(ids)).update(
            {column: column + amount},
            synchronize_session=False
        )

    @staticmethod
    def decrement(db: Session, model, field: str, ids: Iterable[int]) -> int:
        """Subtract one from ``model.field`` without going below zero"""
        ids = list(set(ids))
        if not ids:
            return 0

        column = getattr(model, field)
        return db.query(model).filter(model.id.in_(ids), column > 0).update(
            {column: column - 1},
            synchronize_session=False
        )

    # ============ Comic taxonomy ============

    @staticmethod
    def comic_added(db: Session, genre_ids: Iterable[int], tag_ids: Iterable[int]):
        CounterService.increment(db, Genre, "comic_count", genre_ids)
        CounterService.increment(db, Tag, "comic_count", tag_ids)

    @staticmethod
    def comic_removed(db: Session, genre_ids: Iterable[int], tag_ids: Iterable[int]):
        CounterService.decrement(db, Genre, "comic_count", genre_ids)
        CounterService.decrement(db, Tag, "comic_count", tag_ids)

    @staticmethod
    def comic_relinked(
        db: Session,
        old_genre_ids: Iterable[int],
        new_genre_ids: Iterable[int],
        old_tag_ids: Iterable[int],
        new_tag_ids: Iterable[int]
    ):
        """Apply -1 to removed and +1 to added genres/tags after a comic update"""
        old_genres, new_genres = set(old_genre_ids), set(new_genre_ids)
        old_tags, new_tags = set(old_tag_ids), set(new_tag_ids)

        CounterService.decrement(db, Genre, "comic_count", old_genres - new_genres)
        CounterService.increment(db, Genre, "comic_count", new_genres - old_genres)
        CounterService.decrement(db, Tag, "comic_count", old_tags - new_tags)
        CounterService.increment(db, Tag, "comic_count", new_tags - old_tags)

    # ============ Blog categories ============

    @staticmethod
    def _category_ids(db: Session, slug: Optional[str]):
        if not slug:
            return []
        return [row.id for row in db.query(Category.id).filter(Category.slug == slug).all()]

    @staticmethod
    def post_added(db: Session, category_slug: Optional[str]):
        CounterService.increment(db, Category, "post_count", CounterService._category_ids(db, category_slug))

    @staticmethod
    def post_removed(db: Session, category_slug: Optional[str]):
        CounterService.decrement(db, Category, "post_count", CounterService._category_ids(db, category_slug))

    @staticmethod
    def post_recategorized(db: Session, old_slug: Optional[str], new_slug: Optional[str]):
        if old_slug == new_slug:
            return
        CounterService.post_removed(db, old_slug)
        CounterService.post_added(db, new_slug)

    # ============ Repair ============

    @staticmethod
    def recount_all(db: Session) -> Dict[str, int]:
        """
        Recompute every taxonomy counter from the source rows and commit

        Returns:
            Number of rows whose stored counter was wrong, per table
        """
        live_comics = select(Comic.id).where(Comic.deleted_at.is_(None))

        genre_counts = dict(
            db.query(comic_genres.c.genre_id, func.count(comic_genres.c.comic_id))
            .filter(comic_genres.c.comic_id.in_(live_comics))
            .group_by(comic_genres.c.genre_id)
            .all()
        )
        tag_counts = dict(
            db.query(comic_tags.c.tag_id, func.count(comic_tags.c.comic_id))
            .filter(comic_tags.c.comic_id.in_(live_comics))
            .group_by(comic_tags.c.tag_id)
            .all()
        )
        category_counts = dict(
            db.query(BlogPost.category, func.count(BlogPost.id))
            .filter(BlogPost.deleted_at.is_(None))
            .group_by(BlogPost.category)
            .all()
        )

        fixed = {"genres": 0, "tags": 0, "categories": 0}

        for genre in db.query(Genre).all():
            expected = genre_counts.get(genre.id, 0)
            if genre.comic_count != expected:
                logger.info(f"Genre {genre.slug}: comic_count {genre.comic_count} -> {expected}")
                genre.comic_count = expected
                fixed["genres"] += 1

        for tag in db.query(Tag).all():
            expected = tag_counts.get(tag.id, 0)
            if tag.comic_count != expected:
                logger.info(f"Tag {tag.slug}: comic_count {tag.comic_count} -> {expected}")
                tag.comic_count = expected
                fixed["tags"] += 1

        for category in db.query(Category).all():
            expected = category_counts.get(category.slug, 0)
            if category.post_count != expected:
                logger.info(f"Category {category.slug}: post_count {category.post_count} -> {expected}")
                category.post_count = expected
                fixed["categories"] += 1

        db.commit()
        return fixed
