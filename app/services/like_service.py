"""
Like Service
Idempotent like/unlike tracking for comics and blog posts
"""
from dataclasses import dataclass
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from app.models.comic import Comic
from app.models.blog_post import BlogPost
from app.models.like import ComicLike, BlogPostLike
from app.services.counter_service import CounterService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LikeTarget:
    """Pairs a likeable model with its tracker table"""
    model: type
    like_model: type
    foreign_key: str


COMIC_LIKES = LikeTarget(Comic, ComicLike, "comic_id")
BLOG_POST_LIKES = LikeTarget(BlogPost, BlogPostLike, "post_id")


class LikeService:
    """
    Service for likes and views

    ``likes`` always equals the number of tracker rows for the entity: the
    tracker row and the counter change are committed together, and the
    unique (entity, identifier) constraint rejects a racing duplicate.
    """

    @staticmethod
    def _tracker_query(db: Session, target: LikeTarget, entity_id: int, user_identifier: str):
        fk = getattr(target.like_model, target.foreign_key)
        return db.query(target.like_model).filter(
            fk == entity_id,
            target.like_model.user_identifier == user_identifier
        )

    @staticmethod
    def has_liked(db: Session, target: LikeTarget, entity_id: int, user_identifier: str) -> bool:
        """Check whether ``user_identifier`` has liked the entity"""
        return LikeService._tracker_query(db, target, entity_id, user_identifier).first() is not None

    @staticmethod
    def like(db: Session, target: LikeTarget, entity_id: int, user_identifier: str) -> bool:
        """
        Record a like

        Args:
            db: Database session
            target: COMIC_LIKES or BLOG_POST_LIKES
            entity_id: Primary key of the liked row
            user_identifier: User id or anonymous client id

        Returns:
            True when this call added the like, False when it already existed
        """
        if LikeService.has_liked(db, target, entity_id, user_identifier):
            return False

        db.add(target.like_model(**{
            target.foreign_key: entity_id,
            "user_identifier": user_identifier
        }))
        try:
            db.flush()
        except IntegrityError:
            # Lost a race against an identical request
            db.rollback()
            logger.info(f"Duplicate like ignored: {target.model.__name__} {entity_id} by {user_identifier}")
            return False

        CounterService.increment(db, target.model, "likes", [entity_id])
        db.commit()
        return True

    @staticmethod
    def unlike(db: Session, target: LikeTarget, entity_id: int, user_identifier: str) -> bool:
        """
        Remove a like

        Returns:
            True when a like was removed, False when there was none
        """
        deleted = LikeService._tracker_query(db, target, entity_id, user_identifier).delete(
            synchronize_session=False
        )
        if not deleted:
            return False

        CounterService.decrement(db, target.model, "likes", [entity_id])
        db.commit()
        return True

    @staticmethod
    def increment_views(db: Session, model, entity_id: int):
        """Count one view; caller commits"""
        CounterService.increment(db, model, "views", [entity_id])
