"""
Comic Service
Business logic for comic listing, management, pages and ratings
"""
from sqlalchemy.orm import Session, Query
from sqlalchemy import or_, func
from sqlalchemy.exc import IntegrityError
from typing import List, Optional, Dict, Any, Tuple
import logging

from app.models.comic import Comic, ComicPage
from app.models.master_data import Genre, Tag
from app.services.counter_service import CounterService
from app.utils.dates import utcnow
from app.utils.pagination import paginate, apply_sort
from app.utils.slug import slugify, generate_unique_slug

logger = logging.getLogger(__name__)

FEATURED_LIMIT = 6
DEFAULT_SORT = "-published_at"

SORTABLE_FIELDS = {
    "published_at": Comic.published_at,
    "created_at": Comic.created_at,
    "updated_at": Comic.updated_at,
    "title": Comic.title,
    "views": Comic.views,
    "likes": Comic.likes,
    "average_rating": Comic.average_rating,
    "total_pages": Comic.total_pages,
    "issue_number": Comic.issue_number,
}


class ComicService:
    """Service for comic operations"""

    @staticmethod
    def live_query(db: Session) -> Query:
        return db.query(Comic).filter(Comic.deleted_at.is_(None))

    @staticmethod
    def get_by_id(db: Session, comic_id: int) -> Optional[Comic]:
        return ComicService.live_query(db).filter(Comic.id == comic_id).first()

    @staticmethod
    def list_comics(
        db: Session,
        page: int = 1,
        limit: Optional[int] = None,
        status: Optional[str] = None,
        genre: Optional[str] = None,
        tag: Optional[str] = None,
        featured: Optional[bool] = None,
        search: Optional[str] = None,
        sort: Optional[str] = None,
        free: Optional[bool] = None
    ) -> Tuple[List[Comic], int]:
        """
        Filtered, sorted and paginated comics

        Args:
            db: Database session
            page: Page number
            limit: Items per page
            status: Exact status filter
            genre: Genre slug
            tag: Tag slug
            featured: Only featured comics when True
            search: Substring of title or description
            sort: "field" or "-field"
            free: Only free comics when True

        Returns:
            Tuple of (comics, total)
        """
        query = ComicService.live_query(db)

        if status:
            query = query.filter(Comic.status == status)
        if featured:
            query = query.filter(Comic.featured.is_(True))
        if free:
            query = query.filter(Comic.is_free.is_(True))
        if genre:
            query = query.filter(Comic.genres.any(Genre.slug == genre))
        if tag:
            query = query.filter(Comic.tags.any(Tag.slug == tag))
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(Comic.title.ilike(pattern), Comic.description.ilike(pattern)))

        query = apply_sort(query, sort, SORTABLE_FIELDS, DEFAULT_SORT)
        return paginate(query, page, limit)

    @staticmethod
    def featured(db: Session, limit: int = FEATURED_LIMIT) -> List[Comic]:
        return ComicService.live_query(db).filter(
            Comic.status == "published",
            Comic.featured.is_(True)
        ).order_by(Comic.published_at.desc()).limit(limit).all()

    @staticmethod
    def view_by_slug(db: Session, slug: str) -> Optional[Comic]:
        """
        Count a view and return the comic

        The increment is a single UPDATE matched on slug, so concurrent
        readers never lose a view.
        """
        updated = db.query(Comic).filter(
            Comic.slug == slug,
            Comic.deleted_at.is_(None)
        ).update({Comic.views: Comic.views + 1}, synchronize_session=False)

        if not updated:
            db.rollback()
            return None

        db.commit()
        return db.query(Comic).filter(Comic.slug == slug).first()

    @staticmethod
    def _load_taxonomy(db: Session, genre_ids: List[int], tag_ids: List[int]) -> Tuple[List[Genre], List[Tag]]:
        genre_ids = list(dict.fromkeys(genre_ids or []))
        tag_ids = list(dict.fromkeys(tag_ids or []))

        genres = db.query(Genre).filter(Genre.id.in_(genre_ids)).all() if genre_ids else []
        if len(genres) != len(genre_ids):
            raise ValueError("Invalid genre IDs")

        tags = db.query(Tag).filter(Tag.id.in_(tag_ids)).all() if tag_ids else []
        if len(tags) != len(tag_ids):
            raise ValueError("Invalid tag IDs")

        return genres, tags

    @staticmethod
    def create_comic(db: Session, data: Dict[str, Any]) -> Comic:
        """
        Create comic and bump its genre/tag counters

        Raises:
            ValueError: Slug already in use or unknown genre/tag ids
        """
        data = dict(data)
        genre_ids = data.pop("genres", [])
        tag_ids = data.pop("tags", [])

        if data.get("slug"):
            data["slug"] = slugify(data["slug"])
            if not data["slug"]:
                raise ValueError("Slug must contain letters or digits")
            if db.query(Comic.id).filter(Comic.slug == data["slug"]).first():
                raise ValueError("Slug already in use")
        else:
            data["slug"] = generate_unique_slug(db, Comic, data["title"])

        genres, tags = ComicService._load_taxonomy(db, genre_ids, tag_ids)

        if data.get("status") == "published" and not data.get("published_at"):
            data["published_at"] = utcnow()

        comic = Comic(**data)
        comic.genres = genres
        comic.tags = tags
        db.add(comic)

        try:
            db.flush()
        except IntegrityError:
            db.rollback()
            raise ValueError("Slug already in use")

        CounterService.comic_added(db, [g.id for g in genres], [t.id for t in tags])
        db.commit()
        db.refresh(comic)

        logger.info(f"Comic created: {comic.slug} (id={comic.id})")
        return comic

    @staticmethod
    def update_comic(db: Session, comic: Comic, data: Dict[str, Any]) -> Comic:
        """
        Apply a partial update

        Genre/tag counters move by the difference between the old and new
        sets, so counts stay exact across edits.
        """
        data = dict(data)
        genre_ids = data.pop("genres", None)
        tag_ids = data.pop("tags", None)

        if data.get("slug") and data["slug"] != comic.slug:
            data["slug"] = slugify(data["slug"])
            clash = db.query(Comic.id).filter(Comic.slug == data["slug"], Comic.id != comic.id).first()
            if not data["slug"] or clash:
                raise ValueError("Slug already in use")

        if data.get("status") == "published" and comic.status != "published":
            if not data.get("published_at") and not comic.published_at:
                data["published_at"] = utcnow()

        old_genre_ids = [g.id for g in comic.genres]
        old_tag_ids = [t.id for t in comic.tags]

        if genre_ids is not None or tag_ids is not None:
            genres, tags = ComicService._load_taxonomy(
                db,
                genre_ids if genre_ids is not None else old_genre_ids,
                tag_ids if tag_ids is not None else old_tag_ids
            )
            comic.genres = genres
            comic.tags = tags

        for field, value in data.items():
            setattr(comic, field, value)

        db.flush()
        CounterService.comic_relinked(
            db,
            old_genre_ids, [g.id for g in comic.genres],
            old_tag_ids, [t.id for t in comic.tags]
        )
        db.commit()
        db.refresh(comic)
        return comic

    @staticmethod
    def soft_delete(db: Session, comic: Comic):
        """Hide comic from every public read and release its genre/tag counts"""
        comic.deleted_at = utcnow()
        CounterService.comic_removed(db, [g.id for g in comic.genres], [t.id for t in comic.tags])
        db.commit()
        logger.info(f"Comic soft-deleted: {comic.slug} (id={comic.id})")

    @staticmethod
    def add_page(db: Session, comic: Comic, data: Dict[str, Any]) -> ComicPage:
        """
        Add a page; page numbers are unique per comic

        Raises:
            ValueError: If the page number already exists
        """
        exists = db.query(ComicPage.id).filter(
            ComicPage.comic_id == comic.id,
            ComicPage.page_number == data["page_number"]
        ).first()
        if exists:
            raise ValueError(f"Page {data['page_number']} already exists")

        page = ComicPage(comic_id=comic.id, **data)
        db.add(page)
        try:
            db.flush()
        except IntegrityError:
            db.rollback()
            raise ValueError(f"Page {data['page_number']} already exists")

        comic.total_pages = db.query(func.count(ComicPage.id)).filter(ComicPage.comic_id == comic.id).scalar()
        db.commit()
        db.refresh(page)
        return page

    @staticmethod
    def pages(db: Session, comic: Comic) -> List[ComicPage]:
        return db.query(ComicPage).filter(ComicPage.comic_id == comic.id).order_by(ComicPage.page_number).all()

    @staticmethod
    def rate(db: Session, comic: Comic, rating: int) -> Comic:
        """Fold ``rating`` into the running average in one UPDATE"""
        db.query(Comic).filter(Comic.id == comic.id).update({
            Comic.average_rating: (Comic.average_rating * Comic.rating_count + rating) / (Comic.rating_count + 1),
            Comic.rating_count: Comic.rating_count + 1
        }, synchronize_session=False)
        db.commit()
        db.refresh(comic)
        return comic

