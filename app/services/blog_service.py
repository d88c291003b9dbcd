"""
Blog Service
Business logic for blog posts
"""
from sqlalchemy.orm import Session, Query
from sqlalchemy import or_, func, case
from sqlalchemy.exc import IntegrityError
from datetime import timedelta
from typing import List, Optional, Dict, Any, Tuple
import logging

from app.models.blog_post import BlogPost, reading_time_for
from app.services.counter_service import CounterService
from app.services.taxonomy_service import TaxonomyService
from app.utils.dates import utcnow
from app.utils.pagination import paginate
from app.utils.slug import generate_unique_slug

logger = logging.getLogger(__name__)

DESCRIPTION_PREVIEW = 150
MIN_SEARCH_LENGTH = 2
ATTENTION_SPAN_MINUTES = 10

SORT_FIELDS = {
    "created_at": BlogPost.created_at,
    "published_at": BlogPost.published_at,
    "title": BlogPost.title,
    "reading_time": BlogPost.reading_time,
}

PERIODS = {
    "day": timedelta(days=1),
    "week": timedelta(days=7),
    "month": timedelta(days=30),
    "all": None,
}


class BlogService:
    """Service for blog post operations"""

    @staticmethod
    def live_query(db: Session) -> Query:
        return db.query(BlogPost).filter(BlogPost.deleted_at.is_(None))

    @staticmethod
    def published_query(db: Session) -> Query:
        return BlogService.live_query(db).filter(BlogPost.status == "published")

    @staticmethod
    def get_by_id(db: Session, post_id: int) -> Optional[BlogPost]:
        return db.query(BlogPost).filter(BlogPost.id == post_id).first()

    @staticmethod
    def list_posts(
        db: Session,
        page: int = 1,
        limit: Optional[int] = None,
        status: Optional[str] = None,
        category: Optional[str] = None,
        author: Optional[str] = None,
        featured: Optional[bool] = None,
        search: Optional[str] = None,
        sort_by: str = "published_at",
        sort_order: str = "desc"
    ) -> Tuple[List[BlogPost], int]:
        """
        Filtered and paginated blog posts

        Returns:
            Tuple of (posts, total)
        """
        query = BlogService.live_query(db)

        if status:
            query = query.filter(BlogPost.status == status)
        if category:
            query = query.filter(BlogPost.category == category)
        if author:
            query = query.filter(BlogPost.author == author)
        if featured:
            query = query.filter(BlogPost.featured.is_(True))
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(
                BlogPost.title.ilike(pattern),
                BlogPost.description.ilike(pattern),
                BlogPost.content.ilike(pattern)
            ))

        column = SORT_FIELDS.get(sort_by, BlogPost.published_at)
        query = query.order_by(column.asc() if sort_order == "asc" else column.desc(), BlogPost.id.desc())

        return paginate(query, page, limit)

    @staticmethod
    def create_post(db: Session, data: Dict[str, Any]) -> BlogPost:
        """
        Create blog post

        Slug comes from the title; description, SEO fields and reading time
        are filled in when missing and ``published_at`` is stamped for
        published posts.
        """
        data = dict(data)
        content = data["content"]

        data["slug"] = generate_unique_slug(db, BlogPost, data["title"])
        data["category"] = TaxonomyService.resolve_category_slug(db, data["category"])

        if not data.get("description"):
            data["description"] = content[:DESCRIPTION_PREVIEW] + "..."
        data["meta_title"] = data.get("meta_title") or data["title"]
        data["meta_description"] = data.get("meta_description") or data["description"] or content[:DESCRIPTION_PREVIEW]

        if data.get("status") == "published" and not data.get("published_at"):
            data["published_at"] = utcnow()

        post = BlogPost(**data)
        post.refresh_reading_time()
        db.add(post)

        try:
            db.flush()
        except IntegrityError:
            db.rollback()
            raise ValueError("A post with this slug already exists")

        CounterService.post_added(db, post.category)
        db.commit()
        db.refresh(post)

        logger.info(f"Blog post created: {post.slug} (id={post.id})")
        return post

    @staticmethod
    def update_post(db: Session, post: BlogPost, data: Dict[str, Any]) -> BlogPost:
        """
        Apply a partial update

        Raises:
            ValueError: If the post has been deleted
        """
        if post.deleted_at is not None:
            raise ValueError("Cannot update deleted blog post")

        data = dict(data)

        if data.get("title") and data["title"] != post.title:
            data["slug"] = generate_unique_slug(db, BlogPost, data["title"], exclude_id=post.id)

        if data.get("status") == "published" and post.status != "published":
            data["published_at"] = data.get("published_at") or utcnow()

        old_category = post.category
        if data.get("category"):
            data["category"] = TaxonomyService.resolve_category_slug(db, data["category"])

        for field, value in data.items():
            setattr(post, field, value)

        if "content" in data:
            post.refresh_reading_time()

        db.flush()
        CounterService.post_recategorized(db, old_category, post.category)
        db.commit()
        db.refresh(post)
        return post

    @staticmethod
    def soft_delete(db: Session, post: BlogPost):
        """Archive post and hide it from public reads"""
        if post.deleted_at is None:
            CounterService.post_removed(db, post.category)
        post.deleted_at = utcnow()
        post.status = "archived"
        db.commit()
        logger.info(f"Blog post soft-deleted: {post.slug} (id={post.id})")

    @staticmethod
    def view_by_slug(db: Session, slug: str) -> Optional[BlogPost]:
        """Return live post by slug after counting one view"""
        updated = BlogService.live_query(db).filter(BlogPost.slug == slug).update(
            {BlogPost.views: BlogPost.views + 1}, synchronize_session=False
        )
        if not updated:
            db.rollback()
            return None

        db.commit()
        return db.query(BlogPost).filter(BlogPost.slug == slug).first()

    @staticmethod
    def featured(db: Session, limit: int = 5) -> List[BlogPost]:
        return BlogService.published_query(db).filter(
            BlogPost.featured.is_(True)
        ).order_by(BlogPost.published_at.desc()).limit(limit).all()

    @staticmethod
    def search(db: Session, q: str, limit: int = 10) -> List[BlogPost]:
        """
        Case-insensitive search over title, description and content

        Raises:
            ValueError: If the query is shorter than two characters
        """
        q = (q or "").strip()
        if len(q) < MIN_SEARCH_LENGTH:
            raise ValueError(f"Search query must be at least {MIN_SEARCH_LENGTH} characters")

        pattern = f"%{q}%"
        title_hit = case((BlogPost.title.ilike(pattern), 0), else_=1)

        return BlogService.published_query(db).filter(or_(
            BlogPost.title.ilike(pattern),
            BlogPost.description.ilike(pattern),
            BlogPost.content.ilike(pattern)
        )).order_by(title_hit, BlogPost.published_at.desc()).limit(limit).all()

    @staticmethod
    def category_summary(db: Session) -> List[Dict[str, Any]]:
        """Published post count and latest publish date per category"""
        rows = BlogService.published_query(db).with_entities(
            BlogPost.category,
            func.count(BlogPost.id).label("count"),
            func.max(BlogPost.published_at).label("latest")
        ).group_by(BlogPost.category).order_by(func.count(BlogPost.id).desc()).all()

        return [{"name": row.category, "count": row.count, "latest": row.latest} for row in rows]

    @staticmethod
    def ranked(db: Session, by: str, period: str = "week", limit: int = 10) -> List[BlogPost]:
        """
        Popular (``by="likes"``) or trending (``by="views"``) posts

        Raises:
            ValueError: Unknown period
        """
        if period not in PERIODS:
            raise ValueError(f"Period must be one of: {', '.join(PERIODS)}")

        query = BlogService.published_query(db)
        window = PERIODS[period]
        if window is not None:
            query = query.filter(BlogPost.published_at >= utcnow() - window)

        if by == "likes":
            order = (BlogPost.likes.desc(), BlogPost.views.desc())
        else:
            order = (BlogPost.views.desc(), BlogPost.likes.desc())

        return query.order_by(*order).limit(limit).all()

    @staticmethod
    def post_stats(db: Session, post: BlogPost) -> Dict[str, Any]:
        words = len((post.content or "").split())
        estimated_read_time = reading_time_for(post.content)
        completion = min(100.0, estimated_read_time / ATTENTION_SPAN_MINUTES * 100)
        liked_by_count = len(post.liked_by)

        return {
            "id": post.id,
            "title": post.title,
            "views": post.views,
            "likes": post.likes,
            "liked_by_count": liked_by_count,
            "engagement_rate": round(post.likes / post.views * 100, 2) if post.views else 0,
            "reading_time": post.reading_time,
            "word_count": words,
            "estimated_completion": round(completion, 1),
            "published_at": post.published_at,
            "created_at": post.created_at
        }

    @staticmethod
    def overview_stats(db: Session) -> Dict[str, Any]:
        live = BlogPost.deleted_at.is_(None)

        totals = db.query(
            func.count(BlogPost.id),
            func.coalesce(func.sum(case((BlogPost.status == "published", 1), else_=0)), 0),
            func.coalesce(func.sum(case((BlogPost.status == "draft", 1), else_=0)), 0),
            func.coalesce(func.sum(case((BlogPost.featured.is_(True), 1), else_=0)), 0),
            func.coalesce(func.sum(BlogPost.views), 0),
            func.coalesce(func.sum(BlogPost.likes), 0),
            func.avg(BlogPost.reading_time)
        ).filter(live).first()

        category_rows = BlogService.published_query(db).with_entities(
            BlogPost.category,
            func.count(BlogPost.id),
            func.coalesce(func.sum(BlogPost.views), 0),
            func.coalesce(func.sum(BlogPost.likes), 0)
        ).group_by(BlogPost.category).order_by(func.count(BlogPost.id).desc()).limit(10).all()

        top_posts = BlogService.published_query(db).order_by(BlogPost.views.desc()).limit(5).all()

        return {
            "overview": {
                "total_posts": totals[0] or 0,
                "published_posts": int(totals[1] or 0),
                "draft_posts": int(totals[2] or 0),
                "featured_posts": int(totals[3] or 0),
                "total_views": int(totals[4] or 0),
                "total_likes": int(totals[5] or 0),
                "avg_reading_time": round(float(totals[6] or 0), 1)
            },
            "category_stats": [
                {"category": c, "count": n, "total_views": int(v or 0), "total_likes": int(l or 0)}
                for c, n, v, l in category_rows
            ],
            "top_posts": [
                {
                    "id": p.id,
                    "title": p.title,
                    "slug": p.slug,
                    "views": p.views,
                    "likes": p.likes,
                    "published_at": p.published_at
                }
                for p in top_posts
            ]
        }
