"""
Blog API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import Optional, Literal

from app.core.database import get_db
from app.core.dependencies import get_current_admin, get_optional_user
from app.models.user import User
from app.models.blog_post import BlogPost
from app.schemas.common import LikeRequest
from app.schemas.blog import BlogPostCreate, BlogPostUpdate, BlogPostListItem, BlogPostDetail
from app.services.blog_service import BlogService
from app.services.like_service import LikeService, BLOG_POST_LIKES
from app.utils.pagination import get_pagination_params
from app.utils.responses import paginated_response

router = APIRouter()

Period = Literal["day", "week", "month", "all"]


def _get_post_or_404(db: Session, post_id: int, include_deleted: bool = False) -> BlogPost:
    post = BlogService.get_by_id(db, post_id)
    if not post or (post.deleted_at is not None and not include_deleted):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Blog post not found"
        )
    return post


def _liker_identifier(user_id: Optional[str], current_user: Optional[User]) -> str:
    identifier = (user_id or "").strip() or (str(current_user.id) if current_user else "")
    if not identifier:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User identifier is required"
        )
    return identifier


def _list_items(posts):
    return [BlogPostListItem.model_validate(post).model_dump() for post in posts]


@router.get("", response_model=dict)
async def list_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: Optional[str] = Query(None, alias="status"),
    category: Optional[str] = None,
    author: Optional[str] = None,
    featured: Optional[bool] = None,
    search: Optional[str] = None,
    sort_by: str = Query("published_at", pattern="^(created_at|published_at|title|reading_time)$"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """
    List blog posts

    Non-admin callers only see published posts.
    """
    if not (current_user and current_user.is_admin):
        status_filter = "published"

    page, limit = get_pagination_params(page, limit)
    posts, total = BlogService.list_posts(
        db,
        page=page,
        limit=limit,
        status=status_filter,
        category=category,
        author=author,
        featured=featured,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order
    )
    return paginated_response(_list_items(posts), page, limit, total)


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: BlogPostCreate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Create blog post (admin)"""
    try:
        post = BlogService.create_post(db, post_data.model_dump(exclude_none=True))
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return {
        "ok": True,
        "message": "Blog post created successfully",
        "data": BlogPostDetail.model_validate(post).model_dump()
    }


@router.get("/featured", response_model=dict)
async def featured_posts(
    limit: int = Query(5, ge=1, le=20),
    db: Session = Depends(get_db)
):
    return {"ok": True, "data": _list_items(BlogService.featured(db, limit))}


@router.get("/categories", response_model=dict)
async def post_categories(db: Session = Depends(get_db)):
    """Published post count and latest publish date per category"""
    return {"ok": True, "data": BlogService.category_summary(db)}


@router.get("/search", response_model=dict)
async def search_posts(
    q: str = Query(""),
    limit: int = Query(10, ge=1, le=50),
    db: Session = Depends(get_db)
):
    """Search published posts; title matches rank first"""
    try:
        posts = BlogService.search(db, q, limit)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return {"ok": True, "data": _list_items(posts), "count": len(posts)}


@router.get("/popular", response_model=dict)
async def popular_posts(
    period: Period = "week",
    limit: int = Query(10, ge=1, le=50),
    db: Session = Depends(get_db)
):
    """Most liked published posts in the period"""
    posts = BlogService.ranked(db, by="likes", period=period, limit=limit)
    return {"ok": True, "data": _list_items(posts), "period": period}


@router.get("/trending", response_model=dict)
async def trending_posts(
    period: Period = "week",
    limit: int = Query(10, ge=1, le=50),
    db: Session = Depends(get_db)
):
    """Most viewed published posts in the period"""
    posts = BlogService.ranked(db, by="views", period=period, limit=limit)
    return {"ok": True, "data": _list_items(posts), "period": period}


@router.get("/stats/overview", response_model=dict)
async def blog_overview_stats(
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    return {"ok": True, "data": BlogService.overview_stats(db)}


@router.get("/{slug}", response_model=dict)
async def get_post(
    slug: str,
    db: Session = Depends(get_db)
):
    """Get blog post by slug; counts one view"""
    post = BlogService.view_by_slug(db, slug)
    if not post:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Blog post '{slug}' not found"
        )

    return {"ok": True, "data": BlogPostDetail.model_validate(post).model_dump()}


@router.put("/{post_id}", response_model=dict)
async def update_post(
    post_id: int,
    post_data: BlogPostUpdate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Update blog post (admin)"""
    post = _get_post_or_404(db, post_id, include_deleted=True)

    try:
        post = BlogService.update_post(db, post, post_data.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return {
        "ok": True,
        "message": "Blog post updated successfully",
        "data": BlogPostDetail.model_validate(post).model_dump()
    }


@router.delete("/{post_id}", response_model=dict)
async def delete_post(
    post_id: int,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Soft delete blog post (admin)"""
    post = _get_post_or_404(db, post_id)
    BlogService.soft_delete(db, post)

    return {"ok": True, "message": "Blog post deleted successfully"}


@router.post("/{post_id}/view", response_model=dict)
async def view_post(
    post_id: int,
    db: Session = Depends(get_db)
):
    """Count one view of a published post"""
    post = _get_post_or_404(db, post_id)

    if not post.is_published:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cannot view unpublished post"
        )

    LikeService.increment_views(db, BlogPost, post.id)
    db.commit()
    db.refresh(post)

    return {"ok": True, "data": {"id": post.id, "views": post.views}}


@router.post("/{post_id}/like", response_model=dict)
async def like_post(
    post_id: int,
    body: LikeRequest,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    identifier = _liker_identifier(body.user_id, current_user)
    post = _get_post_or_404(db, post_id)

    if not post.is_published:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cannot like unpublished post"
        )

    liked = LikeService.like(db, BLOG_POST_LIKES, post.id, identifier)
    db.refresh(post)

    return {
        "ok": True,
        "message": "Post liked successfully" if liked else "Post already liked",
        "data": {"id": post.id, "likes": post.likes, "liked": liked}
    }


@router.post("/{post_id}/unlike", response_model=dict)
async def unlike_post(
    post_id: int,
    body: LikeRequest,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    identifier = _liker_identifier(body.user_id, current_user)
    post = _get_post_or_404(db, post_id)

    unliked = LikeService.unlike(db, BLOG_POST_LIKES, post.id, identifier)
    db.refresh(post)

    return {
        "ok": True,
        "message": "Post unliked successfully" if unliked else "Post was not liked",
        "data": {"id": post.id, "likes": post.likes, "unliked": unliked}
    }


@router.get("/{post_id}/like-status", response_model=dict)
async def post_like_status(
    post_id: int,
    user_id: Optional[str] = Query(None, alias="userId"),
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    identifier = _liker_identifier(user_id, current_user)
    post = _get_post_or_404(db, post_id)

    return {
        "ok": True,
        "data": {
            "id": post.id,
            "has_liked": LikeService.has_liked(db, BLOG_POST_LIKES, post.id, identifier),
            "likes": post.likes
        }
    }


@router.get("/{post_id}/stats", response_model=dict)
async def post_stats(
    post_id: int,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Engagement, word count and estimated completion of one post (admin)"""
    post = _get_post_or_404(db, post_id)
    return {"ok": True, "data": BlogService.post_stats(db, post)}
