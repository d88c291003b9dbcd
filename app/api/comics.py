"""
Comics API endpoints
Public catalogue, admin management, likes, pages and ratings
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import Optional

from app.core.database import get_db
from app.core.dependencies import get_current_admin, get_current_user, get_optional_user
from app.models.user import User
from app.models.comic import Comic
from app.schemas.common import LikeRequest
from app.schemas.comic import (
    ComicCreate,
    ComicUpdate,
    ComicPageCreate,
    RateComic,
    ComicListItem,
    ComicDetail,
    ComicWithPages,
    ComicPageResponse
)
from app.services.comic_service import ComicService
from app.services.like_service import LikeService, COMIC_LIKES
from app.utils.pagination import get_pagination_params
from app.utils.responses import paginated_response

router = APIRouter()


def _get_comic_or_404(db: Session, comic_id: int) -> Comic:
    comic = ComicService.get_by_id(db, comic_id)
    if not comic:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Comic not found"
        )
    return comic


def _liker_identifier(user_id: Optional[str], current_user: Optional[User]) -> str:
    identifier = (user_id or "").strip() or (str(current_user.id) if current_user else "")
    if not identifier:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User identifier is required"
        )
    return identifier


@router.get("", response_model=dict)
async def list_comics(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status_filter: Optional[str] = Query(None, alias="status"),
    genre: Optional[str] = Query(None, description="Genre slug"),
    tag: Optional[str] = Query(None, description="Tag slug"),
    featured: Optional[bool] = None,
    search: Optional[str] = None,
    sort: str = Query("-published_at", description="Field name, prefix with - for descending"),
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """
    List comics

    - **status**: draft, published, scheduled or archived (admins only; others see published)
    - **genre** / **tag**: filter by slug
    - **featured**: only featured comics
    - **search**: title/description substring
    - **sort**: e.g. -published_at, views, -average_rating
    """
    if not (current_user and current_user.is_admin):
        status_filter = "published"

    page, limit = get_pagination_params(page, limit)
    comics, total = ComicService.list_comics(
        db,
        page=page,
        limit=limit,
        status=status_filter,
        genre=genre,
        tag=tag,
        featured=featured,
        search=search,
        sort=sort
    )

    data = [ComicListItem.model_validate(comic).model_dump() for comic in comics]
    return paginated_response(data, page, limit, total)


@router.get("/featured", response_model=dict)
async def featured_comics(db: Session = Depends(get_db)):
    """Up to six published featured comics, newest first"""
    comics = ComicService.featured(db)
    return {
        "ok": True,
        "data": [ComicListItem.model_validate(comic).model_dump() for comic in comics]
    }


@router.get("/{slug}", response_model=dict)
async def get_comic(
    slug: str,
    db: Session = Depends(get_db)
):
    """
    Get comic by slug with its pages

    Every successful call counts one view.
    """
    comic = ComicService.view_by_slug(db, slug)
    if not comic:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Comic '{slug}' not found"
        )

    return {
        "ok": True,
        "data": ComicWithPages.model_validate(comic).model_dump()
    }


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_comic(
    comic_data: ComicCreate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """
    Create comic (admin)

    - **slug**: optional, generated from title when omitted
    - **genres**: at least one genre ID
    """
    try:
        comic = ComicService.create_comic(db, comic_data.model_dump(exclude_none=True))
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return {
        "ok": True,
        "message": "Comic created successfully",
        "data": ComicDetail.model_validate(comic).model_dump()
    }


@router.put("/{comic_id}", response_model=dict)
async def update_comic(
    comic_id: int,
    comic_data: ComicUpdate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Update comic (admin); only sent fields change"""
    comic = _get_comic_or_404(db, comic_id)

    try:
        comic = ComicService.update_comic(db, comic, comic_data.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return {
        "ok": True,
        "message": "Comic updated successfully",
        "data": ComicDetail.model_validate(comic).model_dump()
    }


@router.delete("/{comic_id}", response_model=dict)
async def delete_comic(
    comic_id: int,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Soft delete comic (admin)"""
    comic = _get_comic_or_404(db, comic_id)
    ComicService.soft_delete(db, comic)

    return {
        "ok": True,
        "message": "Comic moved to archive"
    }


@router.post("/{comic_id}/like", response_model=dict)
async def like_comic(
    comic_id: int,
    body: LikeRequest,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """
    Like a comic

    - **user_id**: user id or anonymous client id (defaults to the logged-in user)
    """
    identifier = _liker_identifier(body.user_id, current_user)
    comic = _get_comic_or_404(db, comic_id)

    if not comic.is_published:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cannot like unpublished comic"
        )

    liked = LikeService.like(db, COMIC_LIKES, comic.id, identifier)
    db.refresh(comic)

    return {
        "ok": True,
        "message": "Comic liked successfully" if liked else "Comic already liked",
        "data": {
            "id": comic.id,
            "likes": comic.likes,
            "liked": liked
        }
    }


@router.post("/{comic_id}/unlike", response_model=dict)
async def unlike_comic(
    comic_id: int,
    body: LikeRequest,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """Remove a like; unliking twice is a no-op"""
    identifier = _liker_identifier(body.user_id, current_user)
    comic = _get_comic_or_404(db, comic_id)

    unliked = LikeService.unlike(db, COMIC_LIKES, comic.id, identifier)
    db.refresh(comic)

    return {
        "ok": True,
        "message": "Comic unliked successfully" if unliked else "Comic was not liked",
        "data": {
            "id": comic.id,
            "likes": comic.likes,
            "unliked": unliked
        }
    }


@router.get("/{comic_id}/like-status", response_model=dict)
async def comic_like_status(
    comic_id: int,
    user_id: Optional[str] = Query(None, alias="userId"),
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """Check whether an identifier has liked the comic"""
    identifier = _liker_identifier(user_id, current_user)
    comic = _get_comic_or_404(db, comic_id)

    return {
        "ok": True,
        "data": {
            "id": comic.id,
            "has_liked": LikeService.has_liked(db, COMIC_LIKES, comic.id, identifier),
            "likes": comic.likes
        }
    }


@router.get("/{comic_id}/pages", response_model=dict)
async def list_pages(
    comic_id: int,
    db: Session = Depends(get_db)
):
    """Pages of a comic ordered by page number"""
    comic = _get_comic_or_404(db, comic_id)
    pages = ComicService.pages(db, comic)

    return {
        "ok": True,
        "data": [ComicPageResponse.model_validate(page).model_dump() for page in pages]
    }


@router.post("/{comic_id}/pages", response_model=dict, status_code=status.HTTP_201_CREATED)
async def add_page(
    comic_id: int,
    page_data: ComicPageCreate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Add a page to a comic (admin)"""
    comic = _get_comic_or_404(db, comic_id)

    try:
        page = ComicService.add_page(db, comic, page_data.model_dump(exclude_none=True))
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    db.refresh(comic)
    return {
        "ok": True,
        "message": "Page added successfully",
        "data": {
            "page": ComicPageResponse.model_validate(page).model_dump(),
            "total_pages": comic.total_pages
        }
    }


@router.post("/{comic_id}/rate", response_model=dict)
async def rate_comic(
    comic_id: int,
    body: RateComic,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Rate a published comic from 1 to 5"""
    comic = _get_comic_or_404(db, comic_id)

    if not comic.is_published:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cannot rate unpublished comic"
        )

    comic = ComicService.rate(db, comic, body.rating)

    return {
        "ok": True,
        "message": "Rating saved",
        "data": {
            "id": comic.id,
            "average_rating": round(comic.average_rating, 2),
            "rating_count": comic.rating_count
        }
    }
