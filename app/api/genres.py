"""
Genre API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import Optional

from app.core.database import get_db
from app.core.dependencies import get_current_admin
from app.models.user import User
from app.models.master_data import Genre
from app.schemas.taxonomy import GenreCreate, GenreUpdate, GenreResponse
from app.schemas.comic import ComicListItem
from app.services.comic_service import ComicService
from app.services.taxonomy_service import TaxonomyService
from app.utils.pagination import get_pagination_params, apply_sort
from app.utils.responses import paginated_response

router = APIRouter()

GENRE_SORT_FIELDS = {
    "order": Genre.order,
    "name": Genre.name,
    "comic_count": Genre.comic_count,
    "created_at": Genre.created_at,
}


def _genre_or_404(db: Session, slug: str) -> Genre:
    genre = TaxonomyService.get_by_slug(db, Genre, slug)
    if not genre:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Genre '{slug}' not found"
        )
    return genre


@router.get("", response_model=dict)
async def list_genres(
    featured: Optional[bool] = None,
    sort: str = Query("order"),
    limit: Optional[int] = Query(None, ge=1, le=200),
    db: Session = Depends(get_db)
):
    """
    List genres

    ``comic_count`` in the payload is the live number of published comics.
    """
    query = db.query(Genre)
    if featured:
        query = query.filter(Genre.featured.is_(True))
    query = apply_sort(query, sort, GENRE_SORT_FIELDS, "order")
    if limit:
        query = query.limit(limit)

    genres = query.all()
    live_counts = TaxonomyService.published_counts_by_genre(db)

    data = []
    for genre in genres:
        item = GenreResponse.model_validate(genre).model_dump()
        item["comic_count"] = live_counts.get(genre.id, 0)
        data.append(item)

    return {"ok": True, "data": data, "count": len(data)}


@router.get("/{slug}", response_model=dict)
async def get_genre(
    slug: str,
    db: Session = Depends(get_db)
):
    """Genre with its latest and most viewed comics"""
    genre = _genre_or_404(db, slug)
    detail = TaxonomyService.genre_detail(db, genre)

    return {
        "ok": True,
        "data": {
            "genre": GenreResponse.model_validate(genre).model_dump(),
            "comics": [ComicListItem.model_validate(c).model_dump() for c in detail["comics"]],
            "popular_comics": [ComicListItem.model_validate(c).model_dump() for c in detail["popular_comics"]],
            "stats": detail["stats"]
        }
    }


@router.get("/{slug}/comics", response_model=dict)
async def genre_comics(
    slug: str,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status_filter: str = Query("published", alias="status"),
    free: Optional[bool] = None,
    sort: str = Query("-published_at"),
    db: Session = Depends(get_db)
):
    """Paginated comics of a genre; ``free=true`` keeps only free comics"""
    genre = _genre_or_404(db, slug)
    page, limit = get_pagination_params(page, limit)

    comics, total = ComicService.list_comics(
        db,
        page=page,
        limit=limit,
        status=status_filter,
        genre=genre.slug,
        free=free,
        sort=sort
    )

    data = [ComicListItem.model_validate(c).model_dump() for c in comics]
    return paginated_response(
        data, page, limit, total,
        genre={"id": genre.id, "name": genre.name, "slug": genre.slug}
    )


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_genre(
    genre_data: GenreCreate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    try:
        genre = TaxonomyService.create_genre(db, genre_data.model_dump(exclude_none=True))
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return {
        "ok": True,
        "message": "Genre created successfully",
        "data": GenreResponse.model_validate(genre).model_dump()
    }


@router.put("/{genre_id}", response_model=dict)
async def update_genre(
    genre_id: int,
    genre_data: GenreUpdate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    genre = db.query(Genre).filter(Genre.id == genre_id).first()
    if not genre:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Genre not found"
        )

    try:
        genre = TaxonomyService.update_genre(db, genre, genre_data.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return {
        "ok": True,
        "message": "Genre updated successfully",
        "data": GenreResponse.model_validate(genre).model_dump()
    }


@router.delete("/{genre_id}", response_model=dict)
async def delete_genre(
    genre_id: int,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Delete genre; refused while comics reference it"""
    genre = db.query(Genre).filter(Genre.id == genre_id).first()
    if not genre:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Genre not found"
        )

    try:
        TaxonomyService.delete_genre(db, genre)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return {"ok": True, "message": "Genre deleted successfully"}
