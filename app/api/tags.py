"""
Tag API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import Optional

from app.core.database import get_db
from app.core.dependencies import get_current_admin
from app.models.user import User
from app.models.master_data import Tag
from app.schemas.taxonomy import TagCreate, TagUpdate, TagResponse, TagCloudItem, TagType
from app.schemas.comic import ComicListItem
from app.services.taxonomy_service import TaxonomyService
from app.utils.pagination import apply_sort

router = APIRouter()

TAG_SORT_FIELDS = {
    "comic_count": Tag.comic_count,
    "name": Tag.name,
    "created_at": Tag.created_at,
}


def _tag_or_404(db: Session, tag_id: int) -> Tag:
    tag = db.query(Tag).filter(Tag.id == tag_id).first()
    if not tag:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tag not found"
        )
    return tag


@router.get("", response_model=dict)
async def list_tags(
    type: Optional[TagType] = None,
    featured: Optional[bool] = None,
    sort: str = Query("-comic_count"),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db)
):
    query = db.query(Tag)
    if type:
        query = query.filter(Tag.type == type)
    if featured:
        query = query.filter(Tag.featured.is_(True))

    tags = apply_sort(query, sort, TAG_SORT_FIELDS, "-comic_count").limit(limit).all()

    return {
        "ok": True,
        "data": [TagResponse.model_validate(tag).model_dump() for tag in tags],
        "count": len(tags)
    }


@router.get("/popular", response_model=dict)
async def popular_tags(
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """Tags used by at least one comic, most used first"""
    tags = db.query(Tag).filter(Tag.comic_count > 0).order_by(
        Tag.comic_count.desc(), Tag.name.asc()
    ).limit(limit).all()

    return {"ok": True, "data": [TagResponse.model_validate(tag).model_dump() for tag in tags]}


@router.get("/cloud", response_model=dict)
async def tag_cloud(
    min_count: int = Query(1, ge=0),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db)
):
    """Tags with a font size between 12 and 32 scaled by comic count"""
    cloud = TaxonomyService.tag_cloud(db, min_count=min_count, limit=limit)
    return {"ok": True, "data": [TagCloudItem(**item).model_dump() for item in cloud]}


@router.get("/{slug}", response_model=dict)
async def get_tag(
    slug: str,
    db: Session = Depends(get_db)
):
    """Tag with its latest published comics"""
    tag = TaxonomyService.get_by_slug(db, Tag, slug)
    if not tag:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Tag '{slug}' not found"
        )

    comics = TaxonomyService.tag_comics(db, tag)
    return {
        "ok": True,
        "data": {
            "tag": TagResponse.model_validate(tag).model_dump(),
            "comics": [ComicListItem.model_validate(c).model_dump() for c in comics]
        }
    }


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_tag(
    tag_data: TagCreate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    try:
        tag = TaxonomyService.create_tag(db, tag_data.model_dump(exclude_none=True))
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return {
        "ok": True,
        "message": "Tag created successfully",
        "data": TagResponse.model_validate(tag).model_dump()
    }


@router.put("/{tag_id}", response_model=dict)
async def update_tag(
    tag_id: int,
    tag_data: TagUpdate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    tag = _tag_or_404(db, tag_id)

    try:
        tag = TaxonomyService.update_tag(db, tag, tag_data.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return {
        "ok": True,
        "message": "Tag updated successfully",
        "data": TagResponse.model_validate(tag).model_dump()
    }


@router.delete("/{tag_id}", response_model=dict)
async def delete_tag(
    tag_id: int,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    tag = _tag_or_404(db, tag_id)

    try:
        TaxonomyService.delete_tag(db, tag)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return {"ok": True, "message": "Tag deleted successfully"}
