"""
Blog category API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import get_current_admin
from app.models.user import User
from app.models.master_data import Category
from app.schemas.taxonomy import CategoryCreate, CategoryResponse
from app.schemas.blog import RecentPost
from app.services.taxonomy_service import TaxonomyService

router = APIRouter()


@router.get("", response_model=dict)
async def list_categories(db: Session = Depends(get_db)):
    """Categories with up to five recent published posts each"""
    rows = TaxonomyService.categories_with_posts(db)

    data = []
    for row in rows:
        item = CategoryResponse.model_validate(row["category"]).model_dump()
        item["recent_posts"] = [RecentPost.model_validate(p).model_dump() for p in row["recent_posts"]]
        data.append(item)

    return {"ok": True, "data": data}


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_data: CategoryCreate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    try:
        category = TaxonomyService.create_category(db, category_data.model_dump(exclude_none=True))
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return {
        "ok": True,
        "message": "Category created successfully",
        "data": CategoryResponse.model_validate(category).model_dump()
    }


@router.delete("/{category_id}", response_model=dict)
async def delete_category(
    category_id: int,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found"
        )

    try:
        TaxonomyService.delete_category(db, category)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return {"ok": True, "message": "Category deleted successfully"}
