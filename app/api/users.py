"""
User Management API endpoints
Profile and password management
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import get_current_user
from app.models.user import User
from app.schemas.user import UserResponse, UpdateProfile, ChangePassword
from app.services.auth_service import AuthService

router = APIRouter()


@router.get("/profile", response_model=dict)
async def get_profile(
    current_user: User = Depends(get_current_user)
):
    """Get current user profile"""
    return {
        "ok": True,
        "data": UserResponse.model_validate(current_user).model_dump()
    }


@router.put("/profile", response_model=dict)
async def update_profile(
    profile_data: UpdateProfile,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Update profile details

    - **first_name** / **last_name**: Display name
    - **bio**, **avatar**, **location**, **country**: Optional profile fields
    """
    for field, value in profile_data.model_dump(exclude_unset=True).items():
        setattr(current_user, field, value)

    db.commit()
    db.refresh(current_user)

    return {
        "ok": True,
        "message": "Profile updated successfully",
        "data": UserResponse.model_validate(current_user).model_dump()
    }


@router.post("/change-password", response_model=dict)
async def change_password(
    password_data: ChangePassword,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    success, message = AuthService.change_password(
        db, current_user, password_data.current_password, password_data.new_password
    )
    if not success:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=message
        )

    return {"ok": True, "message": message}
