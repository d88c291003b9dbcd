"""
Authentication API endpoints
Registration, login, email verification and password reset
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging

from app.core.database import get_db
from app.services.auth_service import AuthService, AuthError
from app.schemas.user import (
    UserRegister,
    UserLogin,
    ForgotPassword,
    ResetPassword,
    UserResponse
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=dict, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    db: Session = Depends(get_db)
):
    """
    Register new user account

    - **email**: Unique email address
    - **username**: 3-30 letters, digits, dots, dashes or underscores
    - **password**: Password (min 8 characters)
    - **agree_to_terms**: Must be true

    A verification link is issued; login is refused until the email is verified.
    """
    try:
        user, _ = AuthService.create_user(
            db,
            email=user_data.email,
            username=user_data.username,
            password=user_data.password,
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            agree_to_terms=user_data.agree_to_terms
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    tokens = AuthService.create_tokens(user)
    logger.info(f"User registered: {user.username} (id={user.id})")

    return {
        "ok": True,
        "message": "Registration successful. Please check your email to verify your account.",
        "data": {
            "user": UserResponse.model_validate(user).model_dump(),
            **tokens
        }
    }


@router.post("/login", response_model=dict)
async def login(
    credentials: UserLogin,
    db: Session = Depends(get_db)
):
    """
    Login with email and password

    Five failed attempts lock the account for fifteen minutes.
    """
    try:
        user = AuthService.authenticate_user(db, credentials.email, credentials.password)
    except AuthError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail=str(e)
        )

    tokens = AuthService.create_tokens(user)

    return {
        "ok": True,
        "message": "Login successful",
        "data": {
            "user": UserResponse.model_validate(user).model_dump(),
            **tokens
        }
    }


@router.post("/verify-email/{token}", response_model=dict)
async def verify_email(
    token: str,
    db: Session = Depends(get_db)
):
    success, message = AuthService.verify_email(db, token)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=message
        )

    return {"ok": True, "message": message}


@router.post("/forgot-password", response_model=dict)
async def forgot_password(
    request: ForgotPassword,
    db: Session = Depends(get_db)
):
    """
    Request a password reset link

    The response is the same whether or not the account exists.
    """
    AuthService.send_password_reset(db, request.email)

    return {
        "ok": True,
        "message": "If an account exists with this email, a password reset link has been sent"
    }


@router.post("/reset-password/{token}", response_model=dict)
async def reset_password(
    token: str,
    request: ResetPassword,
    db: Session = Depends(get_db)
):
    success, message = AuthService.reset_password(db, token, request.password, request.confirm_password)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=message
        )

    return {"ok": True, "message": message}
