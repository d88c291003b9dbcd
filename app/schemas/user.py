"""
User Pydantic schemas for request/response validation
"""
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import Optional
from datetime import datetime
from app.schemas.common import ORMConfig


USERNAME_PATTERN = r"^[a-zA-Z0-9_.-]+$"


# ============ Request Schemas ============

class UserRegister(BaseModel):
    """Schema for user registration"""
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    password: str = Field(..., min_length=8)
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    agree_to_terms: bool = False

    @field_validator("email", "username")
    @classmethod
    def lowercase(cls, v):
        return v.strip().lower()


class UserLogin(BaseModel):
    """Schema for user login"""
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v):
        return v.strip().lower()


class UpdateProfile(BaseModel):
    """Schema for updating profile details"""
    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    bio: Optional[str] = Field(None, max_length=500)
    avatar: Optional[str] = None
    location: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)


class ForgotPassword(BaseModel):
    """Schema for requesting a password reset link"""
    email: EmailStr

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v):
        return v.strip().lower()


class ResetPassword(BaseModel):
    """Schema for resetting password with a reset token"""
    password: str = Field(..., min_length=8)
    confirm_password: str


class ChangePassword(BaseModel):
    """Schema for changing password"""
    current_password: str
    new_password: str = Field(..., min_length=8)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


# ============ Response Schemas ============

class UserResponse(BaseModel):
    """Full user response schema (never includes secrets)"""
    id: int
    email: str
    username: str
    first_name: Optional[str]
    last_name: Optional[str]
    full_name: str
    initials: str
    avatar: Optional[str]
    bio: Optional[str]
    role: str
    status: str
    email_verified: bool
    location: Optional[str]
    country: Optional[str]
    last_login_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    model_config = ORMConfig
