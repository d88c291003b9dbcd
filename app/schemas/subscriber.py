"""
Email subscriber Pydantic schemas
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from app.schemas.common import ORMConfig


class SubscriberPreferences(BaseModel):
    """Which newsletters a subscriber receives"""
    comics: bool = True
    blog: bool = True
    announcements: bool = True
    weekly_digest: bool = True


# ============ Request Schemas ============

class SubscribeRequest(BaseModel):
    """Schema for subscribing to the newsletter"""
    email: EmailStr
    name: Optional[str] = Field(None, max_length=100)
    preferences: Optional[SubscriberPreferences] = None
    source: Optional[str] = Field(None, max_length=100)
    campaign: Optional[str] = Field(None, max_length=100)
    referral: Optional[str] = Field(None, max_length=100)


# ============ Response Schemas ============

class SubscriberResponse(BaseModel):
    """Subscriber as shown to admins"""
    id: int
    email: str
    name: Optional[str]
    preferences: SubscriberPreferences
    is_verified: bool
    verified_at: Optional[datetime]
    is_subscribed: bool
    unsubscribed_at: Optional[datetime]
    source: Optional[str]
    campaign: Optional[str]
    country: Optional[str]
    created_at: datetime

    model_config = ORMConfig
