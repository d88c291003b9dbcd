"""
Newsletter subscriber API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import Optional

from app.core.database import get_db
from app.core.dependencies import get_current_admin
from app.models.user import User
from app.models.subscriber import EmailSubscriber
from app.schemas.subscriber import SubscribeRequest, SubscriberResponse
from app.services.subscriber_service import SubscriberService
from app.utils.pagination import get_pagination_params
from app.utils.responses import paginated_response

router = APIRouter()


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
async def subscribe(
    request: SubscribeRequest,
    db: Session = Depends(get_db)
):
    """
    Subscribe to the newsletter

    A verification link is issued for new and unverified addresses.
    """
    subscriber, message = SubscriberService.subscribe(
        db,
        email=request.email,
        name=request.name,
        preferences=request.preferences.model_dump() if request.preferences else None,
        source=request.source,
        campaign=request.campaign,
        referral=request.referral
    )

    return {
        "ok": True,
        "message": message,
        "data": {
            "email": subscriber.email,
            "is_verified": subscriber.is_verified
        }
    }


@router.get("/stats", response_model=dict)
async def subscriber_stats(
    days: int = Query(30, ge=1, le=365),
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    return {"ok": True, "data": SubscriberService.growth_stats(db, days)}


@router.get("/verify/{token}", response_model=dict)
async def verify_subscriber(
    token: str,
    db: Session = Depends(get_db)
):
    subscriber = SubscriberService.verify(db, token)
    if not subscriber:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired verification token"
        )

    return {
        "ok": True,
        "message": "Email verified successfully",
        "data": {"email": subscriber.email}
    }


@router.get("/unsubscribe/{token}", response_model=dict)
async def unsubscribe(
    token: str,
    db: Session = Depends(get_db)
):
    subscriber = SubscriberService.unsubscribe(db, token)
    if not subscriber:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invalid unsubscribe link"
        )

    return {
        "ok": True,
        "message": "Successfully unsubscribed",
        "data": {"email": subscriber.email}
    }


@router.get("", response_model=dict)
async def list_subscribers(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    subscribed: bool = True,
    verified: Optional[bool] = None,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """List subscribers, newest first (admin)"""
    page, limit = get_pagination_params(page, limit)
    subscribers, total = SubscriberService.list_subscribers(
        db, page=page, limit=limit, subscribed=subscribed, verified=verified
    )

    data = [SubscriberResponse.model_validate(s).model_dump() for s in subscribers]
    return paginated_response(data, page, limit, total)


@router.get("/{subscriber_id}", response_model=dict)
async def get_subscriber(
    subscriber_id: int,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    subscriber = db.query(EmailSubscriber).filter(EmailSubscriber.id == subscriber_id).first()
    if not subscriber:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Subscriber not found"
        )

    return {
        "ok": True,
        "data": {
            "subscriber": SubscriberResponse.model_validate(subscriber).model_dump(),
            "meta": SubscriberService.detail_meta(subscriber)
        }
    }
