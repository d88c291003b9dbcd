"""
Analytics API endpoints
Admin-only site statistics
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import Optional, Literal
from datetime import datetime

from app.core.database import get_db
from app.core.dependencies import get_current_admin
from app.models.user import User
from app.services.analytics_service import AnalyticsService

router = APIRouter()


@router.get("/dashboard", response_model=dict)
async def get_dashboard_stats(
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """
    Get dashboard statistics

    Totals and 30-day trends for comics, blog posts and subscribers,
    plus global views and likes.
    """
    return {"ok": True, "data": AnalyticsService.dashboard(db)}


@router.get("", response_model=dict)
async def get_overview(
    days: int = Query(30, ge=1),
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """
    Site overview for the last ``days`` days

    Includes totals, growth trends, daily charts, popular content and insights.
    """
    try:
        data = AnalyticsService.overview(db, days)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return {"ok": True, "data": data, "period_days": days}


@router.get("/engagement", response_model=dict)
async def get_engagement(
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Engagement between two dates (defaults to the last 30 days)"""
    try:
        data = AnalyticsService.engagement(db, start_date, end_date)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return {"ok": True, "data": data}


@router.get("/content-performance", response_model=dict)
async def get_content_performance(
    type: Optional[Literal["comic", "blog"]] = None,
    limit: int = Query(10, ge=1, le=100),
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Published content ranked by engagement rate"""
    return {"ok": True, "data": AnalyticsService.content_performance(db, type, limit)}


@router.get("/audience", response_model=dict)
async def get_audience(
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    return {"ok": True, "data": AnalyticsService.audience(db)}


@router.get("/growth-trends", response_model=dict)
async def get_growth_trends(
    days: int = Query(30, ge=1, le=365),
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Daily views, user signups and content published"""
    return {"ok": True, "data": AnalyticsService.growth_trends(db, days), "period_days": days}
