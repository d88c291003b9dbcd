"""
Analytics Service
Read-only aggregates over comics, blog posts, users and subscribers
"""
from sqlalchemy.orm import Session
from sqlalchemy import func, extract
from datetime import datetime, timedelta
from typing import Optional, Dict, List, Any
import logging

from app.models.comic import Comic
from app.models.blog_post import BlogPost
from app.models.user import User
from app.models.subscriber import EmailSubscriber
from app.utils.dates import utcnow, as_utc, period_bounds

logger = logging.getLogger(__name__)

MAX_OVERVIEW_DAYS = 365
ENGAGED_LIKE_WEIGHT = 5


def calculate_trend(current: float, previous: float) -> float:
    """
    Percentage change from ``previous`` to ``current``

    A zero baseline reports 100 when anything happened and 0 otherwise.
    """
    if previous > 0:
        return (current - previous) / previous * 100
    return 100.0 if current > 0 else 0.0


def rounded_trend(current: float, previous: float) -> float:
    return round(calculate_trend(current, previous), 1)


def engagement_rate(likes: int, views: int) -> float:
    """Likes per hundred views, two decimals"""
    if views <= 0:
        return 0
    return round(likes / views * 100, 2)


def _live(model):
    return model.deleted_at.is_(None)


def _published(model):
    return [model.status == "published", model.deleted_at.is_(None)]


def _day(value) -> str:
    # SQLite returns "YYYY-MM-DD", PostgreSQL a date
    return str(value)[:10]


class AnalyticsService:
    """Service for admin analytics"""

    # ============ Building blocks ============

    @staticmethod
    def count_published(
        db: Session,
        model,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        end_inclusive: bool = False
    ) -> int:
        query = db.query(func.count(model.id)).filter(*_published(model))
        if start is not None:
            query = query.filter(model.created_at >= start)
        if end is not None:
            query = query.filter(model.created_at <= end if end_inclusive else model.created_at < end)
        return query.scalar() or 0

    @staticmethod
    def comparative_stats(db: Session, model, current_start: datetime, previous_start: datetime) -> Dict[str, Any]:
        """Published total plus trend of this window against the previous one"""
        total = AnalyticsService.count_published(db, model)
        current = AnalyticsService.count_published(db, model, start=current_start)
        previous = AnalyticsService.count_published(db, model, start=previous_start, end=current_start)
        return {"total": total, "trend": rounded_trend(current, previous)}

    @staticmethod
    def subscriber_growth_stats(db: Session, days: int) -> Dict[str, Any]:
        previous_start, current_start, _ = period_bounds(days)

        total = db.query(func.count(EmailSubscriber.id)).scalar() or 0
        current = db.query(func.count(EmailSubscriber.id)).filter(
            EmailSubscriber.created_at >= current_start
        ).scalar() or 0
        previous = db.query(func.count(EmailSubscriber.id)).filter(
            EmailSubscriber.created_at >= previous_start,
            EmailSubscriber.created_at < current_start
        ).scalar() or 0

        return {"total": total, "trend": rounded_trend(current, previous), "current": current}

    @staticmethod
    def _sum_views_likes(db: Session, model, *criteria):
        row = db.query(
            func.coalesce(func.sum(model.views), 0),
            func.coalesce(func.sum(model.likes), 0)
        ).filter(*_published(model), *criteria).first()
        return int(row[0] or 0), int(row[1] or 0)

    @staticmethod
    def global_engagement(db: Session) -> Dict[str, int]:
        views = likes = 0
        for model in (Comic, BlogPost):
            v, l = AnalyticsService._sum_views_likes(db, model)
            views += v
            likes += l
        return {"views": views, "likes": likes}

    @staticmethod
    def engagement_stats(db: Session, start: datetime, end: datetime) -> Dict[str, Any]:
        """Views/likes of published content touched within [start, end]"""
        views = likes = 0
        for model in (Comic, BlogPost):
            v, l = AnalyticsService._sum_views_likes(
                db, model, model.updated_at >= start, model.updated_at <= end
            )
            views += v
            likes += l

        return {
            "total_views": views,
            "total_likes": likes,
            "engagement_rate": engagement_rate(likes, views)
        }

    @staticmethod
    def _windowed_totals(db: Session, column_name: str, start: datetime, end: datetime, end_inclusive: bool) -> int:
        total = 0
        for model in (Comic, BlogPost):
            column = getattr(model, column_name)
            upper = model.created_at <= end if end_inclusive else model.created_at < end
            total += int(db.query(func.coalesce(func.sum(column), 0)).filter(
                *_published(model), model.created_at >= start, upper
            ).scalar() or 0)
        return total

    @staticmethod
    def view_growth(db: Session, current_start: datetime, previous_start: datetime, now: datetime) -> float:
        current = AnalyticsService._windowed_totals(db, "views", current_start, now, True)
        previous = AnalyticsService._windowed_totals(db, "views", previous_start, current_start, False)
        return rounded_trend(current, previous)

    @staticmethod
    def likes_trend(db: Session, days: int) -> float:
        previous_start, current_start, now = period_bounds(days)
        current = AnalyticsService._windowed_totals(db, "likes", current_start, now, True)
        previous = AnalyticsService._windowed_totals(db, "likes", previous_start, current_start, False)
        return rounded_trend(current, previous)

    @staticmethod
    def trend_from_daily(daily: List[Dict[str, Any]]) -> float:
        """Compare the average of the last 7 points with the 7 before them"""
        if len(daily) < 2:
            return 0

        recent = [day["value"] for day in daily[-7:]]
        previous = [day["value"] for day in daily[-14:-7]]

        recent_avg = sum(recent) / len(recent)
        previous_avg = sum(previous) / len(previous) if previous else 0
        return rounded_trend(recent_avg, previous_avg)

    @staticmethod
    def content_stats(db: Session, model, start: datetime, end: datetime) -> Dict[str, Any]:
        total = db.query(func.count(model.id)).filter(_live(model)).scalar() or 0
        published = AnalyticsService.count_published(db, model)
        totals = db.query(
            func.coalesce(func.sum(model.views), 0),
            func.coalesce(func.sum(model.likes), 0)
        ).filter(_live(model)).first()

        current = AnalyticsService.count_published(db, model, start=start, end=end, end_inclusive=True)
        previous = AnalyticsService.count_published(db, model, start=start - (end - start), end=start)

        return {
            "total": total,
            "published": published,
            "views": int(totals[0] or 0),
            "likes": int(totals[1] or 0),
            "growth": rounded_trend(current, previous)
        }

    @staticmethod
    def user_stats(db: Session, start: datetime, end: datetime) -> Dict[str, int]:
        live = User.deleted_at.is_(None)
        total = db.query(func.count(User.id)).filter(live).scalar() or 0
        active = db.query(func.count(User.id)).filter(
            live, User.last_active_at >= start, User.last_active_at <= end
        ).scalar() or 0
        new_users = db.query(func.count(User.id)).filter(
            live, User.created_at >= start, User.created_at <= end
        ).scalar() or 0
        return {"total": total, "active_users": active, "new_users": new_users}

    @staticmethod
    def popular_content(db: Session, limit: int = 5) -> Dict[str, List[Dict[str, Any]]]:
        def top(model):
            rows = db.query(model).filter(*_published(model)).order_by(model.views.desc()).limit(limit).all()
            return [
                {"id": row.id, "title": row.title, "slug": row.slug, "views": row.views or 0, "likes": row.likes or 0}
                for row in rows
            ]

        return {"top_comics": top(Comic), "top_blogs": top(BlogPost)}

    @staticmethod
    def growth_trends(db: Session, days: int) -> Dict[str, List[Dict[str, Any]]]:
        """Daily views, signups and published content since ``days`` ago"""
        start = utcnow() - timedelta(days=days)

        def content_by_day(model):
            day = func.date(model.created_at)
            rows = db.query(
                day.label("day"),
                func.count(model.id),
                func.coalesce(func.sum(model.views), 0)
            ).filter(*_published(model), model.created_at >= start).group_by(day).all()
            return {_day(d): {"count": c, "views": int(v or 0)} for d, c, v in rows}

        comic_days = content_by_day(Comic)
        blog_days = content_by_day(BlogPost)

        signup_day = func.date(User.created_at)
        user_days = {
            _day(d): c for d, c in db.query(signup_day, func.count(User.id))
            .filter(User.created_at >= start)
            .group_by(signup_day)
            .all()
        }

        dates = sorted(set(comic_days) | set(blog_days) | set(user_days))
        empty = {"count": 0, "views": 0}

        return {
            "daily_views": [
                {"date": d, "value": comic_days.get(d, empty)["views"] + blog_days.get(d, empty)["views"]}
                for d in dates
            ],
            "user_growth": [{"date": d, "value": user_days.get(d, 0)} for d in dates],
            "content_published": [
                {"date": d, "comics": comic_days.get(d, empty)["count"], "blogs": blog_days.get(d, empty)["count"]}
                for d in dates
            ]
        }

    @staticmethod
    def generate_insights(
        comic_stats: Dict[str, Any],
        blog_stats: Dict[str, Any],
        subscriber_stats: Dict[str, Any],
        engagement: Dict[str, Any],
        days: int
    ) -> List[Dict[str, str]]:
        insights = []

        if engagement["engagement_rate"] < 2:
            insights.append({
                "type": "warning",
                "title": "Low Engagement",
                "message": "Likes/Views ratio is below 2%.",
                "action": "Try adding engagement prompts to content."
            })

        if subscriber_stats["trend"] > 15:
            insights.append({
                "type": "success",
                "title": "Subscriber Growth",
                "message": f"Subscribers grew by {subscriber_stats['trend']}% in the last {days} days.",
                "action": "Analyze traffic sources for this growth."
            })

        if comic_stats["growth"] < -10:
            insights.append({
                "type": "error",
                "title": "Declining Comic Production",
                "message": f"Comic publishing decreased by {abs(comic_stats['growth'])}%.",
                "action": "Check if authors need support or incentives."
            })

        if blog_stats["growth"] > 25:
            insights.append({
                "type": "success",
                "title": "Blog Production Surge",
                "message": f"Blog publishing increased by {blog_stats['growth']}%.",
                "action": "Promote top-performing blog posts."
            })

        return insights

    @staticmethod
    def peak_engagement_hour(db: Session, start: datetime, end: datetime) -> Optional[Dict[str, Any]]:
        """Creation hour whose published content gathered the most views + likes"""
        peak_hour, peak_value = 0, 0

        for model in (Comic, BlogPost):
            hour = extract("hour", model.created_at)
            total = func.sum(model.views + model.likes)
            row = db.query(hour.label("hour"), total.label("total")).filter(
                *_published(model), model.created_at >= start, model.created_at <= end
            ).group_by(hour).order_by(total.desc()).first()

            if row and (row.total or 0) > peak_value:
                peak_hour, peak_value = int(row.hour), int(row.total)

        if peak_value == 0:
            return None

        suffix = "PM" if peak_hour >= 12 else "AM"
        display_hour = peak_hour % 12 or 12
        return {"hour": peak_hour, "label": f"{display_hour}:00 {suffix}", "activity": peak_value}

    @staticmethod
    def most_engaged_content(db: Session, limit: int = 5) -> Dict[str, List[Dict[str, Any]]]:
        def top(model):
            score = model.views + model.likes * ENGAGED_LIKE_WEIGHT
            rows = db.query(model.id, model.title, model.views, model.likes, score.label("score")).filter(
                *_published(model)
            ).order_by(score.desc()).limit(limit).all()
            return [
                {"id": r.id, "title": r.title, "views": r.views, "likes": r.likes, "score": r.score}
                for r in rows
            ]

        return {"top_comics": top(Comic), "top_blogs": top(BlogPost)}

    @staticmethod
    def daily_engagement_trends(db: Session, start: datetime, end: datetime) -> List[Dict[str, Any]]:
        daily: Dict[str, Dict[str, Any]] = {}

        for model in (Comic, BlogPost):
            day = func.date(model.updated_at)
            rows = db.query(
                day,
                func.coalesce(func.sum(model.likes), 0),
                func.coalesce(func.sum(model.views), 0)
            ).filter(
                *_published(model), model.updated_at >= start, model.updated_at <= end
            ).group_by(day).all()

            for d, likes, views in rows:
                entry = daily.setdefault(_day(d), {"date": _day(d), "likes": 0, "views": 0})
                entry["likes"] += int(likes or 0)
                entry["views"] += int(views or 0)

        return [daily[d] for d in sorted(daily)]

    @staticmethod
    def avg_engagement_per_user(db: Session, start: datetime, end: datetime, engagement: Dict[str, Any]) -> float:
        active_users = db.query(func.count(User.id)).filter(User.last_active_at >= start).scalar() or 0
        if active_users == 0:
            return 0
        return round((engagement["total_likes"] + engagement["total_views"]) / active_users, 2)

    @staticmethod
    def user_retention(db: Session) -> Dict[str, Any]:
        now = utcnow()
        seven_days_ago = now - timedelta(days=7)
        fourteen_days_ago = now - timedelta(days=14)

        active_users = db.query(func.count(User.id)).filter(User.last_active_at >= seven_days_ago).scalar() or 0
        returning_users = db.query(func.count(User.id)).filter(
            User.last_active_at >= seven_days_ago,
            User.created_at < fourteen_days_ago
        ).scalar() or 0
        established_users = db.query(func.count(User.id)).filter(
            User.created_at < fourteen_days_ago
        ).scalar() or 0

        if established_users:
            retention = round(returning_users / established_users * 100, 1)
            churn = round((1 - returning_users / established_users) * 100, 1)
        else:
            retention = churn = 0

        return {
            "retention_rate": retention,
            "churn_rate": churn,
            "active_users": active_users,
            "returning_users": returning_users
        }

    @staticmethod
    def top_locations(db: Session, start: datetime, end: datetime, limit: int = 5) -> List[Dict[str, Any]]:
        users = db.query(User.location, User.country).filter(
            User.last_active_at >= start, User.last_active_at <= end
        ).limit(100).all()

        counts: Dict[str, int] = {}
        for location, country in users:
            key = location or country or "Unknown"
            counts[key] = counts.get(key, 0) + 1

        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)[:limit]
        return [{"country": name, "users": total} for name, total in ranked]

    # ============ Endpoint payloads ============

    @staticmethod
    def dashboard(db: Session, days: int = 30) -> Dict[str, Any]:
        previous_start, current_start, _ = period_bounds(days)

        comic_data = AnalyticsService.comparative_stats(db, Comic, current_start, previous_start)
        blog_data = AnalyticsService.comparative_stats(db, BlogPost, current_start, previous_start)
        subscribers = AnalyticsService.subscriber_growth_stats(db, days)
        engagement = AnalyticsService.global_engagement(db)
        trends = AnalyticsService.growth_trends(db, days)

        return {
            "total_comics": comic_data["total"],
            "comic_trend": comic_data["trend"],
            "total_blogs": blog_data["total"],
            "blog_trend": blog_data["trend"],
            "total_subscribers": subscribers["total"],
            "subscriber_trend": subscribers["trend"],
            "growth_rate": subscribers["trend"],
            "total_views": engagement["views"],
            "views_trend": AnalyticsService.trend_from_daily(trends["daily_views"]),
            "total_likes": engagement["likes"],
            "likes_trend": AnalyticsService.likes_trend(db, days),
            "growth_trend": subscribers["current"]
        }

    @staticmethod
    def overview(db: Session, days: int = 30) -> Dict[str, Any]:
        """
        Site-wide overview for the last ``days`` days

        Raises:
            ValueError: If ``days`` exceeds one year
        """
        if days > MAX_OVERVIEW_DAYS:
            raise ValueError(f"Date range cannot exceed {MAX_OVERVIEW_DAYS} days")

        previous_start, current_start, now = period_bounds(days)

        comic_stats = AnalyticsService.content_stats(db, Comic, current_start, now)
        blog_stats = AnalyticsService.content_stats(db, BlogPost, current_start, now)
        subscriber_stats = AnalyticsService.subscriber_growth_stats(db, days)
        user_stats = AnalyticsService.user_stats(db, current_start, now)
        engagement = AnalyticsService.engagement_stats(db, current_start, now)

        return {
            "overview": {
                "total_comics": comic_stats["total"],
                "total_blogs": blog_stats["total"],
                "total_subscribers": subscriber_stats["total"],
                "total_users": user_stats["total"],
                "total_views": engagement["total_views"],
                "total_likes": engagement["total_likes"],
                "active_users": user_stats["active_users"]
            },
            "trends": {
                "comic_growth": comic_stats["growth"],
                "blog_growth": blog_stats["growth"],
                "subscriber_growth": subscriber_stats["trend"],
                "view_growth": AnalyticsService.view_growth(db, current_start, previous_start, now),
                "engagement_rate": engagement["engagement_rate"]
            },
            "charts": AnalyticsService.growth_trends(db, days),
            "popular": AnalyticsService.popular_content(db),
            "insights": AnalyticsService.generate_insights(
                comic_stats, blog_stats, subscriber_stats, engagement, days
            )
        }

    @staticmethod
    def engagement(db: Session, start: Optional[datetime] = None, end: Optional[datetime] = None) -> Dict[str, Any]:
        end = as_utc(end) or utcnow()
        start = as_utc(start) or end - timedelta(days=30)
        if start > end:
            raise ValueError("start_date must be before end_date")

        stats = AnalyticsService.engagement_stats(db, start, end)

        return {
            "metrics": {
                "total_engagement": stats["total_likes"] + stats["total_views"],
                "total_views": stats["total_views"],
                "total_likes": stats["total_likes"],
                "avg_engagement_per_user": AnalyticsService.avg_engagement_per_user(db, start, end, stats),
                "peak_engagement_time": AnalyticsService.peak_engagement_hour(db, start, end),
                "most_engaged_content": AnalyticsService.most_engaged_content(db)
            },
            "trends": AnalyticsService.daily_engagement_trends(db, start, end)
        }

    @staticmethod
    def content_performance(db: Session, content_type: Optional[str] = None, limit: int = 10) -> List[Dict[str, Any]]:
        """Top published content by views, re-ranked by engagement rate"""
        sources = []
        if content_type in (None, "comic"):
            sources.append(("comic", Comic))
        if content_type in (None, "blog"):
            sources.append(("blog", BlogPost))

        results = []
        for label, model in sources:
            rows = db.query(model).filter(*_published(model)).order_by(model.views.desc()).limit(limit).all()
            for row in rows:
                author = row.author if label == "blog" else row.writer
                results.append({
                    "id": row.id,
                    "slug": row.slug,
                    "title": row.title,
                    "type": label,
                    "views": row.views or 0,
                    "likes": row.likes or 0,
                    "engagement_rate": engagement_rate(row.likes or 0, row.views or 0),
                    "published_date": row.published_at or row.created_at,
                    "author": author or "Unknown"
                })

        results.sort(key=lambda item: item["engagement_rate"], reverse=True)
        return results[:limit]

    @staticmethod
    def audience(db: Session) -> Dict[str, Any]:
        now = utcnow()
        thirty_days_ago = now - timedelta(days=30)
        peak = AnalyticsService.peak_engagement_hour(db, thirty_days_ago, now)

        return {
            "demographics": {
                "location": AnalyticsService.top_locations(db, thirty_days_ago, now)
            },
            "behavior": {
                "peak_hours": [{"hour": peak["hour"], "activity": peak["activity"]}] if peak else []
            },
            "retention": AnalyticsService.user_retention(db)
        }
