"""
Subscriber Service
Newsletter subscription, verification and growth statistics
"""
from sqlalchemy.orm import Session
from sqlalchemy import func
from datetime import timedelta
from typing import Optional, Dict, Any, Tuple, List
import logging

from app.core.config import settings
from app.models.subscriber import EmailSubscriber, DEFAULT_PREFERENCES
from app.services.analytics_service import calculate_trend
from app.utils.dates import utcnow, as_utc, period_bounds
from app.utils.pagination import paginate

logger = logging.getLogger(__name__)

FREE_MAIL_PROVIDERS = ("gmail.com", "yahoo.com", "outlook.com")


class SubscriberService:
    """Service for email subscriber operations"""

    @staticmethod
    def _send_verification(subscriber: EmailSubscriber):
        # Email delivery is not wired up; the links are logged instead
        verify_url = f"{settings.FRONTEND_URL}/verify-email?token={subscriber.verification_token}"
        unsubscribe_url = f"{settings.BASE_URL}{settings.API_PREFIX}/subscribers/unsubscribe/{subscriber.unsubscribe_token}"
        logger.info(f"Verification link for subscriber {subscriber.email}: {verify_url} (unsubscribe: {unsubscribe_url})")

    @staticmethod
    def subscribe(
        db: Session,
        email: str,
        name: Optional[str] = None,
        preferences: Optional[Dict[str, bool]] = None,
        **tracking: Optional[str]
    ) -> Tuple[EmailSubscriber, str]:
        """
        Subscribe an email address

        Returns:
            Tuple of (subscriber, message)
        """
        email = email.strip().lower()
        subscriber = db.query(EmailSubscriber).filter(EmailSubscriber.email == email).first()

        if subscriber:
            if subscriber.is_subscribed and subscriber.is_verified:
                return subscriber, "Already subscribed"

            if not subscriber.is_subscribed:
                subscriber.resubscribe()
                subscriber.preferences = {**(subscriber.preferences or DEFAULT_PREFERENCES), **(preferences or {})}
                if name:
                    subscriber.name = name

            if not subscriber.is_verified:
                subscriber.generate_verification_token()
            if not subscriber.unsubscribe_token:
                subscriber.generate_unsubscribe_token()

            db.commit()
            db.refresh(subscriber)

            if not subscriber.is_verified:
                SubscriberService._send_verification(subscriber)
            return subscriber, "Subscription successful"

        subscriber = EmailSubscriber(
            email=email,
            name=name,
            preferences={**DEFAULT_PREFERENCES, **(preferences or {})},
            **{k: v for k, v in tracking.items() if v is not None}
        )
        subscriber.generate_verification_token()
        subscriber.generate_unsubscribe_token()

        db.add(subscriber)
        db.commit()
        db.refresh(subscriber)

        SubscriberService._send_verification(subscriber)
        logger.info(f"New subscriber: {subscriber.email}")
        return subscriber, "Subscription successful"

    @staticmethod
    def verify(db: Session, token: str) -> Optional[EmailSubscriber]:
        """Verify by token sent within the last VERIFICATION_TOKEN_EXPIRE_HOURS"""
        subscriber = db.query(EmailSubscriber).filter(EmailSubscriber.verification_token == token).first()
        if not subscriber:
            return None

        sent_at = as_utc(subscriber.verification_sent_at)
        expiry = timedelta(hours=settings.VERIFICATION_TOKEN_EXPIRE_HOURS)
        if not sent_at or sent_at <= utcnow() - expiry:
            return None

        subscriber.mark_verified()
        db.commit()
        db.refresh(subscriber)
        return subscriber

    @staticmethod
    def unsubscribe(db: Session, token: str) -> Optional[EmailSubscriber]:
        subscriber = db.query(EmailSubscriber).filter(EmailSubscriber.unsubscribe_token == token).first()
        if not subscriber:
            return None

        subscriber.unsubscribe()
        db.commit()
        db.refresh(subscriber)
        return subscriber

    @staticmethod
    def list_subscribers(
        db: Session,
        page: int = 1,
        limit: Optional[int] = None,
        subscribed: Optional[bool] = True,
        verified: Optional[bool] = None
    ) -> Tuple[List[EmailSubscriber], int]:
        query = db.query(EmailSubscriber)

        if subscribed:
            query = query.filter(EmailSubscriber.is_subscribed.is_(True))
        if verified is not None:
            query = query.filter(EmailSubscriber.is_verified.is_(verified))

        query = query.order_by(EmailSubscriber.created_at.desc(), EmailSubscriber.id.desc())
        return paginate(query, page, limit)

    @staticmethod
    def detail_meta(subscriber: EmailSubscriber) -> Dict[str, Any]:
        """Email provider, corporate flag and tenure in days"""
        provider = subscriber.email.split("@")[-1]
        created_at = as_utc(subscriber.created_at) or utcnow()
        return {
            "provider": provider,
            "is_corporate": provider not in FREE_MAIL_PROVIDERS,
            "tenure_days": (utcnow() - created_at).days
        }

    @staticmethod
    def growth_stats(db: Session, days: int = 30) -> Dict[str, Any]:
        """Active subscribers plus signups and unsubscribes in the last ``days`` days"""
        previous_start, current_start, _ = period_bounds(days)
        subscribed = EmailSubscriber.is_subscribed.is_(True)

        total = db.query(func.count(EmailSubscriber.id)).filter(subscribed).scalar() or 0
        current = db.query(func.count(EmailSubscriber.id)).filter(
            subscribed, EmailSubscriber.created_at >= current_start
        ).scalar() or 0
        previous = db.query(func.count(EmailSubscriber.id)).filter(
            subscribed,
            EmailSubscriber.created_at >= previous_start,
            EmailSubscriber.created_at < current_start
        ).scalar() or 0
        lost = db.query(func.count(EmailSubscriber.id)).filter(
            EmailSubscriber.is_subscribed.is_(False),
            EmailSubscriber.unsubscribed_at >= current_start
        ).scalar() or 0

        trend = round(calculate_trend(current, previous), 1)

        return {
            "total": total,
            "new_signups": current,
            "net_growth": current - lost,
            "growth_percentage": f"{trend:.1f}",
            "trend": trend,
            "period_days": days,
            "unsubscribes": lost
        }
