"""
Email subscriber model
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.security import generate_token
from app.utils.dates import utcnow


DEFAULT_PREFERENCES = {
    "comics": True,
    "blog": True,
    "announcements": True,
    "weekly_digest": True,
}


class EmailSubscriber(Base):
    """Newsletter subscriber"""

    __tablename__ = "email_subscribers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    email = Column(String, nullable=False, unique=True, index=True)
    name = Column(String, nullable=True)

    preferences = Column(JSON, nullable=False, default=lambda: dict(DEFAULT_PREFERENCES))

    # Verification
    is_verified = Column(Boolean, default=False, nullable=False)
    verification_token = Column(String, nullable=True, index=True)
    verification_sent_at = Column(DateTime(timezone=True), nullable=True)
    verified_at = Column(DateTime(timezone=True), nullable=True)

    # Subscription status
    is_subscribed = Column(Boolean, default=True, nullable=False)
    unsubscribe_token = Column(String, nullable=True, index=True)
    unsubscribed_at = Column(DateTime(timezone=True), nullable=True)

    # Tracking
    source = Column(String, nullable=True)
    campaign = Column(String, nullable=True)
    referral = Column(String, nullable=True)

    # Location
    country = Column(String, nullable=True)
    city = Column(String, nullable=True)
    timezone = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<EmailSubscriber(id={self.id}, email={self.email})>"

    def generate_verification_token(self) -> str:
        self.verification_token = generate_token()
        self.verification_sent_at = utcnow()
        return self.verification_token

    def generate_unsubscribe_token(self) -> str:
        self.unsubscribe_token = generate_token()
        return self.unsubscribe_token

    def mark_verified(self):
        self.is_verified = True
        self.verified_at = utcnow()
        self.verification_token = None

    def unsubscribe(self):
        self.is_subscribed = False
        self.unsubscribed_at = utcnow()

    def resubscribe(self):
        self.is_subscribed = True
        self.unsubscribed_at = None
