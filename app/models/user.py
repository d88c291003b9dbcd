"""
User model - SQLAlchemy ORM
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text
from sqlalchemy.sql import func
from app.core.database import Base
from app.utils.dates import utcnow, as_utc


class User(Base):
    """User model for authentication and profile management"""

    __tablename__ = "users"

    # Primary Key
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Basic Info
    email = Column(String, unique=True, nullable=False, index=True)
    username = Column(String(30), unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)
    first_name = Column(String(50), nullable=True)
    last_name = Column(String(50), nullable=True)
    avatar = Column(String, nullable=True)
    bio = Column(Text, default="", nullable=True)

    # Role and Status
    role = Column(String, default="user", nullable=False, index=True)
    status = Column(String, default="pending", nullable=False, index=True)

    # Verification
    email_verified = Column(Boolean, default=False, nullable=False)
    verification_token = Column(String, nullable=True, index=True)
    verification_token_expires = Column(DateTime(timezone=True), nullable=True)
    password_reset_token = Column(String, nullable=True, index=True)
    password_reset_expires = Column(DateTime(timezone=True), nullable=True)

    # Lockout
    login_attempts = Column(Integer, default=0, nullable=False)
    lock_until = Column(DateTime(timezone=True), nullable=True)

    # Location (used by audience analytics)
    location = Column(String, nullable=True)
    country = Column(String, nullable=True)

    # Activity
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    last_active_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True, index=True)
    last_password_change = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username}, email={self.email})>"

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @property
    def initials(self) -> str:
        return "".join(part[0] for part in (self.first_name, self.last_name) if part).upper()

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def is_locked(self) -> bool:
        """Account is locked while lock_until lies in the future"""
        lock_until = as_utc(self.lock_until)
        return bool(lock_until and lock_until > utcnow())
