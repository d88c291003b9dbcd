"""
Authentication Service
Handles user registration, login lockout, email verification and password management
"""
from sqlalchemy.orm import Session
from datetime import timedelta
from typing import Optional, Tuple, Dict, Any
import logging

from app.models.user import User
from app.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    generate_token
)
from app.core.config import settings
from app.utils.dates import utcnow, as_utc

logger = logging.getLogger(__name__)


class AuthError(ValueError):
    """Login refused"""
    status_code = 400


class InvalidCredentialsError(AuthError):
    def __init__(self):
        super().__init__("Invalid credentials")


class AccountLockedError(AuthError):
    status_code = 403

    def __init__(self):
        super().__init__("Account is temporarily locked. Try again later.")


class EmailNotVerifiedError(AuthError):
    status_code = 403

    def __init__(self):
        super().__init__("Please verify your email before logging in")


class AuthService:
    """Service for authentication operations"""

    @staticmethod
    def create_user(
        db: Session,
        email: str,
        username: str,
        password: str,
        first_name: str,
        last_name: str,
        agree_to_terms: bool
    ) -> Tuple[User, str]:
        """
        Create new user account

        Args:
            db: Database session
            email: Email (unique, lowercased)
            username: Username (unique, lowercased)
            password: Plain password (will be hashed)
            first_name: First name
            last_name: Last name
            agree_to_terms: Terms of service accepted

        Returns:
            Tuple of (created User, email verification token)

        Raises:
            ValueError: Terms not accepted, email or username taken
        """
        if not agree_to_terms:
            raise ValueError("You must agree to the terms of service")

        email = email.lower()
        username = username.lower()

        if db.query(User.id).filter(User.email == email).first():
            raise ValueError("Email already registered")
        if db.query(User.id).filter(User.username == username).first():
            raise ValueError("Username already taken")

        verification_token = generate_token()

        user = User(
            email=email,
            username=username,
            password=get_password_hash(password),
            first_name=first_name,
            last_name=last_name,
            status="active",
            email_verified=False,
            verification_token=verification_token,
            verification_token_expires=utcnow() + timedelta(hours=settings.VERIFICATION_TOKEN_EXPIRE_HOURS)
        )

        db.add(user)
        db.commit()
        db.refresh(user)

        # Email delivery is not wired up; the link is logged instead
        logger.info(f"Verification link for {user.email}: {settings.FRONTEND_URL}/verify-email/{verification_token}")

        return user, verification_token

    @staticmethod
    def authenticate_user(db: Session, email: str, password: str) -> User:
        """
        Authenticate user by email and password

        The lock is checked before the password, so a locked account
        is refused even with the right password.

        Returns:
            Authenticated User

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
            AccountLockedError: Too many failed attempts
            EmailNotVerifiedError: Correct password but email not verified
        """
        user = db.query(User).filter(User.email == email.lower(), User.deleted_at.is_(None)).first()
        if not user:
            raise InvalidCredentialsError()

        if user.is_locked():
            raise AccountLockedError()

        if not verify_password(password, user.password):
            AuthService.register_failed_login(db, user)
            raise InvalidCredentialsError()

        if not user.email_verified:
            raise EmailNotVerifiedError()

        now = utcnow()
        user.login_attempts = 0
        user.lock_until = None
        user.last_login_at = now
        user.last_active_at = now
        db.commit()
        db.refresh(user)

        return user

    @staticmethod
    def register_failed_login(db: Session, user: User):
        """
        Count a failed login, locking the account at MAX_LOGIN_ATTEMPTS

        An expired lock resets the counter instead of counting this attempt.
        """
        lock_until = as_utc(user.lock_until)
        if lock_until and lock_until < utcnow():
            user.login_attempts = 0
            user.lock_until = None
            db.commit()
            return

        updates: Dict[Any, Any] = {User.login_attempts: User.login_attempts + 1}
        if (user.login_attempts or 0) + 1 >= settings.MAX_LOGIN_ATTEMPTS:
            updates[User.lock_until] = utcnow() + timedelta(minutes=settings.LOCK_TIME_MINUTES)
            logger.warning(f"Locking account {user.email} after {settings.MAX_LOGIN_ATTEMPTS} failed logins")

        db.query(User).filter(User.id == user.id).update(updates, synchronize_session=False)
        db.commit()
        db.refresh(user)

    @staticmethod
    def create_tokens(user: User) -> Dict[str, Any]:
        """
        Create access token for user

        Returns:
            Dict with access_token, token_type and expires_in (seconds)
        """
        access_token = create_access_token(data={
            "sub": user.id,
            "email": user.email,
            "role": user.role
        })

        return {
            "access_token": access_token,
            "token_type": "bearer",
            "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
        }

    @staticmethod
    def verify_email(db: Session, token: str) -> Tuple[bool, str]:
        """
        Verify email with token

        Returns:
            Tuple of (success, message)
        """
        user = db.query(User).filter(User.verification_token == token).first()

        expires = as_utc(user.verification_token_expires) if user else None
        if not user or not expires or expires <= utcnow():
            return False, "Invalid or expired verification token"

        user.email_verified = True
        user.verification_token = None
        user.verification_token_expires = None
        db.commit()

        return True, "Email verified successfully"

    @staticmethod
    def send_password_reset(db: Session, email: str) -> Optional[str]:
        """
        Issue a password reset token when the account exists

        Returns:
            Reset token, or None for unknown emails
        """
        user = db.query(User).filter(User.email == email.lower(), User.deleted_at.is_(None)).first()
        if not user:
            return None

        token = generate_token()
        user.password_reset_token = token
        user.password_reset_expires = utcnow() + timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES)
        db.commit()

        logger.info(f"Password reset link for {user.email}: {settings.FRONTEND_URL}/reset-password/{token}")
        return token

    @staticmethod
    def reset_password(db: Session, token: str, password: str, confirm_password: str) -> Tuple[bool, str]:
        """
        Reset password using reset token

        Returns:
            Tuple of (success, message)
        """
        if password != confirm_password:
            return False, "Passwords do not match"

        user = db.query(User).filter(User.password_reset_token == token).first()

        expires = as_utc(user.password_reset_expires) if user else None
        if not user or not expires or expires <= utcnow():
            return False, "Invalid or expired reset token"

        user.password = get_password_hash(password)
        user.password_reset_token = None
        user.password_reset_expires = None
        user.last_password_change = utcnow()
        user.login_attempts = 0
        user.lock_until = None
        db.commit()

        return True, "Password reset successful"

    @staticmethod
    def change_password(db: Session, user: User, current_password: str, new_password: str) -> Tuple[bool, str]:
        """
        Change password of a logged-in user

        Returns:
            Tuple of (success, message)
        """
        if not verify_password(current_password, user.password):
            return False, "Current password is incorrect"

        if verify_password(new_password, user.password):
            return False, "New password must be different from the current password"

        user.password = get_password_hash(new_password)
        user.last_password_change = utcnow()
        db.commit()

        return True, "Password changed successfully"
