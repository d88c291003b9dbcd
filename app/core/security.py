"""
Password hashing and JWT helpers
"""
from datetime import timedelta
from typing import Optional, Dict, Any
import logging
import secrets

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import settings
from app.utils.dates import utcnow

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed access token

    Args:
        data: Claims to embed; ``sub`` is coerced to string
        expires_delta: Lifetime, defaults to ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        Encoded JWT
    """
    to_encode = dict(data)
    if "sub" in to_encode:
        to_encode["sub"] = str(to_encode["sub"])

    expire = utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire, "type": "access"})

    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode and verify a JWT, returning None when invalid or expired"""
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.info(f"Token validation failed: {e}")
        return None


def generate_token(nbytes: int = 32) -> str:
    """Random hex token for email verification, password reset and unsubscribe links"""
    return secrets.token_hex(nbytes)
