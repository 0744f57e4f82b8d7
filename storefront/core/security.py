"""
Security utilities: password hashing and the signed session token carried
in the admin session cookie.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from storefront.core.config import get_settings

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def create_session_token(username: str, role: str) -> str:
    """
    Sign a session token for the admin session cookie.

    Claims:
      - sub: username
      - role: application role at login time
      - exp: now + SESSION_MAX_AGE_SECONDS
    """
    expire = datetime.now(timezone.utc) + timedelta(
        seconds=settings.SESSION_MAX_AGE_SECONDS
    )
    return jwt.encode(
        {"sub": username, "role": role, "exp": expire},
        settings.SESSION_SECRET,
        algorithm=settings.SESSION_ALG,
    )


def decode_session_token(token: str) -> dict[str, Any] | None:
    """
    Verify signature + expiry. Returns None for any invalid token so that
    callers can fall back to guest mode.
    """
    try:
        return jwt.decode(
            token,
            settings.SESSION_SECRET,
            algorithms=[settings.SESSION_ALG],
        )
    except JWTError:
        return None
