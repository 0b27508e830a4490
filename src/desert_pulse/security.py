"""
Password hashing and session tokens.

Passwords are hashed with bcrypt through passlib. Session tokens are HS256
JWTs carrying the user id in ``sub``. Raw passwords and tokens are never logged.
"""
import logging
from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext

from desert_pulse.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72


class InvalidToken(ValueError):
    """Raised when a session token is malformed, tampered with or expired."""


def _truncate(password: str) -> str:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES].decode("utf-8", errors="ignore")


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Raises:
        ValueError: If password is empty
    """
    if not password:
        raise ValueError("Password cannot be empty")
    return pwd_context.hash(_truncate(password))


def verify_password(plain: str, hashed: str) -> bool:
    """Check a password against its hash. Empty inputs never match."""
    if not plain or not hashed:
        return False
    try:
        return pwd_context.verify(_truncate(plain), hashed)
    except ValueError:
        # Not a recognizable hash
        return False


def create_session_token(user_id: str) -> str:
    """Sign a session token for ``user_id`` valid for TOKEN_EXPIRE_DAYS."""
    if not user_id:
        raise ValueError("user_id cannot be empty")

    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + timedelta(days=settings.TOKEN_EXPIRE_DAYS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_session_token(token: str) -> str:
    """
    Verify a session token and return its user id.

    Raises:
        InvalidToken: expired, badly signed or missing the ``sub`` claim
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as e:
        raise InvalidToken("Token expired") from e
    except jwt.InvalidTokenError as e:
        logger.debug("Session token rejected: %s", e)
        raise InvalidToken(f"Invalid token: {e}") from e

    user_id = payload.get("sub")
    if not user_id:
        raise InvalidToken("Token missing user ID")
    return str(user_id)
