"""
Authentication dependencies for session cookies and bearer tokens.

Page routes depend on ``require_page_user`` which raises ``LoginRequired``;
the application turns that into a redirect to /login. JSON routes depend on
``get_current_user`` which raises a 401 HTTPException instead.
"""
import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from desert_pulse.config import settings
from desert_pulse.models import User
from desert_pulse.security import InvalidToken, decode_session_token
from desert_pulse.services.user_store import UserStore, get_user_store

logger = logging.getLogger(__name__)


class LoginRequired(Exception):
    """Raised by page dependencies when the visitor must log in again."""

    def __init__(self, clear_cookie: bool = False):
        super().__init__("Login required")
        self.clear_cookie = clear_cookie


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header format")
    return authorization.split(" ", 1)[1]


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> str:
    """
    Authenticate via Bearer token OR session cookie.
    Returns user_id string.
    """
    token = _bearer_token(authorization) or request.cookies.get(settings.COOKIE_NAME)
    if not token:
        raise HTTPException(
            status_code=401,
            detail="Missing authentication. Provide Authorization header or session cookie."
        )

    try:
        return decode_session_token(token)
    except InvalidToken as e:
        raise HTTPException(status_code=401, detail=str(e))


async def get_optional_user(request: Request) -> Optional[str]:
    """Returns user_id if the session cookie is valid, None otherwise."""
    token = request.cookies.get(settings.COOKIE_NAME)
    if not token:
        return None
    try:
        return decode_session_token(token)
    except InvalidToken:
        return None


async def require_page_user(request: Request) -> str:
    """Session cookie check for server-rendered pages."""
    token = request.cookies.get(settings.COOKIE_NAME)
    if not token:
        raise LoginRequired()

    try:
        return decode_session_token(token)
    except InvalidToken as e:
        logger.info("Rejected session cookie: %s", e)
        raise LoginRequired(clear_cookie=True)


async def require_page_account(
    user_id: str = Depends(require_page_user),
    users: UserStore = Depends(get_user_store),
) -> User:
    """Load the logged-in user's account; a vanished account logs the visitor out."""
    user = users.get_by_id(user_id)
    if user is None:
        logger.warning("Session refers to unknown user %s", user_id)
        raise LoginRequired(clear_cookie=True)
    return user


async def require_api_account(
    user_id: str = Depends(get_current_user),
    users: UserStore = Depends(get_user_store),
) -> User:
    user = users.get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Unknown user")
    return user
