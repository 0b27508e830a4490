"""Tests for the authentication dependencies.

Verifies:
- Bearer token and session cookie both authenticate API calls
- Missing / invalid credentials raise 401 for the API
- Page dependencies raise LoginRequired, clearing the cookie when it was bad
"""

from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException

from desert_pulse.auth import (
    LoginRequired,
    get_current_user,
    get_optional_user,
    require_page_account,
    require_page_user,
)
from desert_pulse.config import settings
from desert_pulse.security import create_session_token


def _request(cookie: str | None = None):
    request = MagicMock()
    request.cookies = {settings.COOKIE_NAME: cookie} if cookie else {}
    return request


# ---------------------------------------------------------------------------
# API dependency
# ---------------------------------------------------------------------------


class TestGetCurrentUser:

    @pytest.mark.asyncio
    async def test_bearer_token(self):
        token = create_session_token("user_1")
        assert await get_current_user(_request(), authorization=f"Bearer {token}") == "user_1"

    @pytest.mark.asyncio
    async def test_cookie_token(self):
        token = create_session_token("user_2")
        assert await get_current_user(_request(token), authorization=None) == "user_2"

    @pytest.mark.asyncio
    async def test_missing_auth_raises_401(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(_request(), authorization=None)
        assert exc_info.value.status_code == 401
        assert "Missing authentication" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_bad_header_format_raises_401(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(_request(), authorization="Token abc")
        assert exc_info.value.status_code == 401
        assert "Invalid authorization header format" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_invalid_token_raises_401(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(_request("garbage"), authorization=None)
        assert exc_info.value.status_code == 401


class TestGetOptionalUser:

    @pytest.mark.asyncio
    async def test_valid_cookie(self):
        assert await get_optional_user(_request(create_session_token("u"))) == "u"

    @pytest.mark.asyncio
    async def test_invalid_cookie_is_anonymous(self):
        assert await get_optional_user(_request("garbage")) is None

    @pytest.mark.asyncio
    async def test_no_cookie_is_anonymous(self):
        assert await get_optional_user(_request()) is None


# ---------------------------------------------------------------------------
# Page dependencies
# ---------------------------------------------------------------------------


class TestRequirePageUser:

    @pytest.mark.asyncio
    async def test_valid_cookie(self):
        assert await require_page_user(_request(create_session_token("u"))) == "u"

    @pytest.mark.asyncio
    async def test_missing_cookie_keeps_nothing_to_clear(self):
        with pytest.raises(LoginRequired) as exc_info:
            await require_page_user(_request())
        assert exc_info.value.clear_cookie is False

    @pytest.mark.asyncio
    async def test_invalid_cookie_is_cleared(self):
        with pytest.raises(LoginRequired) as exc_info:
            await require_page_user(_request("garbage"))
        assert exc_info.value.clear_cookie is True


class TestRequirePageAccount:

    @pytest.mark.asyncio
    async def test_known_user(self, user_store, test_user):
        user = await require_page_account(user_id=test_user.id, users=user_store)
        assert user.email == "test@example.com"

    @pytest.mark.asyncio
    async def test_unknown_user_logs_out(self, user_store):
        with pytest.raises(LoginRequired) as exc_info:
            await require_page_account(user_id="deleted-user", users=user_store)
        assert exc_info.value.clear_cookie is True
