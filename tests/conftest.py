"""
Test fixtures for desert-pulse.

Replaces the Supabase-backed stores with in-memory versions so page and API
tests run offline and deterministically.
"""

import sys
import uuid
from pathlib import Path
from typing import Dict, Optional

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make src/ importable so tests can do `import desert_pulse...`
for p in {ROOT, SRC}:
    p_str = str(p)
    if p_str not in sys.path:
        sys.path.insert(0, p_str)

from main import app
from desert_pulse.config import settings
from desert_pulse.models import ProgressRecord, User
from desert_pulse.security import create_session_token, hash_password
from desert_pulse.services.progress_ledger import new_progress
from desert_pulse.services.progress_store import (
    ProgressConflictError,
    ProgressStore,
    get_progress_store,
)
from desert_pulse.services.user_store import (
    EmailAlreadyRegistered,
    UserStore,
    get_user_store,
    normalize_email,
)


TEST_PASSWORD = "correct-horse-battery"
# bcrypt is slow on purpose; hash once per session
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


# ---------------------------------------------------------------------------
# In-memory stores
# ---------------------------------------------------------------------------


class InMemoryUserStore(UserStore):
    """UserStore keeping accounts in a dict."""

    def __init__(self):
        self.users: Dict[str, User] = {}

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        email = normalize_email(email)
        return next((u for u in self.users.values() if u.email == email), None)

    def create(self, name, email, password_hash, goal, available_time_minutes):
        if self.get_by_email(email):
            raise EmailAlreadyRegistered(email)
        user = User(
            id=str(uuid.uuid4()),
            name=name,
            email=normalize_email(email),
            password_hash=password_hash,
            goal=goal,
            available_time_minutes=available_time_minutes,
        )
        self.users[user.id] = user
        return user

    def update_profile(self, user_id, goal, available_time_minutes) -> bool:
        user = self.users.get(user_id)
        if user is None:
            return False
        self.users[user_id] = user.model_copy(
            update={"goal": goal, "available_time_minutes": available_time_minutes}
        )
        return True


class InMemoryProgressStore(ProgressStore):
    """ProgressStore with the same conditional-save rule as the real one."""

    def __init__(self):
        self.records: Dict[str, ProgressRecord] = {}
        self.saves = 0

    def get(self, user_id: str) -> Optional[ProgressRecord]:
        record = self.records.get(user_id)
        return record.model_copy(deep=True) if record else None

    def create(self, user_id: str) -> Optional[ProgressRecord]:
        if user_id not in self.records:
            self.records[user_id] = new_progress(user_id)
        return self.get(user_id)

    def save(self, record: ProgressRecord, expected_sessions: int) -> None:
        stored = self.records.get(record.user_id)
        if stored is None or stored.completed_sessions != expected_sessions:
            raise ProgressConflictError(f"conflict for {record.user_id}")
        self.records[record.user_id] = record
        self.saves += 1


# ---------------------------------------------------------------------------
# Store / user fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def user_store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def progress_store() -> InMemoryProgressStore:
    return InMemoryProgressStore()


@pytest.fixture
def test_user(user_store, progress_store) -> User:
    """A stored account with a strength goal and 30 minutes."""
    user = user_store.create("Test User", "test@example.com", TEST_PASSWORD_HASH, "strength", 30)
    progress_store.create(user.id)
    return user


# ---------------------------------------------------------------------------
# Test clients
# ---------------------------------------------------------------------------


@pytest.fixture
def client(user_store, progress_store):
    """FastAPI TestClient wired to the in-memory stores."""
    app.dependency_overrides[get_user_store] = lambda: user_store
    app.dependency_overrides[get_progress_store] = lambda: progress_store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_client(client, test_user):
    """TestClient carrying a valid session cookie for ``test_user``."""
    client.cookies.set(settings.COOKIE_NAME, create_session_token(test_user.id))
    return client
