"""
User account store.

Accounts live in the Supabase ``users`` table. Lookups return None on a miss
or when the store is unavailable; errors are logged, not raised, except for
a duplicate email on signup which the caller must report to the user.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from desert_pulse.models import User
from desert_pulse.services.supabase_client import (
    get_supabase_client,
    is_duplicate_error,
    is_missing_row_error,
)

logger = logging.getLogger(__name__)


class UserStoreError(RuntimeError):
    """Raised when an account operation cannot proceed."""


class EmailAlreadyRegistered(UserStoreError):
    """Raised when signing up with an email that already has an account."""


def _get_supabase_client():
    return get_supabase_client()


def normalize_email(email: str) -> str:
    return email.lower().strip()


class UserStore:
    """Read and write user accounts."""

    TABLE_NAME = "users"

    def _fetch_one(self, column: str, value: str) -> Optional[User]:
        client = _get_supabase_client()
        if not client:
            return None

        try:
            result = client.table(self.TABLE_NAME) \
                .select("*") \
                .eq(column, value) \
                .single() \
                .execute()
            return User.model_validate(result.data) if result.data else None
        except Exception as e:
            if is_missing_row_error(e):
                logger.debug("No user with %s=%s", column, value)
                return None
            logger.error("Error fetching user by %s: %s", column, e)
            return None

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self._fetch_one("id", user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return self._fetch_one("email", normalize_email(email))

    def create(
        self,
        name: str,
        email: str,
        password_hash: str,
        goal: str,
        available_time_minutes: int,
    ) -> Optional[User]:
        """
        Insert a new account.

        Returns:
            The stored user, or None if the store is unavailable or the insert failed

        Raises:
            EmailAlreadyRegistered: if the email is taken
        """
        client = _get_supabase_client()
        if not client:
            return None

        data: Dict[str, Any] = {
            "name": name.strip(),
            "email": normalize_email(email),
            "password_hash": password_hash,
            "goal": goal,
            "available_time_minutes": available_time_minutes,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            result = client.table(self.TABLE_NAME).insert(data).execute()
        except Exception as e:
            if is_duplicate_error(e):
                raise EmailAlreadyRegistered(data["email"]) from e
            logger.error("Failed to create user: %s", e)
            return None

        if result.data and len(result.data) > 0:
            user = User.model_validate(result.data[0])
            logger.info("Created user %s", user.id)
            return user
        return None

    def update_profile(self, user_id: str, goal: str, available_time_minutes: int) -> bool:
        """Update goal and available time. Returns True on success."""
        client = _get_supabase_client()
        if not client:
            return False

        try:
            client.table(self.TABLE_NAME) \
                .update({
                    "goal": goal,
                    "available_time_minutes": available_time_minutes,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                }) \
                .eq("id", user_id) \
                .execute()
            logger.info("Updated profile for user %s", user_id)
            return True
        except Exception as e:
            logger.error("Failed to update profile for user %s: %s", user_id, e)
            return False


def get_user_store() -> UserStore:
    """FastAPI dependency."""
    return UserStore()
