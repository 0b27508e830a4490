"""
Progress store backed by the Supabase ``progress`` table.

Each save is conditional on the ``completed_sessions`` value the snapshot was
read with, so two concurrent completions for one user cannot both win.
``complete_session`` re-reads and retries when it loses that race.
"""
import logging
from datetime import date, datetime
from typing import Any, Dict, Optional, Union

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
)

from desert_pulse.models import Minutes, ProgressRecord
from desert_pulse.services.progress_ledger import new_progress, record_session
from desert_pulse.services.supabase_client import (
    get_supabase_client,
    is_duplicate_error,
    is_missing_row_error,
)

logger = logging.getLogger(__name__)

MAX_SAVE_ATTEMPTS = 3


class ProgressStoreError(RuntimeError):
    """Raised when progress cannot be persisted."""


class ProgressConflictError(ProgressStoreError):
    """Raised when the stored record changed since it was read."""


def _get_supabase_client():
    return get_supabase_client()


def _to_row(record: ProgressRecord) -> Dict[str, Any]:
    return record.model_dump(mode="json")


class ProgressStore:
    """Read and write per-user progress records."""

    TABLE_NAME = "progress"

    def get(self, user_id: str) -> Optional[ProgressRecord]:
        """Return the user's record, or None if there is none."""
        client = _get_supabase_client()
        if not client:
            return None

        try:
            result = client.table(self.TABLE_NAME) \
                .select("*") \
                .eq("user_id", user_id) \
                .single() \
                .execute()
            return ProgressRecord.model_validate(result.data) if result.data else None
        except Exception as e:
            if is_missing_row_error(e):
                logger.debug("No progress yet for user %s", user_id)
                return None
            logger.error("Error fetching progress for user %s: %s", user_id, e)
            return None

    def create(self, user_id: str) -> Optional[ProgressRecord]:
        """Insert a zero-valued record. An existing record is returned as is."""
        client = _get_supabase_client()
        if not client:
            return None

        record = new_progress(user_id)
        try:
            client.table(self.TABLE_NAME).insert(_to_row(record)).execute()
            logger.info("Created progress record for user %s", user_id)
            return record
        except Exception as e:
            if is_duplicate_error(e):
                logger.debug("Progress already exists for user %s", user_id)
                return self.get(user_id)
            logger.error("Failed to create progress for user %s: %s", user_id, e)
            return None

    def save(self, record: ProgressRecord, expected_sessions: int) -> None:
        """
        Write ``record`` if the stored one still has ``expected_sessions``.

        Raises:
            ProgressConflictError: the stored record moved on or disappeared
            ProgressStoreError: the store is unavailable or the write failed
        """
        client = _get_supabase_client()
        if not client:
            raise ProgressStoreError("Progress store is not configured")

        try:
            result = client.table(self.TABLE_NAME) \
                .update(_to_row(record)) \
                .eq("user_id", record.user_id) \
                .eq("completed_sessions", expected_sessions) \
                .execute()
        except Exception as e:
            logger.error("Failed to save progress for user %s: %s", record.user_id, e)
            raise ProgressStoreError(str(e)) from e

        if not result.data:
            raise ProgressConflictError(
                f"Progress for user {record.user_id} changed since it was read"
            )


@retry(
    retry=retry_if_exception_type(ProgressConflictError),
    stop=stop_after_attempt(MAX_SAVE_ATTEMPTS),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
def complete_session(
    store: ProgressStore,
    user_id: str,
    session_date: Union[str, date, datetime],
    workout_type: str,
    duration_minutes: Minutes,
    energy_level: str,
) -> ProgressRecord:
    """
    Read, update and conditionally write a user's progress.

    Raises:
        ProgressValidationError: invalid session input (nothing is written)
        ProgressConflictError: still losing the race after the retries
        ProgressStoreError: the store could not be read or written
    """
    current = store.get(user_id) or store.create(user_id)
    if current is None:
        raise ProgressStoreError(f"No progress record available for user {user_id}")

    updated = record_session(current, session_date, workout_type, duration_minutes, energy_level)
    store.save(updated, expected_sessions=current.completed_sessions)
    return updated


def get_progress_store() -> ProgressStore:
    """FastAPI dependency."""
    return ProgressStore()
