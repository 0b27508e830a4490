"""
Progress ledger update rules.

``record_session`` takes a ProgressRecord snapshot and returns a new one with
the session appended; the input is left untouched. Callers persisting the
result must serialize updates per user (at most one in flight), otherwise two
concurrent read-modify-write cycles lose a session.
"""
import logging
import math
from datetime import date, datetime
from typing import Optional, Union

from desert_pulse.models import Minutes, ProgressRecord, SessionEntry
from desert_pulse.utils import to_datetime

logger = logging.getLogger(__name__)


class ProgressValidationError(ValueError):
    """Raised for input that must not reach a progress record."""


def new_progress(user_id: Optional[str] = None) -> ProgressRecord:
    """Zero-valued record created alongside a new account."""
    return ProgressRecord(user_id=user_id)


def next_streak(streak: int, last_workout_date: Optional[datetime], session_date: datetime) -> int:
    """
    Streak after a session on ``session_date``.

    Same calendar day keeps the streak, the next calendar day extends it,
    anything else (including no previous session) starts over at 1.
    """
    if last_workout_date is None:
        return 1
    gap = (session_date.date() - last_workout_date.date()).days
    if gap == 0:
        return streak
    if gap == 1:
        return streak + 1
    return 1


def record_session(
    record: Optional[ProgressRecord],
    session_date: Union[str, date, datetime],
    workout_type: str,
    duration_minutes: Minutes,
    energy_level: str,
) -> ProgressRecord:
    """
    Append a completed session and update the derived counters.

    All validation happens before anything is built, so a rejected call
    leaves no trace. ``record=None`` starts from a zero-valued record.

    Raises:
        ProgressValidationError: negative, non-finite or non-numeric duration, a date that
            cannot be parsed, or a date earlier than the last recorded session.
    """
    if record is None:
        record = new_progress()

    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, (int, float)):
        raise ProgressValidationError(f"Duration must be a number, got {duration_minutes!r}")
    if not math.isfinite(duration_minutes):
        raise ProgressValidationError(f"Duration must be finite, got {duration_minutes}")
    if duration_minutes < 0:
        raise ProgressValidationError(f"Duration cannot be negative: {duration_minutes}")

    try:
        when = to_datetime(session_date)
    except (TypeError, ValueError) as e:
        raise ProgressValidationError(f"Invalid session date {session_date!r}: {e}") from e

    last = record.last_workout_date
    if last is not None and when.date() < last.date():
        raise ProgressValidationError(
            f"Session date {when.date()} is earlier than last workout {last.date()}"
        )

    entry = SessionEntry(
        date=when,
        workout_type=workout_type,
        duration_minutes=duration_minutes,
        energy_level=energy_level,
    )
    updated = record.model_copy(update={
        "history": [*record.history, entry],
        "completed_sessions": record.completed_sessions + 1,
        "total_minutes": record.total_minutes + duration_minutes,
        "streak": next_streak(record.streak, last, when),
        "last_workout_date": when,
    })
    logger.info(
        "Recorded %s session for user %s: sessions=%d streak=%d",
        workout_type, record.user_id, updated.completed_sessions, updated.streak,
    )
    return updated


def check_invariants(record: ProgressRecord) -> None:
    """Raise ProgressValidationError if the counters disagree with the history."""
    if record.completed_sessions != len(record.history):
        raise ProgressValidationError(
            f"completed_sessions={record.completed_sessions} but history has {len(record.history)} entries"
        )
    history_minutes = sum(h.duration_minutes for h in record.history)
    if record.total_minutes != history_minutes:
        raise ProgressValidationError(
            f"total_minutes={record.total_minutes} but history sums to {history_minutes}"
        )
