"""Shared Supabase client for the document stores."""
import logging

from supabase import Client, create_client

from desert_pulse.config import settings

logger = logging.getLogger(__name__)


def get_supabase_client() -> Client | None:
    """Get Supabase client instance, or None when the store is not configured."""
    if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
        logger.warning("Supabase credentials not configured. Persistence is disabled.")
        return None

    try:
        return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    except Exception as e:
        logger.error(f"Failed to create Supabase client: {e}")
        return None


def is_missing_row_error(error: Exception) -> bool:
    """single() raises when no rows match."""
    message = str(error).lower()
    return "no rows" in message or "0 rows" in message


def is_duplicate_error(error: Exception) -> bool:
    message = str(error).lower()
    return "duplicate" in message or "unique" in message
