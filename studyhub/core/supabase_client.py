import logging

from supabase import Client, create_client

from studyhub.config import settings

logger = logging.getLogger(__name__)

_supabase_client: Client | None = None


def get_supabase_client() -> Client:
    """Create (once) and return the Supabase client used for tables and storage."""
    global _supabase_client

    if _supabase_client is None:
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError("Supabase URL or service key is not configured")

        _supabase_client = create_client(settings.supabase_url, settings.supabase_service_key)
        logger.info("Supabase client initialized successfully")

    return _supabase_client


def get_notes_bucket():
    """Storage bucket that holds uploaded course notes."""
    return get_supabase_client().storage.from_(settings.notes_bucket)
