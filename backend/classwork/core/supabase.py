"""Supabase client construction for the REST data source"""
from supabase import create_client, Client
import logging

from classwork.core.config import Settings
from classwork.services.errors import ClassworkSourceError

logger = logging.getLogger(__name__)


def create_supabase_client(settings: Settings) -> Client:
    """Build a client with the service role key, falling back to the anon key"""
    if not settings.SUPABASE_URL or not settings.supabase_key:
        raise ClassworkSourceError("SUPABASE_URL and a Supabase key must be configured")

    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        logger.warning("Using the anon key; row level security may hide classwork rows")

    return create_client(settings.SUPABASE_URL, settings.supabase_key)
