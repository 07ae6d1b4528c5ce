"""
Supabase client factory.
"""

import logging

from supabase import AsyncClient, acreate_client

from session_engine.settings import Settings

logger = logging.getLogger(__name__)


async def create_supabase_client(settings: Settings) -> AsyncClient:
    """
    Create an async Supabase client from settings.

    Raises:
        ValueError: If the Supabase URL or key is not configured
    """
    if not settings.supabase_url or not settings.supabase_key:
        raise ValueError(
            "Supabase is not configured. Set SUPABASE_URL and "
            "SUPABASE_SERVICE_ROLE_KEY (or SUPABASE_ANON_KEY)."
        )
    if not settings.supabase_service_role_key:
        logger.warning(
            "Using SUPABASE_ANON_KEY; row-level security may block session writes"
        )
    return await acreate_client(settings.supabase_url, settings.supabase_key)
