"""
Infrastructure Database Layer.

This package provides the Supabase-backed implementation of the
SessionRepository port defined in application.ports.

Usage:
    from infrastructure.db import SupabaseSessionRepository, create_supabase_client

    client = await create_supabase_client(settings)
    session_repo = SupabaseSessionRepository(client, table=settings.sessions_table)
"""

from infrastructure.db.client import create_supabase_client
from infrastructure.db.session_repository import SupabaseSessionRepository

__all__ = [
    "SupabaseSessionRepository",
    "create_supabase_client",
]
