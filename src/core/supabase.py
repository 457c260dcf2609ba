"""Supabase client singleton for database operations."""

from functools import lru_cache
from typing import Any

from supabase import AsyncClient
from supabase.lib.client_options import AsyncClientOptions

from src.core.config import get_settings


@lru_cache
def get_supabase_client() -> AsyncClient:
    """Get cached async Supabase client singleton for database operations.

    Uses the secret key for backend operations, which bypasses RLS
    at the PostgREST level. Every query issued through it must already
    be scoped to the authenticated owner by the calling service.

    Returns:
        AsyncClient: Supabase client instance.
    """
    settings = get_settings()
    options = AsyncClientOptions(
        auto_refresh_token=False,
        persist_session=False,
    )
    return AsyncClient(
        settings.supabase_url,
        settings.supabase_secret_key,
        options=options,
    )


async def check_database_connection() -> dict[str, Any]:
    """Check if database connection is healthy.

    Performs a simple query to verify database connectivity.

    Returns:
        dict: Connection status with 'healthy' boolean and optional 'error' message.
    """
    try:
        client = get_supabase_client()
        await client.table("profiles").select("id").limit(1).execute()
        return {"healthy": True}
    except Exception as e:
        return {"healthy": False, "error": str(e)}
