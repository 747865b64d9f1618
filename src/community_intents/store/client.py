"""Supabase PostgREST HTTP client singleton.

Creates a cached httpx.AsyncClient pointed at ``<supabase_url>/rest/v1``
and authenticated with the service key from application settings.
"""

import httpx

from community_intents.config import get_settings

_client: httpx.AsyncClient | None = None


def get_supabase_client() -> httpx.AsyncClient:
    """Return a cached async PostgREST client.

    Creates the client on first call using supabase_url and
    supabase_service_key from settings.
    """
    global _client
    if _client is None:
        settings = get_settings()
        _client = httpx.AsyncClient(
            base_url=f"{settings.supabase_url.rstrip('/')}/rest/v1",
            headers={
                "apikey": settings.supabase_service_key,
                "Authorization": f"Bearer {settings.supabase_service_key}",
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(10.0),
        )
    return _client


async def close_client() -> None:
    """Close and drop the cached client. Called on app shutdown."""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


def reset_client() -> None:
    """Reset the cached client instance. Used for testing."""
    global _client
    _client = None
