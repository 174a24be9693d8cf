from __future__ import annotations

from functools import lru_cache

from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from memo_assistant.config import settings
from memo_assistant.utils.logging import get_logger

logger = get_logger(__name__)


def _create(key: str, purpose: str) -> Client:
    if not key:
        raise RuntimeError(f"A Supabase key is required for the {purpose} client")
    # Server-side clients never hold a browser session
    return create_client(
        settings.supabase_url,
        key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False),
    )


@lru_cache(maxsize=1)
def get_supabase_admin_client() -> Client:
    """Cached service-role client. Only the readiness probe uses it."""
    logger.debug("Initializing Supabase admin client")
    return _create(settings.supabase_service_role_key, "admin")


def create_request_supabase_client(bearer_token: str | None = None) -> Client:
    """Anon-key client for one request.

    With a JWT, PostgREST calls run as that user, so row level security
    limits every memo query and the search rpc to the caller's rows.
    """
    client = _create(settings.supabase_anon_key, "request")
    if bearer_token:
        client.postgrest.auth(bearer_token)
    return client
