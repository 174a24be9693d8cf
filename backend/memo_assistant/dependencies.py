from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from memo_assistant.core.repositories.implementations.supabase.memo_repository import (
    SupabaseMemoRepository,
)
from memo_assistant.core.schemas.auth import AuthUser
from memo_assistant.core.services.chat_service import ChatService
from memo_assistant.core.services.memo_service import MemoService
from memo_assistant.core.services.search_service import SearchService
from memo_assistant.core.services.suggestion_service import SuggestionService
from memo_assistant.core.services.tag_service import TagService
from memo_assistant.core.services.title_service import TitleService
from memo_assistant.db.base import create_request_supabase_client
from memo_assistant.utils.logging import get_logger
from memo_assistant.utils.openai_client import get_openai_client

logger = get_logger(__name__)

# Use auto_error=False to handle missing tokens gracefully
http_bearer = HTTPBearer(auto_error=False)

if TYPE_CHECKING:
    from openai import AsyncOpenAI  # type: ignore[import-not-found]
    from supabase import Client

    from memo_assistant.core.repositories.memo_repository import MemoRepository


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_request_supabase_client(request: Request) -> Client:
    """Create a request-scoped Supabase client and set PostgREST bearer.

    Extracts the Authorization: Bearer <jwt> header if present and configures
    PostgREST to enforce RLS for the user.
    """
    auth_header = request.headers.get("authorization")
    jwt: str | None = None
    if auth_header and auth_header.lower().startswith("bearer "):
        jwt = auth_header.split(" ", 1)[1].strip()
    return create_request_supabase_client(jwt)


def get_llm_client() -> AsyncOpenAI:
    """Shared OpenAI client; overridden in tests."""
    return get_openai_client()


def get_memo_repository(client: Client = Depends(get_request_supabase_client)) -> MemoRepository:
    """Get a request-scoped memo repository instance using request client."""
    return SupabaseMemoRepository(client)


def get_tag_service(openai_client: AsyncOpenAI = Depends(get_llm_client)) -> TagService:
    return TagService(openai_client)


def get_title_service(openai_client: AsyncOpenAI = Depends(get_llm_client)) -> TitleService:
    return TitleService(openai_client)


def get_suggestion_service(openai_client: AsyncOpenAI = Depends(get_llm_client)) -> SuggestionService:
    return SuggestionService(openai_client)


def get_chat_service(openai_client: AsyncOpenAI = Depends(get_llm_client)) -> ChatService:
    return ChatService(openai_client)


def get_memo_service(
    repo: MemoRepository = Depends(get_memo_repository),
    title_service: TitleService = Depends(get_title_service),
    tag_service: TagService = Depends(get_tag_service),
) -> MemoService:
    """Get a request-scoped memo service instance."""
    return MemoService(repo, title_service=title_service, tag_service=tag_service)


def get_search_service(repo: MemoRepository = Depends(get_memo_repository)) -> SearchService:
    """Get a request-scoped search service instance."""
    return SearchService(repo)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Security(http_bearer),
) -> AuthUser:
    """Validate the JWT via Supabase and return the authenticated user."""
    if not credentials:
        raise _unauthorized("Authentication required")
    jwt = credentials.credentials
    if not jwt or len(jwt.split(".")) != 3:
        raise _unauthorized("Invalid token format")

    supabase = create_request_supabase_client(jwt)
    try:
        resp = await asyncio.to_thread(lambda: supabase.auth.get_user(jwt))
    except Exception as err:
        error_msg = str(err).lower()
        logger.warning(
            "JWT validation failed",
            extra={
                "error_type": type(err).__name__,
                "error_summary": error_msg[:100] if error_msg else "Unknown error",
                "jwt_length": len(jwt),
            }
        )
        if "invalid" in error_msg or "expired" in error_msg:
            raise _unauthorized("Token is invalid or expired") from err
        raise _unauthorized("Authentication failed") from err

    user = getattr(resp, "user", None)
    user_id = getattr(user, "id", None)
    email = getattr(user, "email", None)
    if not user_id:
        raise _unauthorized("Invalid user data")
    # Memos are owned by email, so a user without one cannot own anything
    if not email:
        raise _unauthorized("Account has no email address")
    return AuthUser(
        id=user_id,
        email=email,
        role=getattr(user, "role", None),
    )
