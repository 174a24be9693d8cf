from __future__ import annotations

from uuid import UUID  # noqa: TCH003

from memo_assistant.core.models.base import AppBaseModel


class AuthUser(AppBaseModel):
    """Authenticated user extracted from the Supabase JWT.

    Memos are owned by `email`; `id` is kept for logging.
    """

    id: UUID
    email: str
    role: str | None = None
