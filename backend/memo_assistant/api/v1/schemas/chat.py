from __future__ import annotations

from pydantic import Field, field_validator

from memo_assistant.core.models.base import AppBaseModel
from memo_assistant.core.schemas.chat import ChatTurn  # noqa: TCH001


class ChatRequest(AppBaseModel):
    """User message for the memo assistant."""

    message: str = Field(..., min_length=1, description="User's message to the assistant")
    chat_history: list[ChatTurn] = Field(
        default_factory=list,
        description=(
            "Earlier turns of this conversation, oldest first. Conversations are not stored "
            "server-side; send an empty list to start fresh (e.g., after page reload)."
        ),
    )

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Message is required")
        return v
