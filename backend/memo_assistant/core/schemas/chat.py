from __future__ import annotations

from pydantic import Field

from memo_assistant.core.models.base import AppBaseModel


class ChatTurn(AppBaseModel):
    """One prior exchange in the current page session.

    Any role other than "user" is treated as an assistant turn.
    """

    role: str = Field(..., description='"user" for the person; anything else is the assistant')
    message: str = Field(..., description="Text of the turn")

    def as_openai_message(self) -> dict[str, str]:
        return {
            "role": "user" if self.role == "user" else "assistant",
            "content": self.message,
        }
