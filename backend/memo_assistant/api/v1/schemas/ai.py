from __future__ import annotations

from pydantic import Field, field_validator

from memo_assistant.core.models.base import AppBaseModel
from memo_assistant.core.schemas.suggestion import Suggestion  # noqa: TCH001


class ContentRequest(AppBaseModel):
    """Memo text to generate tags or a title for."""

    content: str = Field(..., description="Memo content")

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Content is required")
        return v


class TagsResponse(AppBaseModel):
    tags: list[str]


class TitleResponse(AppBaseModel):
    title: str


class SuggestionsResponse(AppBaseModel):
    suggestions: list[Suggestion]
