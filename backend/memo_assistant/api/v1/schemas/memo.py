from __future__ import annotations

from datetime import datetime  # noqa: TCH003
from uuid import UUID  # noqa: TCH003

from pydantic import Field, field_validator

from memo_assistant.core.models.base import AppBaseModel

MAX_TAGS_PER_MEMO = 3


def _clean_tags(tags: list[str]) -> list[str]:
    cleaned = [t.strip() for t in tags if t and t.strip()]
    if len(cleaned) > MAX_TAGS_PER_MEMO:
        raise ValueError(f"A memo can have at most {MAX_TAGS_PER_MEMO} tags")
    return cleaned


class MemoCreate(AppBaseModel):
    title: str | None = Field(default=None, description="Memo title; generated when omitted")
    content: str = Field(..., description="Memo body")
    tags: list[str] = Field(default_factory=list, description="Up to three tags; one is generated when omitted")

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Memo content is required")
        return v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        return _clean_tags(v)


class MemoUpdate(AppBaseModel):
    title: str | None = None
    content: str | None = None
    tags: list[str] | None = None

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Memo content cannot be empty")
        return v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return v
        return _clean_tags(v)


class MemoRead(AppBaseModel):
    id: UUID
    user_email: str
    title: str
    content: str
    tags: list[str]
    created_at: datetime
    updated_at: datetime


class MemoSearchRequest(AppBaseModel):
    query: str = Field(..., description="Text to look for in titles, content and tags")

    @field_validator("query")
    @classmethod
    def validate_query(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Search query is required")
        return stripped
