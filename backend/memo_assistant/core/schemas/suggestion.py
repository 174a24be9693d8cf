from __future__ import annotations

from pydantic import ConfigDict, Field, field_validator

from memo_assistant.core.models.base import AppBaseModel


class Suggestion(AppBaseModel):
    """Short insight card about the user's memo corpus."""

    model_config = ConfigDict(extra="ignore")

    title: str = ""
    body: str = ""

    @field_validator("title", "body", mode="before")
    @classmethod
    def coerce_null_text(cls, v: str | None) -> str:
        return "" if v is None else v

    def is_blank(self) -> bool:
        return not (self.title.strip() and self.body.strip())


class SuggestionBatch(AppBaseModel):
    """Shape the model is asked to return with `response_format=json_object`."""

    model_config = ConfigDict(extra="ignore")

    suggestions: list[Suggestion] = Field(default_factory=list)

    @field_validator("suggestions")
    @classmethod
    def drop_blank_cards(cls, v: list[Suggestion]) -> list[Suggestion]:
        # One empty card should not cost the rest of the reply
        return [s for s in v if not s.is_blank()]
