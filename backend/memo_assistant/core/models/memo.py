from __future__ import annotations

from uuid import UUID, uuid4

from pydantic import Field, field_validator

from .base import TimestampedModel


class Memo(TimestampedModel):
    """Memo domain model.

    Tags are stored as given: duplicates are allowed and the three-tag limit
    is applied at the API boundary, not here.
    """

    id: UUID = Field(default_factory=uuid4, description="Unique memo identifier")

    user_email: str = Field(..., description="Email of the memo owner")

    title: str = Field(default="", description="Memo title")
    content: str = Field(default="", description="Memo body")

    tags: list[str] = Field(default_factory=list, description="Free-form labels")

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_null_tags(cls, v: list[str] | None) -> list[str]:
        return [] if v is None else v

    @field_validator("title", "content", mode="before")
    @classmethod
    def coerce_null_text(cls, v: str | None) -> str:
        return "" if v is None else v

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": str(uuid4()),
                    "user_email": "someone@example.com",
                    "title": "Dentist appointment",
                    "content": "Dentist on Monday at 10:00. Bring the insurance card.",
                    "tags": ["health", "appointment"],
                }
            ]
        }
    }
