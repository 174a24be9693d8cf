from __future__ import annotations

import re
from typing import TYPE_CHECKING

from memo_assistant.config import settings
from memo_assistant.utils.logging import get_logger
from memo_assistant.utils.openai_client import first_message_text

if TYPE_CHECKING:
    from openai import AsyncOpenAI  # type: ignore[import-not-found]


logger = get_logger(__name__)

MIN_CONTENT_LENGTH = 10
SHORT_TITLE_LENGTH = 30
MAX_SENTENCE_LENGTH = 50
MAX_GENERATED_LENGTH = 50
ELLIPSIS = "..."

_SENTENCE_END_RE = re.compile(r"[.\n!?]")

SYSTEM_PROMPT = (
    "You write short, clear titles for personal memos. "
    "Keep the title within 30 characters and capture the memo's main point. "
    "Use a plain noun phrase or bare verb phrase, not a full polite sentence."
)


def generate_fallback_title(content: str) -> str:
    """Derive a title without the model.

    Short content is its own title; otherwise the first sentence is used when
    it fits, and anything longer is cut to 30 characters with an ellipsis.
    """
    cleaned = content.strip()
    if len(cleaned) <= SHORT_TITLE_LENGTH:
        return cleaned

    first_sentence = _SENTENCE_END_RE.split(cleaned, maxsplit=1)[0].strip()
    if 0 < len(first_sentence) <= MAX_SENTENCE_LENGTH:
        return first_sentence
    if len(first_sentence) > MAX_SENTENCE_LENGTH:
        return first_sentence[:SHORT_TITLE_LENGTH] + ELLIPSIS
    return cleaned[:SHORT_TITLE_LENGTH] + ELLIPSIS


def clamp_generated_title(title: str) -> str:
    if len(title) > MAX_GENERATED_LENGTH:
        return title[: MAX_GENERATED_LENGTH - len(ELLIPSIS)] + ELLIPSIS
    return title


class TitleService:
    """Suggests a concise title for memo content."""

    def __init__(self, openai_client: AsyncOpenAI) -> None:
        self._client = openai_client

    async def generate_title(self, content: str) -> str:
        cleaned = content.strip()
        if len(cleaned) < MIN_CONTENT_LENGTH:
            return generate_fallback_title(content)

        try:
            response = await self._client.chat.completions.create(
                model=settings.completion_model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": f"Write a title for this memo:\n\n{cleaned}"},
                ],
                temperature=settings.title_temperature,
                max_tokens=settings.title_max_tokens,
                timeout=settings.title_request_timeout,
            )
        except Exception as err:
            logger.error("Title generation failed, using fallback: %s", err, extra={
                "error_type": type(err).__name__,
                "content_length": len(cleaned),
            })
            return generate_fallback_title(content)

        generated = first_message_text(response)
        if not generated:
            logger.warning("Model returned an empty title, using fallback")
            return generate_fallback_title(content)

        return clamp_generated_title(generated)
