from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import ValidationError

from memo_assistant.config import settings
from memo_assistant.core.schemas.suggestion import Suggestion, SuggestionBatch
from memo_assistant.core.services.memo_context import format_memo_context, select_recent_memos
from memo_assistant.utils.logging import get_logger
from memo_assistant.utils.openai_client import first_message_text, race_deadline

if TYPE_CHECKING:
    from collections.abc import Sequence

    from openai import AsyncOpenAI  # type: ignore[import-not-found]

    from memo_assistant.core.models.memo import Memo


logger = get_logger(__name__)

GETTING_STARTED = Suggestion(
    title="Getting started",
    body="Write your first memo and patterns and ideas will show up here.",
)
KEEP_WRITING = Suggestion(
    title="Keep writing",
    body="A few more memos will make the pattern analysis more accurate.",
)

SYSTEM_PROMPT = """You analyse a person's memo habits and offer practical insights.

Study the recent memos and produce 1-3 suggestions of these kinds:
1. Pattern: recurring tags or topics
2. Next step: an action the memos point to
3. Gap: a topic that used to appear and has gone quiet
4. Summary: memos worth grouping or condensing together

Reply with JSON in exactly this shape:
{
  "suggestions": [
    {
      "title": "short title, a few words",
      "body": "one or two sentences of concrete detail"
    }
  ]
}

Suggestions must be concrete and something the person can act on right away."""


class SuggestionService:
    """Generates insight cards from the user's most recent memos."""

    def __init__(self, openai_client: AsyncOpenAI) -> None:
        self._client = openai_client

    async def generate_suggestions(self, memos: Sequence[Memo]) -> list[Suggestion]:
        if not memos:
            return [GETTING_STARTED]

        recent = select_recent_memos(memos)
        context = format_memo_context(recent)

        try:
            response = await race_deadline(
                self._client.chat.completions.create(
                    model=settings.completion_model,
                    messages=[
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {
                            "role": "user",
                            "content": f"Here are the person's {len(recent)} most recent memos:\n\n{context}",
                        },
                    ],
                    temperature=settings.suggestion_temperature,
                    max_tokens=settings.suggestion_max_tokens,
                    response_format={"type": "json_object"},
                    timeout=settings.suggestion_request_timeout,
                ),
                settings.suggestion_deadline,
            )
            content = first_message_text(response)
            if not content:
                raise ValueError("No content in completion response")
            batch = SuggestionBatch.model_validate_json(content)
        except (ValidationError, ValueError, TimeoutError) as err:
            logger.warning("Suggestion reply unusable, using fallback: %s", err, extra={
                "error_type": type(err).__name__,
                "memo_count": len(recent),
            })
            return [KEEP_WRITING]
        except Exception as err:
            logger.error("Suggestion generation failed, using fallback: %s", err, extra={
                "error_type": type(err).__name__,
                "memo_count": len(recent),
            })
            return [KEEP_WRITING]

        logger.info("Generated %d suggestions", len(batch.suggestions), extra={"memo_count": len(recent)})
        return batch.suggestions
