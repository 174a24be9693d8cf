from __future__ import annotations

import re
from typing import TYPE_CHECKING

from memo_assistant.config import settings
from memo_assistant.utils.logging import get_logger
from memo_assistant.utils.openai_client import first_message_text, race_deadline

if TYPE_CHECKING:
    from openai import AsyncOpenAI  # type: ignore[import-not-found]


logger = get_logger(__name__)

MAX_TAGS = 3
MIN_CONTENT_LENGTH = 5

_NON_WORD_RE = re.compile(r"[^가-힣a-zA-Z0-9\s]")
_WHITESPACE_RE = re.compile(r"\s+")
_TAG_SPLIT_RE = re.compile(r"[,\s]+")

STOPWORDS = frozenset({
    # Korean particles and fillers
    "그", "이", "저", "것", "수", "등", "들", "및", "좀", "더", "잘", "안", "또",
    "한", "와", "과", "의", "가", "을", "를", "에", "에서", "로", "으로", "는",
    "은", "께서", "도", "만", "있", "없", "하", "되",
    # English
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "is", "are", "was", "were",
})

SYSTEM_PROMPT = (
    "You read a personal memo and label it with tags. "
    "Produce 1-3 tags naming the memo's key topics or keywords. "
    "Each tag is a single concise word; separate tags with commas. "
    "Example: work, idea, meeting"
)


def preprocess_text(text: str) -> str:
    """Replace everything but Hangul, ASCII letters, digits and whitespace, then squeeze spaces."""
    cleaned = _NON_WORD_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def extract_keywords_fallback(
    text: str,
    max_keywords: int = MAX_TAGS,
    placeholder: str | None = None,
) -> list[str]:
    """Pick tags locally by position-weighted word frequency.

    Words earlier in the text weigh more: the word at index i of n kept words
    scores 1 + (n - i) / n, and repeats accumulate. Ties keep first-seen order.
    """
    words = preprocess_text(text).split()
    filtered = [w for w in words if len(w) >= 2 and w.lower() not in STOPWORDS]

    scores: dict[str, float] = {}
    total = len(filtered)
    for index, word in enumerate(filtered):
        scores[word] = scores.get(word, 0.0) + 1 + (total - index) / total

    ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
    keywords = [word for word, _ in ranked[:max_keywords]]
    if keywords:
        return keywords
    return [placeholder or settings.placeholder_tag]


def parse_tag_reply(reply: str) -> list[str]:
    """Split a comma/whitespace separated model reply into at most three tags."""
    parts = (p.strip() for p in _TAG_SPLIT_RE.split(reply))
    return [p for p in parts if p][:MAX_TAGS]


class TagService:
    """Suggests 1-3 tags for memo content, falling back to local keyword extraction."""

    def __init__(self, openai_client: AsyncOpenAI) -> None:
        self._client = openai_client

    async def generate_tags(self, content: str) -> list[str]:
        cleaned = content.strip()
        if len(cleaned) < MIN_CONTENT_LENGTH:
            return extract_keywords_fallback(content)

        try:
            response = await race_deadline(
                self._client.chat.completions.create(
                    model=settings.completion_model,
                    messages=[
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {
                            "role": "user",
                            "content": (
                                "Suggest 1-3 tags for the following memo. "
                                f"Answer with comma-separated tags only:\n\n{cleaned}"
                            ),
                        },
                    ],
                    temperature=settings.tag_temperature,
                    max_tokens=settings.tag_max_tokens,
                    timeout=settings.tag_request_timeout,
                ),
                settings.tag_deadline,
            )
        except Exception as err:
            logger.error("Tag generation failed, using fallback: %s", err, extra={
                "error_type": type(err).__name__,
                "content_length": len(cleaned),
            })
            return extract_keywords_fallback(content)

        reply = first_message_text(response)
        if not reply:
            logger.warning("Model returned an empty tag reply, using fallback")
            return extract_keywords_fallback(content)

        tags = parse_tag_reply(reply)
        if not tags:
            logger.warning("Could not parse tags from reply, using fallback", extra={"reply": reply[:100]})
            return extract_keywords_fallback(content)

        logger.debug("Generated tags: %s", tags)
        return tags
