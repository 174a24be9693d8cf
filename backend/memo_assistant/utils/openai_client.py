from __future__ import annotations

import asyncio
from functools import lru_cache
from typing import TYPE_CHECKING, TypeVar

from openai import AsyncOpenAI

from memo_assistant.config import settings
from memo_assistant.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Awaitable

T = TypeVar("T")


@lru_cache(maxsize=1)
def get_openai_client() -> AsyncOpenAI:
    """Return a singleton OpenAI client.

    Uses the environment's OPENAI_API_KEY by default. If `APP_OPENAI_API_KEY` is
    provided in the application's settings, it will be used explicitly.
    """
    logger = get_logger(__name__)
    if settings.openai_api_key:
        logger.debug("Initializing OpenAI client with APP_OPENAI_API_KEY")
        return AsyncOpenAI(api_key=settings.openai_api_key)
    logger.debug("Initializing OpenAI client with default OPENAI_API_KEY from environment")
    return AsyncOpenAI()


async def race_deadline(call: Awaitable[T], seconds: float) -> T:
    """Await `call` unless `seconds` elapse first.

    Raises `TimeoutError` when the deadline wins; the pending call is cancelled.
    """
    try:
        return await asyncio.wait_for(call, timeout=seconds)
    except asyncio.TimeoutError as err:
        raise TimeoutError(f"Request timeout after {seconds:g}s") from err


def first_message_text(response) -> str | None:
    """Extract the stripped text of the first choice of a chat completion."""
    choices = getattr(response, "choices", None) or []
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if not isinstance(content, str):
        return None
    return content.strip()
