from __future__ import annotations

from typing import TYPE_CHECKING, Any

from memo_assistant.config import settings
from memo_assistant.core.services.memo_context import format_memo_context, select_recent_memos
from memo_assistant.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Sequence

    from openai import AsyncOpenAI  # type: ignore[import-not-found]

    from memo_assistant.core.models.memo import Memo
    from memo_assistant.core.schemas.chat import ChatTurn


logger = get_logger(__name__)


def build_system_prompt(memos: Sequence[Memo]) -> str:
    context = format_memo_context(memos, include_time=True)
    return (
        "You are an assistant that holds helpful conversations grounded in the user's memos.\n\n"
        f"The user's {len(memos)} most recent memos are provided below. "
        "Use their titles, tags, content and timestamps when answering.\n\n"
        "When you reply:\n"
        "- Give specific, practical answers based on what the memos say\n"
        "- Use tags to connect related memos\n"
        "- Take timestamps into account to notice recent trends or changes\n"
        "- Keep it short and friendly\n"
        "- Quote the relevant part of a memo when it helps\n\n"
        f"Memos:\n{context}"
    )


class ChatService:
    """Memo-grounded chat that streams the assistant reply as text deltas.

    Conversations are not stored; callers resend prior turns with every message.
    """

    def __init__(self, openai_client: AsyncOpenAI) -> None:
        self._client = openai_client

    def build_messages(
        self,
        *,
        message: str,
        memos: Sequence[Memo],
        chat_history: Sequence[ChatTurn] = (),
    ) -> list[dict[str, Any]]:
        recent = select_recent_memos(memos)
        messages: list[dict[str, Any]] = [{"role": "system", "content": build_system_prompt(recent)}]
        messages.extend(turn.as_openai_message() for turn in chat_history)
        messages.append({"role": "user", "content": message})
        return messages

    async def open_stream(
        self,
        *,
        message: str,
        memos: Sequence[Memo],
        chat_history: Sequence[ChatTurn] = (),
    ) -> AsyncIterator[str]:
        """Start the completion stream and return an iterator over its text deltas.

        The request is issued before returning so that provider errors surface
        to the caller instead of inside a response that has already started.
        """
        messages = self.build_messages(message=message, memos=memos, chat_history=chat_history)
        logger.info("Starting chat stream", extra={
            "message_length": len(message),
            "history_turns": len(chat_history),
            "memo_count": min(len(memos), settings.context_memo_limit),
        })

        stream = await self._client.chat.completions.create(
            model=settings.completion_model,
            messages=messages,
            temperature=settings.chat_temperature,
            max_tokens=settings.chat_max_tokens,
            stream=True,
        )
        return self._iter_deltas(stream)

    @staticmethod
    async def _iter_deltas(stream: Any) -> AsyncIterator[str]:
        chunks = 0
        try:
            async for chunk in stream:
                choices = getattr(chunk, "choices", None) or []
                if not choices:
                    continue
                delta = getattr(choices[0], "delta", None)
                content = getattr(delta, "content", None)
                if content:
                    chunks += 1
                    yield content
        except Exception as err:
            logger.error("Chat stream interrupted after %d chunks: %s", chunks, err)
            return
        logger.debug("Chat stream finished after %d chunks", chunks)
