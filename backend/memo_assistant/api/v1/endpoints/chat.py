from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from memo_assistant.api.v1.schemas.chat import ChatRequest  # noqa: TCH001
from memo_assistant.config import settings
from memo_assistant.dependencies import get_chat_service, get_current_user, get_memo_service
from memo_assistant.utils.logging import get_logger

if TYPE_CHECKING:
    from memo_assistant.core.schemas.auth import AuthUser
    from memo_assistant.core.services.chat_service import ChatService
    from memo_assistant.core.services.memo_service import MemoService

logger = get_logger(__name__)

router = APIRouter()


@router.post("/stream")
async def chat_with_assistant_stream(
    payload: ChatRequest,
    current_user: AuthUser = Depends(get_current_user),
    memo_service: MemoService = Depends(get_memo_service),
    chat: ChatService = Depends(get_chat_service),
):
    """Stream the assistant reply as plain-text chunks, in the order they are produced."""
    try:
        memos = await memo_service.list_memos(current_user.email, limit=settings.context_memo_limit)
        deltas = await chat.open_stream(
            message=payload.message,
            memos=memos,
            chat_history=payload.chat_history,
        )
    except Exception as err:
        logger.error("Chat request failed", extra={"user_email": current_user.email, "error": str(err)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process chat request",
        ) from err

    return StreamingResponse(
        deltas,
        media_type="text/plain; charset=utf-8",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
        },
    )
