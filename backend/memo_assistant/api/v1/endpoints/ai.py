from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends

from memo_assistant.api.v1.schemas.ai import (
    ContentRequest,
    SuggestionsResponse,
    TagsResponse,
    TitleResponse,
)
from memo_assistant.config import settings
from memo_assistant.dependencies import (
    get_current_user,
    get_memo_service,
    get_suggestion_service,
    get_tag_service,
    get_title_service,
)

if TYPE_CHECKING:
    from memo_assistant.core.schemas.auth import AuthUser
    from memo_assistant.core.services.memo_service import MemoService
    from memo_assistant.core.services.suggestion_service import SuggestionService
    from memo_assistant.core.services.tag_service import TagService
    from memo_assistant.core.services.title_service import TitleService

router = APIRouter()


@router.post("/tags", response_model=TagsResponse)
async def generate_tags(
    payload: ContentRequest,
    current_user: AuthUser = Depends(get_current_user),
    service: TagService = Depends(get_tag_service),
):
    """Suggest 1-3 tags. Falls back to local keyword extraction when the model fails."""
    return TagsResponse(tags=await service.generate_tags(payload.content))


@router.post("/title", response_model=TitleResponse)
async def generate_title(
    payload: ContentRequest,
    current_user: AuthUser = Depends(get_current_user),
    service: TitleService = Depends(get_title_service),
):
    """Suggest a title. Falls back to the first sentence when the model fails."""
    return TitleResponse(title=await service.generate_title(payload.content))


@router.post("/suggestions", response_model=SuggestionsResponse)
async def generate_suggestions(
    current_user: AuthUser = Depends(get_current_user),
    memo_service: MemoService = Depends(get_memo_service),
    service: SuggestionService = Depends(get_suggestion_service),
):
    """Insight cards drawn from the user's most recent memos."""
    memos = await memo_service.list_memos(current_user.email, limit=settings.context_memo_limit)
    return SuggestionsResponse(suggestions=await service.generate_suggestions(memos))
