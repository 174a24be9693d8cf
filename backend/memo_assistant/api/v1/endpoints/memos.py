from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TCH003

from fastapi import APIRouter, Depends, HTTPException, Query, status

from memo_assistant.api.v1.schemas.memo import MemoCreate, MemoRead, MemoSearchRequest, MemoUpdate
from memo_assistant.core.schemas.visualization import MemoStats
from memo_assistant.dependencies import (
    get_current_user,
    get_memo_service,
    get_search_service,
)
from memo_assistant.utils.logging import get_logger

if TYPE_CHECKING:
    from memo_assistant.core.schemas.auth import AuthUser
    from memo_assistant.core.services.memo_service import MemoService
    from memo_assistant.core.services.search_service import SearchService

logger = get_logger(__name__)

router = APIRouter()


@router.post("/", response_model=MemoRead, status_code=status.HTTP_201_CREATED)
async def create_memo(
    payload: MemoCreate,
    current_user: AuthUser = Depends(get_current_user),
    service: MemoService = Depends(get_memo_service),
):
    """Create a memo. A missing title or tag list is generated from the content."""
    try:
        memo = await service.create_memo(payload, user_email=current_user.email)
    except ValueError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err
    return MemoRead.model_validate(memo)


@router.get("/", response_model=list[MemoRead])
async def list_memos(
    limit: int | None = Query(default=None, ge=1, description="Return at most this many memos, newest first"),
    current_user: AuthUser = Depends(get_current_user),
    service: MemoService = Depends(get_memo_service),
):
    memos = await service.list_memos(user_email=current_user.email, limit=limit)
    return [MemoRead.model_validate(m) for m in memos]


@router.get("/stats", response_model=MemoStats)
async def get_memo_stats(
    current_user: AuthUser = Depends(get_current_user),
    service: MemoService = Depends(get_memo_service),
):
    """Total memo count and per-tag frequency, most used first."""
    return await service.get_memo_stats(current_user.email)


@router.post("/search", response_model=list[MemoRead])
async def search_memos(
    payload: MemoSearchRequest,
    current_user: AuthUser = Depends(get_current_user),
    service: SearchService = Depends(get_search_service),
):
    """Search the user's memos.

    Uses the database full-text search, or a substring filter when it is unavailable.
    """
    results = await service.search_memos(user_email=current_user.email, query=payload.query)
    return [MemoRead.model_validate(r) for r in results]


@router.get("/{memo_id}", response_model=MemoRead)
async def get_memo(
    memo_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: MemoService = Depends(get_memo_service),
):
    memo = await service.get_memo(memo_id, user_email=current_user.email)
    if not memo:
        raise HTTPException(status_code=404, detail="Memo not found")
    return MemoRead.model_validate(memo)


@router.patch("/{memo_id}", response_model=MemoRead)
async def update_memo(
    memo_id: UUID,
    payload: MemoUpdate,
    current_user: AuthUser = Depends(get_current_user),
    service: MemoService = Depends(get_memo_service),
):
    try:
        memo = await service.update_memo(memo_id, payload, user_email=current_user.email)
    except ValueError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err
    if not memo:
        raise HTTPException(status_code=404, detail="Memo not found")
    return MemoRead.model_validate(memo)


@router.delete("/{memo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_memo(
    memo_id: UUID,
    current_user: AuthUser = Depends(get_current_user),
    service: MemoService = Depends(get_memo_service),
):
    try:
        deleted = await service.delete_memo(memo_id, user_email=current_user.email)
    except Exception as err:
        logger.error("Failed to delete memo", extra={"memo_id": str(memo_id), "error": str(err)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete memo",
        ) from err
    if not deleted:
        raise HTTPException(status_code=404, detail="Memo not found")
    return None
