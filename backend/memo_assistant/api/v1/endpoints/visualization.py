from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends

from memo_assistant.core.schemas.visualization import ChartData, RelationshipGraph
from memo_assistant.core.services.visualization_service import (
    build_chart_data,
    build_relationship_graph,
)
from memo_assistant.dependencies import get_current_user, get_memo_service

if TYPE_CHECKING:
    from memo_assistant.core.schemas.auth import AuthUser
    from memo_assistant.core.services.memo_service import MemoService

router = APIRouter()


@router.get("/chart", response_model=ChartData)
async def get_tag_chart(
    current_user: AuthUser = Depends(get_current_user),
    service: MemoService = Depends(get_memo_service),
) -> ChartData:
    """Tag share of recent memos, top tags plus an "other" bucket."""
    memos = await service.list_memos(current_user.email)
    return build_chart_data(memos, now=datetime.now(UTC))


@router.get("/graph", response_model=RelationshipGraph)
async def get_relationship_graph(
    selected_tag: str | None = None,
    current_user: AuthUser = Depends(get_current_user),
    service: MemoService = Depends(get_memo_service),
) -> RelationshipGraph:
    """Memo/tag graph with node positions.

    Pass `selected_tag` to show only that tag's memos, ringed around it.
    """
    memos = await service.list_memos(current_user.email)
    return build_relationship_graph(memos, selected_tag=selected_tag)
