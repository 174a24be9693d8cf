from __future__ import annotations

from typing import TYPE_CHECKING

from memo_assistant.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from memo_assistant.core.models.memo import Memo
    from memo_assistant.core.repositories.memo_repository import MemoRepository


logger = get_logger(__name__)


def filter_memos(memos: Iterable[Memo], query: str) -> list[Memo]:
    """Case-insensitive substring match over title, content and tags."""
    needle = query.lower()
    return [
        m for m in memos
        if needle in m.title.lower()
        or needle in m.content.lower()
        or any(needle in tag.lower() for tag in m.tags)
    ]


class SearchService:
    """Service for searching memos.

    Prefers the database full-text search and degrades to an in-process
    substring filter when that search is unavailable.
    """

    def __init__(self, repo: MemoRepository) -> None:
        self._repo = repo

    async def search_memos(self, *, user_email: str, query: str) -> Sequence[Memo]:
        try:
            return await self._repo.full_text_search(user_email=user_email, query=query)
        except Exception as err:
            logger.warning("Full-text search failed, filtering memos in process: %s", err, extra={
                "user_email": user_email,
                "error_type": type(err).__name__,
            })

        memos = await self._repo.list(user_email=user_email)
        return filter_memos(memos, query)
