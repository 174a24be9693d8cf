from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from memo_assistant.core.models.memo import Memo


class MemoRepository(ABC):
    """Abstract repository interface for memos.

    Contract used by services and dependency injection. Implementations should
    perform I/O (database, network) and therefore expose async methods.
    """

    @abstractmethod
    async def create(self, memo: Memo) -> Memo:  # pragma: no cover - interface only
        """Persist a new memo and return the stored entity."""

    @abstractmethod
    async def get(self, memo_id: UUID) -> Memo | None:  # pragma: no cover
        """Fetch a memo by id or return None if not found."""

    @abstractmethod
    async def list(self, *, user_email: str, limit: int | None = None) -> Sequence[Memo]:  # pragma: no cover
        """Return a user's memos ordered by creation time, newest first.

        Args:
            user_email: Owner to filter by
            limit: Optional maximum number of memos to return
        """

    @abstractmethod
    async def update_fields(self, memo_id: UUID, changes: dict) -> Memo | None:  # pragma: no cover
        """Partially update fields on a memo and return the updated entity, or None if missing."""

    @abstractmethod
    async def delete(self, memo_id: UUID) -> bool:  # pragma: no cover
        """Delete a memo by id. Return True if a row was removed, False otherwise."""

    @abstractmethod
    async def full_text_search(self, *, user_email: str, query: str) -> Sequence[Memo]:  # pragma: no cover
        """Run the database-side full-text search. May raise if the search function is unavailable."""
