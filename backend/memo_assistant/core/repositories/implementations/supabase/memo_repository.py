from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from memo_assistant.config import settings
from memo_assistant.core.models.base import utcnow
from memo_assistant.core.models.memo import Memo
from memo_assistant.core.repositories.memo_repository import MemoRepository
from memo_assistant.utils.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from uuid import UUID

    from supabase import Client


class SupabaseMemoRepository(MemoRepository):
    """Supabase implementation of the MemoRepository.

    Uses Supabase's PostgREST client for CRUD against a `memos` table whose
    columns match the `Memo` model. Full-text search is served by the
    `search_memos(search_query, user_email_param)` database function.
    """

    SEARCH_RPC = "search_memos"
    WRITABLE_FIELDS = frozenset({"title", "content", "tags"})

    def __init__(self, client: Client, table_name: str | None = None) -> None:
        self._client: Client = client
        self._table = table_name or settings.memos_table

    async def create(self, memo: Memo) -> Memo:
        row = self._memo_to_row(memo)
        resp = await self._run(
            lambda: self._client.table(self._table)
            .insert(row)
            .execute()
        )
        data = self._first(resp.data)
        if not data:
            raise RuntimeError("Insert returned no row")
        return self._row_to_memo(data)

    async def get(self, memo_id: UUID) -> Memo | None:
        resp = await self._run(
            lambda: self._client.table(self._table)
            .select("*")
            .eq("id", str(memo_id))
            .limit(1)
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_memo(items[0])

    async def list(self, *, user_email: str, limit: int | None = None) -> Sequence[Memo]:
        def _query():
            q = (
                self._client.table(self._table)
                .select("*")
                .eq("user_email", user_email)
                .order("created_at", desc=True)
            )
            if limit is not None:
                q = q.limit(limit)
            return q.execute()

        resp = await self._run(_query)
        items = resp.data or []
        return [self._row_to_memo(i) for i in items]

    async def update_fields(self, memo_id: UUID, changes: dict) -> Memo | None:
        # Ownership and timestamps are never client-writable
        sanitized: dict[str, Any] = {k: v for k, v in (changes or {}).items() if k in self.WRITABLE_FIELDS}
        if not sanitized:
            return await self.get(memo_id)

        sanitized["updated_at"] = utcnow().isoformat()
        resp = await self._run(
            lambda: self._client.table(self._table)
            .update(sanitized)
            .eq("id", str(memo_id))
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_memo(items[0])

    async def delete(self, memo_id: UUID) -> bool:
        resp = await self._run(
            lambda: self._client.table(self._table)
            .delete()
            .eq("id", str(memo_id))
            .execute()
        )
        items = resp.data or []
        return len(items) > 0

    async def full_text_search(self, *, user_email: str, query: str) -> Sequence[Memo]:
        def _rpc():
            params: dict[str, Any] = {
                "search_query": query,
                "user_email_param": user_email,
            }
            return self._client.rpc(self.SEARCH_RPC, params).execute()

        resp = await self._run(_rpc)
        rows: list[dict[str, Any]] = resp.data or []
        return [self._row_to_memo(r) for r in rows]

    @staticmethod
    async def _run(func: Callable[[], Any]) -> Any:
        return await asyncio.to_thread(func)

    @staticmethod
    def _first(data: Any) -> dict[str, Any]:
        if isinstance(data, list) and data:
            return data[0]
        if isinstance(data, dict):
            return data
        return {}

    @staticmethod
    def _row_to_memo(row: dict[str, Any]) -> Memo:
        normalized = dict(row)

        # Drop columns the search function adds (rank, tsvector) that the model does not know
        for field in set(normalized) - set(Memo.model_fields):
            normalized.pop(field, None)

        if normalized.get("tags") is None:
            normalized["tags"] = []
        return Memo.model_validate(normalized)

    @staticmethod
    def _memo_to_row(memo: Memo) -> dict[str, Any]:
        data = memo.model_dump()
        # PostgREST needs JSON-serializable values
        data["id"] = str(memo.id)
        data["created_at"] = memo.created_at.isoformat()
        data["updated_at"] = memo.updated_at.isoformat()
        data["tags"] = list(memo.tags)
        return data
