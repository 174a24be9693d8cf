from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from memo_assistant.config import settings
from memo_assistant.core.models.memo import Memo
from memo_assistant.core.schemas.visualization import MemoStats
from memo_assistant.core.services.visualization_service import rank_tags
from memo_assistant.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from memo_assistant.core.repositories.memo_repository import MemoRepository
    from memo_assistant.core.services.tag_service import TagService
    from memo_assistant.core.services.title_service import TitleService


logger = get_logger(__name__)


def _parse_id(memo_id: str | UUID) -> UUID | None:
    try:
        return UUID(str(memo_id))
    except ValueError:
        return None


class MemoService:
    """Service for managing memos scoped to their owner's email."""

    def __init__(
        self,
        repo: MemoRepository,
        title_service: TitleService | None = None,
        tag_service: TagService | None = None,
    ) -> None:
        self._repo = repo
        self._title_service = title_service
        self._tag_service = tag_service

    async def create_memo(self, create_dto, user_email: str) -> Memo:
        """Create a memo, filling in a generated title and tag when none were given."""
        content = (create_dto.content or "").strip()
        if not content:
            raise ValueError("Memo content is required")

        title = (create_dto.title or "").strip()
        if not title and self._title_service is not None:
            title = await self._title_service.generate_title(content)

        tags = list(create_dto.tags or [])
        if not tags:
            generated = await self._tag_service.generate_tags(content) if self._tag_service else []
            tags = generated[:1] or [settings.placeholder_tag]

        memo = Memo(
            id=uuid4(),
            user_email=user_email,
            title=title,
            content=content,
            tags=tags,
        )
        created = await self._repo.create(memo)
        logger.info("Memo created", extra={"user_email": user_email, "memo_id": str(created.id), "tags": created.tags})
        return created

    async def get_memo(self, memo_id: str | UUID, user_email: str) -> Memo | None:
        """Return memo if it exists and belongs to the user; otherwise None."""
        memo_uuid = _parse_id(memo_id)
        if memo_uuid is None:
            return None
        memo = await self._repo.get(memo_uuid)
        if memo and memo.user_email == user_email:
            return memo
        return None

    async def list_memos(self, user_email: str, limit: int | None = None) -> Sequence[Memo]:
        """List memos for the given user, newest first."""
        return await self._repo.list(user_email=user_email, limit=limit)

    async def update_memo(self, memo_id: str | UUID, update_dto, user_email: str) -> Memo | None:
        """Apply the fields present in `update_dto` to a memo the user owns."""
        existing = await self.get_memo(memo_id, user_email)
        if not existing:
            return None

        changes: dict = {}
        for key, value in update_dto.model_dump(exclude_unset=True).items():
            if key not in {"title", "content", "tags"} or value is None:
                continue
            if isinstance(value, str):
                value = value.strip()
            changes[key] = value

        if "content" in changes and not changes["content"]:
            raise ValueError("Memo content cannot be empty")

        logger.info("Updating memo", extra={
            "user_email": user_email,
            "memo_id": str(existing.id),
            "fields_updated": sorted(changes),
        })
        return await self._repo.update_fields(existing.id, changes)

    async def delete_memo(self, memo_id: str | UUID, user_email: str) -> bool:
        """Delete a user's memo if it exists and belongs to them."""
        memo = await self.get_memo(memo_id, user_email)
        if not memo:
            return False
        deleted = await self._repo.delete(memo.id)
        if deleted:
            logger.info("Memo deleted", extra={"user_email": user_email, "memo_id": str(memo.id)})
        return deleted

    async def get_memo_stats(self, user_email: str) -> MemoStats:
        memos = await self.list_memos(user_email)
        return MemoStats(total_memos=len(memos), tag_frequency=rank_tags(memos))
