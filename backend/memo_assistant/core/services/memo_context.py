from __future__ import annotations

from typing import TYPE_CHECKING

from memo_assistant.config import settings

if TYPE_CHECKING:
    from collections.abc import Iterable

    from memo_assistant.core.models.memo import Memo


def select_recent_memos(memos: Iterable[Memo], limit: int | None = None) -> list[Memo]:
    """Return at most `limit` of the most recently created memos, oldest first."""
    cap = settings.context_memo_limit if limit is None else limit
    if cap <= 0:
        return []
    newest_first = sorted(memos, key=lambda m: m.created_at, reverse=True)
    return list(reversed(newest_first[:cap]))


def format_memo(memo: Memo, *, include_time: bool) -> str:
    stamp_format = "%Y-%m-%d %H:%M" if include_time else "%Y-%m-%d"
    stamp = memo.created_at.strftime(stamp_format)
    return (
        f"[{stamp}] {memo.title}\n"
        f"Tags: {', '.join(memo.tags)}\n"
        f"Content: {memo.content}"
    )


def format_memo_context(memos: Iterable[Memo], *, include_time: bool = False) -> str:
    """Render memos as prompt context, one blank-line separated block per memo."""
    return "\n\n".join(format_memo(m, include_time=include_time) for m in memos)
