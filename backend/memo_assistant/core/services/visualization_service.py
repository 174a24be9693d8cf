from __future__ import annotations

import math
import random
from datetime import timedelta
from typing import TYPE_CHECKING

from memo_assistant.config import settings
from memo_assistant.core.schemas.visualization import (
    ChartData,
    ChartSlice,
    GraphEdge,
    GraphNode,
    MemoPreview,
    Position,
    RelationshipGraph,
    TagCount,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import datetime

    from memo_assistant.core.models.memo import Memo


OTHER_LABEL = "other"
TAG_RING_RADIUS = 220.0
MEMO_RING_RADIUS = 140.0
MEMO_JITTER = 30.0
PREVIEW_LENGTH = 40
PREVIEWS_PER_SLICE = 2


def _distinct_tags(memo: Memo) -> list[str]:
    return list(dict.fromkeys(memo.tags))


def _group_by_tag(memos: Iterable[Memo]) -> dict[str, list[Memo]]:
    groups: dict[str, list[Memo]] = {}
    for memo in memos:
        for tag in _distinct_tags(memo):
            groups.setdefault(tag, []).append(memo)
    return groups


def count_tags(memos: Iterable[Memo]) -> list[TagCount]:
    """Count memos per tag, in the order tags are first seen."""
    return [TagCount(tag=tag, count=len(group)) for tag, group in _group_by_tag(memos).items()]


def rank_tags(memos: Iterable[Memo]) -> list[TagCount]:
    """Tag counts sorted by count, most used first."""
    return sorted(count_tags(memos), key=lambda tc: tc.count, reverse=True)


def _preview(memo: Memo) -> MemoPreview:
    content = memo.content
    if len(content) > PREVIEW_LENGTH:
        content = content[:PREVIEW_LENGTH] + "..."
    return MemoPreview(id=str(memo.id), title=memo.title, preview=content)


def _recent_previews(memos: Iterable[Memo]) -> list[MemoPreview]:
    newest = sorted(memos, key=lambda m: m.created_at, reverse=True)
    return [_preview(m) for m in newest[:PREVIEWS_PER_SLICE]]


def build_chart_data(
    memos: Sequence[Memo],
    *,
    now: datetime,
    window_days: int | None = None,
    top_n: int | None = None,
) -> ChartData:
    """Aggregate tag shares over memos created within the last `window_days`.

    The `top_n` most used tags get their own slice; the rest are summed into a
    single "other" slice.
    """
    window = settings.chart_window_days if window_days is None else window_days
    limit = settings.chart_top_tags if top_n is None else top_n

    since = now - timedelta(days=window)
    recent = [m for m in memos if m.created_at >= since]

    groups = _group_by_tag(recent)
    ranked = sorted(groups.items(), key=lambda item: len(item[1]), reverse=True)
    kept, rest = ranked[:limit], ranked[limit:]

    rows: list[tuple[str, int, list[Memo]]] = [(tag, len(group), group) for tag, group in kept]
    other_count = sum(len(group) for _, group in rest)
    if other_count > 0:
        other_memos = [m for _, group in rest for m in group]
        rows.append((OTHER_LABEL, other_count, other_memos))

    total = sum(count for _, count, _ in rows)
    slices = [
        ChartSlice(
            label=label,
            count=count,
            percentage=round(count / total * 100, 1) if total else 0.0,
            recent_memos=_recent_previews(group),
        )
        for label, count, group in rows
    ]
    return ChartData(window_days=window, total_memos=len(recent), slices=slices)


def tag_node_id(tag: str) -> str:
    return f"tag-{tag}"


def memo_node_id(memo: Memo) -> str:
    return f"memo-{memo.id}"


def _memo_node(memo: Memo, x: float, y: float) -> GraphNode:
    return GraphNode(
        id=memo_node_id(memo),
        type="memo",
        position=Position(x=x, y=y),
        data={"title": memo.title, "content": memo.content, "tags": list(memo.tags)},
    )


def _ring_angle(index: int, count: int) -> float:
    return (index / max(count, 1)) * 2 * math.pi - math.pi / 2


def build_relationship_graph(
    memos: Sequence[Memo],
    *,
    selected_tag: str | None = None,
    rng: random.Random | None = None,
) -> RelationshipGraph:
    """Lay out the memo/tag graph.

    Tags sit evenly on a circle. With a selected tag, its memos form a ring
    around that tag's node and connect only to it. Without one, each memo is
    placed near the centroid of its tags (jittered so that memos sharing the
    same tags do not overlap) and connects to every tag it carries.
    """
    stats = count_tags(memos)
    if not stats:
        return RelationshipGraph()

    known = {tc.tag for tc in stats}
    if selected_tag not in known:
        selected_tag = None

    tag_positions: dict[str, Position] = {}
    nodes: list[GraphNode] = []
    for index, tc in enumerate(stats):
        angle = _ring_angle(index, len(stats))
        position = Position(x=math.cos(angle) * TAG_RING_RADIUS, y=math.sin(angle) * TAG_RING_RADIUS)
        tag_positions[tc.tag] = position
        nodes.append(
            GraphNode(
                id=tag_node_id(tc.tag),
                type="tag",
                position=position,
                data={"label": tc.tag, "memo_count": tc.count, "selected": tc.tag == selected_tag},
            )
        )

    edges: list[GraphEdge] = []
    if selected_tag is not None:
        center = tag_positions[selected_tag]
        related = [m for m in memos if m.has_tag(selected_tag)]
        for index, memo in enumerate(related):
            angle = _ring_angle(index, len(related))
            nodes.append(
                _memo_node(
                    memo,
                    center.x + math.cos(angle) * MEMO_RING_RADIUS,
                    center.y + math.sin(angle) * MEMO_RING_RADIUS,
                )
            )
            edges.append(
                GraphEdge(
                    id=f"edge-{selected_tag}-{memo.id}",
                    source=tag_node_id(selected_tag),
                    target=memo_node_id(memo),
                )
            )
        return RelationshipGraph(selected_tag=selected_tag, nodes=nodes, edges=edges)

    rng = rng or random.Random()
    for memo in memos:
        tags = _distinct_tags(memo)
        if not tags:
            continue
        cx = sum(tag_positions[t].x for t in tags) / len(tags)
        cy = sum(tag_positions[t].y for t in tags) / len(tags)
        nodes.append(
            _memo_node(
                memo,
                cx + rng.uniform(-MEMO_JITTER, MEMO_JITTER),
                cy + rng.uniform(-MEMO_JITTER, MEMO_JITTER),
            )
        )
        edges.extend(
            GraphEdge(id=f"edge-{tag}-{memo.id}", source=memo_node_id(memo), target=tag_node_id(tag))
            for tag in tags
        )
    return RelationshipGraph(nodes=nodes, edges=edges)
