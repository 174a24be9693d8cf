from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from memo_assistant.core.models.base import AppBaseModel


class TagCount(AppBaseModel):
    """Number of memos carrying a tag."""

    tag: str
    count: int = Field(..., ge=0)


class MemoStats(AppBaseModel):
    total_memos: int
    tag_frequency: list[TagCount] = Field(default_factory=list)


class MemoPreview(AppBaseModel):
    """Compact memo summary shown next to a chart slice."""

    id: str
    title: str
    preview: str


class ChartSlice(AppBaseModel):
    label: str
    count: int
    percentage: float
    recent_memos: list[MemoPreview] = Field(default_factory=list)


class ChartData(AppBaseModel):
    """Tag share of memos written inside the chart window."""

    window_days: int
    total_memos: int
    slices: list[ChartSlice] = Field(default_factory=list)


class Position(AppBaseModel):
    x: float
    y: float


class GraphNode(AppBaseModel):
    id: str
    type: Literal["tag", "memo"]
    position: Position
    data: dict[str, Any] = Field(default_factory=dict)


class GraphEdge(AppBaseModel):
    id: str
    source: str
    target: str


class RelationshipGraph(AppBaseModel):
    """Bipartite memo/tag graph with precomputed node positions."""

    selected_tag: str | None = None
    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)
