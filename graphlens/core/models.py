from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Optional, Set


class NodeRole(str, Enum):
    """Structural role inferred once from link direction."""

    ROOT = "root"  # never a link target
    ISOLATED_ROOT = "isolated_root"  # root with no neighbors
    MEMBER = "member"


@dataclass
class Node:
    """A vertex as seen by the layout and interest engines.

    ``x``/``y`` are owned by the layout engine. ``pinned_x``/``pinned_y``
    override the simulated axis while set. ``doi`` is assigned by the caller
    from the interest engine.
    """

    id: str
    name: str = ""
    group: int = 0
    x: Optional[float] = None
    y: Optional[float] = None
    pinned_x: Optional[float] = None
    pinned_y: Optional[float] = None
    degree: int = 0
    doi: float = 0.0
    begin: Optional[int] = None  # epoch ms
    end: Optional[int] = None  # epoch ms

    @property
    def is_pinned(self) -> bool:
        return self.pinned_x is not None or self.pinned_y is not None

    @property
    def is_positioned(self) -> bool:
        return self.x is not None and self.y is not None


@dataclass
class Link:
    """An edge referencing its endpoints by id."""

    source_id: str
    target_id: str
    weight: float = 1.0
    label: Optional[str] = None

    def key(self) -> str:
        """Unique key for deduplication."""
        return f"{self.source_id}->{self.target_id}"


NeighborMap = Dict[str, Set[str]]


@dataclass(frozen=True)
class DateRange:
    min_ms: int
    max_ms: int

    def contains(self, begin: int, end: int) -> bool:
        return begin >= self.min_ms and end <= self.max_ms


# 1910-01-01 .. 2024-01-01, the default slider span
DEFAULT_DATE_RANGE = DateRange(min_ms=-1893456000000, max_ms=1704067200000)


@dataclass(frozen=True)
class FilterState:
    """Filter and focus state supplied by the UI on every recomputation."""

    search_query: str = ""
    selected_archetypes: FrozenSet[int] = field(default_factory=frozenset)
    date_range: DateRange = DEFAULT_DATE_RANGE
    focus_node_id: Optional[str] = None

    @classmethod
    def create(
        cls,
        search_query: str = "",
        selected_archetypes: Iterable[int] = (),
        date_range: Optional[DateRange] = None,
        focus_node_id: Optional[str] = None,
    ) -> "FilterState":
        return cls(
            search_query=search_query or "",
            selected_archetypes=frozenset(int(a) for a in selected_archetypes),
            date_range=date_range or DEFAULT_DATE_RANGE,
            focus_node_id=focus_node_id,
        )

    def filter_key(self) -> tuple:
        """The tuple the user-interest cache is keyed on (focus excluded)."""
        return (
            self.search_query,
            self.selected_archetypes,
            self.date_range.min_ms,
            self.date_range.max_ms,
        )

    def with_focus(self, focus_node_id: Optional[str]) -> "FilterState":
        return FilterState(
            search_query=self.search_query,
            selected_archetypes=self.selected_archetypes,
            date_range=self.date_range,
            focus_node_id=focus_node_id,
        )


@dataclass
class Vertex:
    """A raw dataset vertex."""

    id: str
    title: str
    archetype: int = 0
    attributes: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Edge:
    """A raw dataset edge."""

    from_id: str
    to_id: str
    attributes: Dict[str, Any] = field(default_factory=dict)
