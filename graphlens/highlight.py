"""Adjacency highlighting for hover, focus and selection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional, Set

from .core.models import Link, NeighborMap

# Opacity applied to everything outside the active set.
LIGHT_OPACITY = 0.3


def active_set(focus_nodes: Iterable[str], neighbor_map: NeighborMap) -> Set[str]:
    """Focus nodes plus their direct neighbors."""
    active: Set[str] = set()
    for node_id in focus_nodes:
        active.add(node_id)
        active.update(neighbor_map.get(node_id, ()))
    return active


@dataclass(frozen=True)
class Highlight:
    """Visible/dimmed partition. ``active is None`` means everything is visible."""

    active: Optional[FrozenSet[str]] = None
    dimmed_opacity: float = LIGHT_OPACITY

    @property
    def is_cleared(self) -> bool:
        return self.active is None

    def is_active(self, node_id: str) -> bool:
        return self.active is None or node_id in self.active

    def node_opacity(self, node_id: str) -> float:
        return 1.0 if self.is_active(node_id) else self.dimmed_opacity

    def link_visible(self, link: Link) -> bool:
        return self.is_active(link.source_id) and self.is_active(link.target_id)

    def link_opacity(self, link: Link) -> float:
        return 1.0 if self.link_visible(link) else self.dimmed_opacity


class AdjacencyHighlighter:
    """Derives highlights from a neighbor map. Never touches layout or scores."""

    def __init__(self, neighbor_map: NeighborMap, dimmed_opacity: float = LIGHT_OPACITY):
        self.neighbor_map = neighbor_map
        self.dimmed_opacity = dimmed_opacity

    def activate(self, focus_nodes: Iterable[str]) -> Highlight:
        return Highlight(
            active=frozenset(active_set(focus_nodes, self.neighbor_map)),
            dimmed_opacity=self.dimmed_opacity,
        )

    def activate_link(self, link: Link) -> Highlight:
        """Hovering a link highlights both endpoints and their neighborhoods."""
        return self.activate([link.source_id, link.target_id])

    def clear(self) -> Highlight:
        return Highlight(active=None, dimmed_opacity=self.dimmed_opacity)
