"""graphlens session: one interactive visualization instance.

Ties the graph index, layout engine, interest engine and highlighter to the
three event sources of an interactive view:

- timer ticks (play/pause) advance the layout
- drags pin a node and reposition it immediately
- filter/focus changes recompute every node's DOI
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from .animation import Animator
from .config import Settings
from .core.dataset import Dataset
from .core.graph import GraphIndex, RawLink
from .core.models import DateRange, FilterState, Link, Node
from .highlight import AdjacencyHighlighter, Highlight
from .interest.doi import InterestEngine
from .layout.fruchterman import FruchtermanReingold
from .views.network import NetworkView
from .views.visual import doi_color, initials, node_radius, orient_link, z_order

logger = logging.getLogger(__name__)


class Explorer:
    """
    Owns all per-view state; caches live and die with the instance.

    Usage:
        explorer = Explorer.from_dataset(load_dataset("graph.json"))
        explorer.run()
        explorer.set_filters(search_query="bach")
        explorer.hover("42")
        svg = explorer.render_svg()
    """

    def __init__(
        self,
        nodes: Iterable[Node],
        raw_links: Iterable[RawLink],
        settings: Optional[Settings] = None,
        archetype_ids: Optional[Iterable[int]] = None,
    ):
        self.settings = settings or Settings()
        self.index = GraphIndex.from_nodes(nodes, raw_links)
        self.layout = FruchtermanReingold(self.index.nodes, self.index.links, self.settings.layout)
        self.interest = InterestEngine(self.index.neighbor_map, self.settings.interest)
        self.highlighter = AdjacencyHighlighter(self.index.neighbor_map)
        self.highlight: Highlight = self.highlighter.clear()
        self.animator = Animator(self.layout.step, interval_s=self.settings.animation.interval_s)

        defaults = self.settings.filters
        if defaults.selected_archetypes is not None:
            archetypes = list(defaults.selected_archetypes)
        elif archetype_ids is not None:
            archetypes = list(archetype_ids)
        else:
            archetypes = sorted({n.group for n in self.index.nodes})
        lo, hi = defaults.date_bounds_ms()
        self.filters = FilterState.create(selected_archetypes=archetypes, date_range=DateRange(lo, hi))

        self.recompute_interest()
        logger.info("Explorer ready: %s", self.index.stats())

    @classmethod
    def from_dataset(cls, dataset: Dataset, settings: Optional[Settings] = None) -> "Explorer":
        settings = settings or Settings()
        nodes, links = dataset.to_graph()
        return cls(nodes, links, settings, archetype_ids=dataset.archetype_ids())

    @property
    def nodes(self) -> List[Node]:
        return self.index.nodes

    @property
    def links(self) -> List[Link]:
        return self.index.links

    # --- interest ---

    def recompute_interest(self) -> Dict[str, float]:
        """Score every node under the current filters and assign ``doi``."""
        scores = self.interest.score_all(self.nodes, self.filters)
        for node in self.nodes:
            node.doi = scores[node.id]
        return scores

    def set_filters(
        self,
        *,
        search_query: Optional[str] = None,
        selected_archetypes: Optional[Iterable[int]] = None,
        date_range: Optional[DateRange] = None,
    ) -> Dict[str, float]:
        current = self.filters
        self.filters = FilterState.create(
            search_query=current.search_query if search_query is None else search_query,
            selected_archetypes=current.selected_archetypes if selected_archetypes is None else selected_archetypes,
            date_range=date_range or current.date_range,
            focus_node_id=current.focus_node_id,
        )
        return self.recompute_interest()

    def set_focus(self, node_id: Optional[str]) -> Dict[str, float]:
        if node_id is not None and self.index.get_node(node_id) is None:
            logger.warning("Ignoring focus on unknown node %s", node_id)
            node_id = None
        self.filters = self.filters.with_focus(node_id)
        return self.recompute_interest()

    def search(self, query: str, limit: int = 20) -> List[Node]:
        """Nodes whose name contains ``query``, most interesting first."""
        q = query.lower()
        if not q:
            return []
        hits = [n for n in self.nodes if q in n.name.lower()]
        hits.sort(key=lambda n: (-n.doi, n.name))
        return hits[:limit]

    # --- hover / highlight ---

    def hover(self, node_id: str) -> Highlight:
        """Focus a node and dim everything outside its neighborhood.

        Unknown ids leave the current focus and highlight untouched.
        """
        if self.index.get_node(node_id) is None:
            logger.warning("Ignoring hover on unknown node %s", node_id)
            return self.highlight
        self.set_focus(node_id)
        self.highlight = self.highlighter.activate([node_id])
        return self.highlight

    def hover_link(self, link: Link) -> Highlight:
        self.highlight = self.highlighter.activate_link(link)
        return self.highlight

    def leave(self) -> Highlight:
        if self.filters.focus_node_id is not None:
            self.set_focus(None)
        self.highlight = self.highlighter.clear()
        return self.highlight

    # --- layout ---

    def step(self) -> None:
        self.layout.step()

    def run(self, iterations: Optional[int] = None) -> List[Node]:
        return self.layout.run(iterations)

    def drag(self, node_id: str, x: float, y: float) -> bool:
        return self.layout.pin(node_id, x, y)

    def release(self, node_id: str) -> bool:
        return self.layout.unpin(node_id)

    def play(self, on_frame=None):
        """Start animated layout; requires a running event loop."""
        if on_frame is not None:
            self.animator.on_frame = on_frame
        return self.animator.start()

    def pause(self) -> None:
        self.animator.stop()

    # --- output ---

    def follow_link(self, link: Link) -> Optional[Node]:
        """The endpoint of ``link`` farther from the viewport center."""
        oriented = orient_link(link, self.index.node_map, self.settings.layout.center)
        return None if oriented is None else oriented[1]

    def snapshot(self) -> Dict[str, Any]:
        """Renderer-facing view of positions, scores and highlight state."""
        nodes = []
        for node in z_order(self.nodes):
            nodes.append(
                {
                    "id": node.id,
                    "name": node.name,
                    "label": initials(node.name),
                    "group": node.group,
                    "x": node.x,
                    "y": node.y,
                    "pinned": node.is_pinned,
                    "degree": node.degree,
                    "doi": node.doi,
                    "radius": node_radius(node, self.nodes),
                    "color": doi_color(node.group, node.doi),
                    "opacity": self.highlight.node_opacity(node.id),
                }
            )
        links = [
            {
                "source": link.source_id,
                "target": link.target_id,
                "weight": link.weight,
                "label": link.label,
                "opacity": self.highlight.link_opacity(link),
            }
            for link in self.links
        ]
        return {
            "width": self.layout.width,
            "height": self.layout.height,
            "temperature": self.layout.temperature,
            "state": self.layout.state.value,
            "focus": self.filters.focus_node_id,
            "nodes": nodes,
            "links": links,
        }

    def render_svg(self, output_path: Optional[str] = None, show_labels: bool = True) -> str:
        view = NetworkView(self.nodes, self.links, self.layout.width, self.layout.height)
        return view.render(
            highlight=self.highlight,
            focus_id=self.filters.focus_node_id,
            show_labels=show_labels,
            output_path=output_path,
        )
