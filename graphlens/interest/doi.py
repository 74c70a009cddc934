"""Degree-of-Interest scoring.

DOI(x | y, z) = alpha * A(x) + beta * U(x, z) + gamma * J(x, y), clamped to [0, 1]

- A: a-priori importance (normalized degree)
- U: user interest from the search / archetype / date filters z
- J: joint distance, BFS hops from the focus node y

Each component has its own cache owned by the engine instance, invalidated
only by the inputs it depends on.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, Optional, Sequence, Tuple

from ..config import InterestSettings
from ..core.models import FilterState, NeighborMap, Node

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DOIComponents:
    apriori: float
    user: float
    joint: float
    score: float


class FocusSearch:
    """Breadth-first search from one focus node, resumed lazily.

    Every node discovered while looking for one target keeps its distance,
    so later queries are often answered without expanding the frontier.
    """

    def __init__(self, focus_id: str, neighbor_map: NeighborMap):
        self.focus_id = focus_id
        self._neighbor_map = neighbor_map
        self.distances: Dict[str, int] = {focus_id: 0}
        self._frontier: Deque[str] = deque([focus_id])

    @property
    def exhausted(self) -> bool:
        return not self._frontier

    def distance_to(self, node_id: str) -> Optional[int]:
        """Hop count from the focus, or None when unreachable."""
        if node_id in self.distances:
            return self.distances[node_id]

        while self._frontier:
            current = self._frontier.popleft()
            distance = self.distances[current] + 1
            for neighbor in self._neighbor_map.get(current, ()):
                if neighbor in self.distances:
                    continue
                self.distances[neighbor] = distance
                self._frontier.append(neighbor)
            if node_id in self.distances:
                return self.distances[node_id]
        return None


class InterestEngine:
    """
    Scores nodes by degree of interest.

    One engine per visualization instance; call :meth:`reset` on graph reload.

    Usage:
        engine = InterestEngine(neighbor_map)
        for node in nodes:
            node.doi = engine.score(node, nodes, params)
    """

    def __init__(self, neighbor_map: NeighborMap, settings: Optional[InterestSettings] = None):
        self.neighbor_map = neighbor_map
        self.settings = settings or InterestSettings()
        self.alpha, self.beta, self.gamma = self.settings.weights()

        self._degree_bounds: Optional[Tuple[int, int]] = None
        self._apriori: Dict[str, Tuple[int, float]] = {}

        self._filter_key: Optional[tuple] = None
        self._user: Dict[str, float] = {}

        self._focus: Optional[FocusSearch] = None

    def reset(self) -> None:
        """Drop every cache (graph reload)."""
        self._degree_bounds = None
        self._apriori.clear()
        self._filter_key = None
        self._user.clear()
        self._focus = None

    # --- A(x) ---

    def _sync_degree_bounds(self, all_nodes: Sequence[Node]) -> Tuple[int, int]:
        if all_nodes:
            degrees = [n.degree for n in all_nodes]
            bounds = (min(degrees), max(degrees))
        else:
            bounds = (0, 0)
        if bounds != self._degree_bounds:
            if self._degree_bounds is not None:
                logger.debug("Degree bounds changed %s -> %s", self._degree_bounds, bounds)
            self._degree_bounds = bounds
            self._apriori.clear()
        return bounds

    def _apriori_for(self, node: Node, bounds: Tuple[int, int]) -> float:
        cached = self._apriori.get(node.id)
        if cached is not None and cached[0] == node.degree:
            return cached[1]
        lo, hi = bounds
        if hi == lo:
            value = 0.5
        else:
            value = min(1.0, max(0.0, (node.degree - lo) / (hi - lo)))
        self._apriori[node.id] = (node.degree, value)
        return value

    def apriori(self, node: Node, all_nodes: Sequence[Node]) -> float:
        return self._apriori_for(node, self._sync_degree_bounds(all_nodes))

    # --- U(x, z) ---

    def _sync_filters(self, params: FilterState) -> None:
        key = params.filter_key()
        if key != self._filter_key:
            self._filter_key = key
            self._user.clear()

    def _user_for(self, node: Node, params: FilterState) -> float:
        cached = self._user.get(node.id)
        if cached is not None:
            return cached

        query = params.search_query
        if not query:
            search = 0.5
        else:
            search = 1.0 if query.lower() in (node.name or "").lower() else 0.0

        archetype = 1.0 if node.group in params.selected_archetypes else 0.0

        begin = node.begin if node.begin is not None else 0
        end = node.end if node.end is not None else begin
        date = 1.0 if params.date_range.contains(begin, end) else 0.0

        s = self.settings
        value = search * s.search_weight + archetype * s.archetype_weight + date * s.date_weight
        self._user[node.id] = value
        return value

    def user_interest(self, node: Node, params: FilterState) -> float:
        self._sync_filters(params)
        return self._user_for(node, params)

    # --- J(x, y) ---

    def _search_from(self, focus_id: str) -> FocusSearch:
        if self._focus is None or self._focus.focus_id != focus_id:
            self._focus = FocusSearch(focus_id, self.neighbor_map)
        return self._focus

    def distance(self, focus_id: str, node_id: str) -> Optional[int]:
        """BFS hop count between focus and node; None if unreachable."""
        return self._search_from(focus_id).distance_to(node_id)

    def joint_distance(self, node: Node, params: FilterState) -> float:
        if params.focus_node_id is None:
            return self.settings.neutral_focus
        hops = self.distance(params.focus_node_id, node.id)
        if hops is None:
            return 0.0
        return max(0.0, 1.0 - hops / self.settings.max_hops)

    # --- DOI ---

    def components(self, node: Node, all_nodes: Sequence[Node], params: FilterState) -> DOIComponents:
        a = self.apriori(node, all_nodes)
        u = self.user_interest(node, params)
        j = self.joint_distance(node, params)
        return DOIComponents(apriori=a, user=u, joint=j, score=self._combine(a, u, j))

    def _combine(self, a: float, u: float, j: float) -> float:
        total = self.alpha * a + self.beta * u + self.gamma * j
        return max(0.0, min(1.0, total))

    def score(self, node: Node, all_nodes: Sequence[Node], params: FilterState) -> float:
        """DOI for one node in [0, 1]. Never mutates ``node``."""
        return self.components(node, all_nodes, params).score

    def score_all(self, nodes: Sequence[Node], params: FilterState) -> Dict[str, float]:
        """DOI for every node, computing the degree bounds once."""
        bounds = self._sync_degree_bounds(nodes)
        self._sync_filters(params)
        scores: Dict[str, float] = {}
        for node in nodes:
            a = self._apriori_for(node, bounds)
            u = self._user_for(node, params)
            j = self.joint_distance(node, params)
            scores[node.id] = self._combine(a, u, j)
        return scores
