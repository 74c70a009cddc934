"""
Fruchterman-Reingold force-directed placement.

Each step accumulates pairwise repulsion (k^2/d), attraction along links
(d^2/k) and a pull toward the viewport center, then moves every unpinned
axis by at most the current temperature. The temperature decays
geometrically and is only reset by building a new engine.

Repulsion is O(n^2) per step, which is fine for graphs of a few hundred
nodes. Larger graphs would need a Barnes-Hut style approximation.
"""

from __future__ import annotations

import logging
import math
import random
from enum import Enum
from typing import Dict, List, Optional, Sequence, Set, Tuple

from ..config import LayoutSettings
from ..core.models import Link, Node, NodeRole

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

# Minimum pairwise distance used in force denominators.
EPSILON = 0.01


class LayoutState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    RUNNING = "running"
    SETTLED = "settled"


def classify_roots(nodes: Sequence[Node], links: Sequence[Link]) -> Dict[str, NodeRole]:
    """Tag every node as root, isolated root or member from link direction."""
    targets: Set[str] = set()
    touched: Set[str] = set()
    for link in links:
        targets.add(link.target_id)
        if link.source_id != link.target_id:
            touched.add(link.source_id)
            touched.add(link.target_id)

    roles: Dict[str, NodeRole] = {}
    for node in nodes:
        if node.id in targets:
            roles[node.id] = NodeRole.MEMBER
        elif node.id in touched:
            roles[node.id] = NodeRole.ROOT
        else:
            roles[node.id] = NodeRole.ISOLATED_ROOT
    return roles


class FruchtermanReingold:
    """
    Incremental force-directed layout over a node list it mutates in place.

    Usage:
        engine = FruchtermanReingold(nodes, links, LayoutSettings(width=800, height=600))
        engine.run(50)           # batch layout before first render
        engine.step()            # one animation frame
        engine.pin("a", 10, 20)  # drag
    """

    def __init__(
        self,
        nodes: List[Node],
        links: Sequence[Link],
        settings: Optional[LayoutSettings] = None,
    ):
        self.settings = settings or LayoutSettings()
        self.state = LayoutState.UNINITIALIZED

        self.nodes = nodes
        self.width = self.settings.width
        self.height = self.settings.height
        self.iterations = self.settings.iterations
        self.k = self.settings.k or math.sqrt((self.width * self.height) / max(len(nodes), 1))
        self.temperature = self.settings.temperature or self.width / 4
        self.cooling_factor = self.settings.cooling_factor
        self.centering_strength = self.settings.centering_strength

        self._rng = random.Random(self.settings.seed)
        self._index: Dict[str, int] = {n.id: i for i, n in enumerate(nodes)}
        self._edges: List[Tuple[int, int]] = []
        for link in links:
            s = self._index.get(link.source_id)
            t = self._index.get(link.target_id)
            if s is None or t is None or s == t:
                continue
            self._edges.append((s, t))

        self.roles = classify_roots(nodes, links)
        self._is_root = [self.roles.get(n.id) != NodeRole.MEMBER for n in nodes]
        self._is_isolated = [self.roles.get(n.id) == NodeRole.ISOLATED_ROOT for n in nodes]

        self._seed_positions()
        self.state = LayoutState.INITIALIZED
        logger.debug(
            "Layout initialized: %d nodes, %d edges, k=%.2f, T0=%.2f",
            len(nodes),
            len(self._edges),
            self.k,
            self.temperature,
        )

    def _seed_positions(self) -> None:
        for node in self.nodes:
            if node.pinned_x is not None:
                node.x = node.pinned_x
            if node.pinned_y is not None:
                node.y = node.pinned_y
            if node.x is None or not math.isfinite(node.x):
                node.x = self._rng.random() * self.width
            if node.y is None or not math.isfinite(node.y):
                node.y = self._rng.random() * self.height

    def _repulsion_scale(self, i: int, j: int) -> float:
        if self._is_isolated[i] or self._is_isolated[j]:
            return self.settings.isolated_root_repulsion_multiplier
        if self._is_root[i] and self._is_root[j]:
            return self.settings.root_repulsion_multiplier
        return 1.0

    def _repulsive_forces(self, fx: List[float], fy: List[float]) -> None:
        nodes = self.nodes
        k2 = self.k * self.k
        n = len(nodes)
        for i in range(n):
            a = nodes[i]
            for j in range(i + 1, n):
                b = nodes[j]
                dx = b.x - a.x
                dy = b.y - a.y
                dist = math.hypot(dx, dy)
                if dist < EPSILON:
                    # Coincident points: push apart along a random direction.
                    angle = self._rng.random() * 2 * math.pi
                    dx, dy, dist = math.cos(angle) * EPSILON, math.sin(angle) * EPSILON, EPSILON
                force = k2 / dist * self._repulsion_scale(i, j)
                ux = dx / dist * force
                uy = dy / dist * force
                fx[i] -= ux
                fy[i] -= uy
                fx[j] += ux
                fy[j] += uy

    def _attractive_forces(self, fx: List[float], fy: List[float]) -> None:
        nodes = self.nodes
        for s, t in self._edges:
            dx = nodes[t].x - nodes[s].x
            dy = nodes[t].y - nodes[s].y
            dist = math.hypot(dx, dy)
            if dist < EPSILON:
                continue
            force = dist * dist / self.k
            ux = dx / dist * force
            uy = dy / dist * force
            fx[s] += ux
            fy[s] += uy
            fx[t] -= ux
            fy[t] -= uy

    def _centering_forces(self, fx: List[float], fy: List[float]) -> None:
        cx, cy = self.width / 2, self.height / 2
        strength = self.centering_strength
        for i, node in enumerate(self.nodes):
            fx[i] += (cx - node.x) * strength
            fy[i] += (cy - node.y) * strength

    def _update_positions(self, fx: List[float], fy: List[float]) -> None:
        for i, node in enumerate(self.nodes):
            move_x = node.pinned_x is None
            move_y = node.pinned_y is None
            if not (move_x or move_y):
                continue
            mag = math.hypot(fx[i], fy[i])
            if mag <= 0 or not math.isfinite(mag):
                continue
            # Cap the combined displacement at the current temperature.
            step = min(mag, self.temperature)
            if move_x:
                node.x += fx[i] / mag * step
            if move_y:
                node.y += fy[i] / mag * step
            if self.settings.clamp_to_viewport:
                if move_x:
                    node.x = max(0.0, min(self.width, node.x))
                if move_y:
                    node.y = max(0.0, min(self.height, node.y))

    def step(self) -> None:
        """Advance the simulation by one iteration."""
        n = len(self.nodes)
        if n:
            fx = [0.0] * n
            fy = [0.0] * n
            self._repulsive_forces(fx, fy)
            self._attractive_forces(fx, fy)
            self._centering_forces(fx, fy)
            self._update_positions(fx, fy)

        self.temperature *= self.cooling_factor
        if self.temperature < self.settings.settle_temperature:
            if self.state != LayoutState.SETTLED:
                logger.debug("Layout settled at T=%.3f", self.temperature)
            self.state = LayoutState.SETTLED
        else:
            self.state = LayoutState.RUNNING

    def run(self, iterations: Optional[int] = None) -> List[Node]:
        """Run ``iterations`` steps (the configured count by default) and return the nodes."""
        count = self.iterations if iterations is None else max(0, int(iterations))
        for _ in range(count):
            self.step()
        return self.nodes

    def pin(self, node_id: str, x: Optional[float], y: Optional[float]) -> bool:
        """Pin a node's axes; ``None`` leaves that axis free.

        The node is moved to the pinned coordinates immediately. Returns
        False for unknown ids.
        """
        node = self.get_node(node_id)
        if node is None:
            logger.warning("Cannot pin unknown node %s", node_id)
            return False
        if x is not None and math.isfinite(x):
            node.pinned_x = node.x = float(x)
        if y is not None and math.isfinite(y):
            node.pinned_y = node.y = float(y)
        return True

    def unpin(self, node_id: str) -> bool:
        node = self.get_node(node_id)
        if node is None:
            logger.warning("Cannot unpin unknown node %s", node_id)
            return False
        node.pinned_x = None
        node.pinned_y = None
        return True

    def get_node(self, node_id: str) -> Optional[Node]:
        i = self._index.get(node_id)
        return None if i is None else self.nodes[i]

    def role(self, node_id: str) -> Optional[NodeRole]:
        return self.roles.get(node_id)

    def positions(self) -> Dict[str, Point]:
        return {n.id: (n.x, n.y) for n in self.nodes}

    @property
    def is_settled(self) -> bool:
        return self.state == LayoutState.SETTLED
