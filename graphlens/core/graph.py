"""
Graph index: validated links plus a symmetric neighbor map.

Built once per dataset load. Dangling edges are dropped (logged, never
raised) and duplicate node ids resolve last-write-wins.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

import networkx as nx

from .models import Link, NeighborMap, Node

logger = logging.getLogger(__name__)

RawLink = Union[Link, Tuple[str, str], Tuple[str, str, float]]


def _coerce_link(raw: RawLink) -> Link:
    if isinstance(raw, Link):
        return raw
    if len(raw) == 2:
        source, target = raw  # type: ignore[misc]
        return Link(source_id=str(source), target_id=str(target))
    source, target, weight = raw  # type: ignore[misc]
    return Link(source_id=str(source), target_id=str(target), weight=float(weight))


class GraphIndex:
    """
    Owns the node list, the validated links and the neighbor map.

    Usage:
        index = GraphIndex.from_nodes(nodes, raw_links)
        index.neighbors("a")
    """

    def __init__(self):
        self.nodes: List[Node] = []
        self.links: List[Link] = []
        self.neighbor_map: NeighborMap = {}
        self._node_map: Dict[str, Node] = {}
        self._targets: Set[str] = set()
        self.dropped_links: int = 0

    @classmethod
    def from_nodes(cls, nodes: Iterable[Node], raw_links: Iterable[RawLink]) -> "GraphIndex":
        index = cls()
        index.build(nodes, raw_links)
        return index

    def build(self, nodes: Iterable[Node], raw_links: Iterable[RawLink]) -> Tuple[List[Link], NeighborMap]:
        """Validate links against the node set and build the neighbor map.

        Sets ``degree`` on every node. Returns ``(links, neighbor_map)``.
        """
        self._node_map = {}
        for node in nodes:
            if node.id in self._node_map:
                logger.debug("Duplicate node id %s, keeping the later record", node.id)
            self._node_map[node.id] = node
        self.nodes = list(self._node_map.values())

        self.neighbor_map = {node_id: set() for node_id in self._node_map}
        self.links = []
        self._targets = set()
        self.dropped_links = 0

        for raw in raw_links:
            link = _coerce_link(raw)
            if link.source_id not in self._node_map or link.target_id not in self._node_map:
                self.dropped_links += 1
                logger.debug("Dropping dangling link %s", link.key())
                continue
            if not math.isfinite(link.weight) or link.weight < 0:
                link.weight = 0.0
            self.links.append(link)
            self._targets.add(link.target_id)
            if link.source_id == link.target_id:
                continue
            self.neighbor_map[link.source_id].add(link.target_id)
            self.neighbor_map[link.target_id].add(link.source_id)

        if self.dropped_links:
            logger.warning("Dropped %d link(s) with missing endpoints", self.dropped_links)

        for node in self.nodes:
            node.degree = len(self.neighbor_map[node.id])

        return self.links, self.neighbor_map

    @property
    def node_map(self) -> Dict[str, Node]:
        return self._node_map

    def get_node(self, node_id: str) -> Optional[Node]:
        """Get node by ID (O(1))."""
        return self._node_map.get(node_id)

    def neighbors(self, node_id: str) -> Set[str]:
        """Directly adjacent ids (O(1)); empty for unknown ids."""
        return self.neighbor_map.get(node_id, set())

    def roots(self) -> Set[str]:
        """Ids that are never the target of a link."""
        return {n.id for n in self.nodes if n.id not in self._targets}

    def stats(self) -> Dict[str, int]:
        degrees = [n.degree for n in self.nodes]
        return {
            "nodes": len(self.nodes),
            "links": len(self.links),
            "dropped_links": self.dropped_links,
            "roots": len(self.roots()),
            "isolated": sum(1 for d in degrees if d == 0),
            "max_degree": max(degrees) if degrees else 0,
        }

    def to_networkx(self) -> "nx.Graph":
        """Undirected networkx view carrying layout and interest attributes."""
        G = nx.Graph()
        for node in self.nodes:
            attrs = {"name": node.name, "group": node.group, "degree": node.degree, "doi": node.doi}
            if node.x is not None and node.y is not None:
                attrs["x"] = float(node.x)
                attrs["y"] = float(node.y)
            G.add_node(node.id, **attrs)
        for link in self.links:
            attrs = {"weight": link.weight}
            if link.label:
                attrs["label"] = link.label
            G.add_edge(link.source_id, link.target_id, **attrs)
        return G


def build(nodes: Sequence[Node], raw_links: Iterable[RawLink]) -> Tuple[List[Link], NeighborMap]:
    """Functional form of :meth:`GraphIndex.build`."""
    return GraphIndex().build(nodes, raw_links)
