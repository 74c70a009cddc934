"""Dataset loading: raw vertex/edge records into nodes and links."""

from __future__ import annotations

import json
import logging
import math
import random
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..config import DatasetSettings
from .models import Edge, Link, Node, Vertex

logger = logging.getLogger(__name__)

_YEAR = re.compile(r"\d{4}")


class DatasetError(ValueError):
    """Raised when a dataset file cannot be read at all."""


def parse_timestamp(value: Any) -> Optional[int]:
    """Parse an ISO date string or an epoch-ms number into epoch ms."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value) if math.isfinite(value) else None
    text = str(value).strip()
    if _YEAR.fullmatch(text):
        text = f"{text}-01-01"
    else:
        try:
            number = float(text)
        except ValueError:
            number = None
        if number is not None:
            if not math.isfinite(number):
                logger.debug("Non-finite timestamp %r", value)
                return None
            return int(number)
    try:
        dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable timestamp %r", value)
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def _first(attributes: Dict[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = attributes.get(key)
        if value not in (None, ""):
            return value
    return None


@dataclass
class Dataset:
    vertices: List[Vertex] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    archetypes: List[str] = field(default_factory=list)
    settings: DatasetSettings = field(default_factory=DatasetSettings)

    def archetype_ids(self) -> List[int]:
        """All archetype ids, by position in the archetype list or as seen on vertices."""
        if self.archetypes:
            return list(range(len(self.archetypes)))
        return sorted({v.archetype for v in self.vertices})

    def vertex_dates(self, vertex: Vertex) -> Tuple[Optional[int], Optional[int]]:
        attrs = vertex.attributes
        begin = parse_timestamp(_first(attrs, self.settings.begin_keys))
        end = parse_timestamp(_first(attrs, self.settings.end_keys))
        if begin is None and end is None:
            single = parse_timestamp(_first(attrs, self.settings.timestamp_keys))
            return single, single
        return begin, end

    def edge_label(self, edge: Edge) -> Optional[str]:
        value = _first(edge.attributes, self.settings.label_keys)
        if value is None and edge.attributes:
            value = next(iter(edge.attributes.values()))
        return None if value is None else str(value)

    def to_graph(
        self,
        width: Optional[float] = None,
        height: Optional[float] = None,
        seed: Optional[int] = None,
    ) -> Tuple[List[Node], List[Link]]:
        """Build nodes and raw links.

        When width/height are given, nodes are seeded at random positions
        inside the viewport; otherwise the layout engine seeds them.
        """
        rng = random.Random(seed)
        nodes: List[Node] = []
        for vertex in self.vertices:
            begin, end = self.vertex_dates(vertex)
            node = Node(id=vertex.id, name=vertex.title, group=vertex.archetype, begin=begin, end=end)
            if width is not None and height is not None:
                node.x = rng.random() * width
                node.y = rng.random() * height
            nodes.append(node)

        links: List[Link] = []
        for edge in self.edges:
            raw_weight = edge.attributes.get(self.settings.weight_key, 1.0)
            try:
                weight = float(raw_weight)
            except (TypeError, ValueError):
                weight = 1.0
            links.append(
                Link(source_id=edge.from_id, target_id=edge.to_id, weight=weight, label=self.edge_label(edge))
            )
        return nodes, links


def parse_dataset(data: Dict[str, Any], settings: Optional[DatasetSettings] = None) -> Dataset:
    """Parse a raw ``{"vertices": [...], "edges": [...]}`` record.

    Records missing an id are skipped with a warning.
    """
    if not isinstance(data, dict):
        raise DatasetError("Dataset must be a JSON object")

    dataset = Dataset(settings=settings or DatasetSettings())

    skipped = 0
    for raw in data.get("vertices") or []:
        if not isinstance(raw, dict) or raw.get("id") is None:
            skipped += 1
            continue
        try:
            archetype = int(raw.get("archetype", raw.get("group", 0)) or 0)
        except (TypeError, ValueError):
            archetype = 0
        dataset.vertices.append(
            Vertex(
                id=str(raw["id"]),
                title=str(raw.get("title") or raw.get("name") or raw["id"]),
                archetype=archetype,
                attributes=dict(raw.get("attributes") or {}),
            )
        )

    for raw in data.get("edges") or []:
        if not isinstance(raw, dict) or raw.get("from") is None or raw.get("to") is None:
            skipped += 1
            continue
        dataset.edges.append(
            Edge(from_id=str(raw["from"]), to_id=str(raw["to"]), attributes=dict(raw.get("attributes") or {}))
        )

    for archetype in data.get("vertexArchetypes") or []:
        if isinstance(archetype, dict):
            dataset.archetypes.append(str(archetype.get("name", "")))
        else:
            dataset.archetypes.append(str(archetype))

    if skipped:
        logger.warning("Skipped %d malformed dataset record(s)", skipped)
    logger.info("Parsed dataset: %d vertices, %d edges", len(dataset.vertices), len(dataset.edges))
    return dataset


def load_dataset(path: str | Path, settings: Optional[DatasetSettings] = None) -> Dataset:
    """Load a dataset JSON file."""
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except OSError as e:
        raise DatasetError(f"Cannot read dataset {p}: {e}") from e
    except json.JSONDecodeError as e:
        raise DatasetError(f"Dataset {p} is not valid JSON: {e}") from e
    return parse_dataset(data, settings)
