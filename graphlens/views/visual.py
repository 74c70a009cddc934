"""Visual encoding of degree and interest: radius, color, labels, draw order."""

from __future__ import annotations

import math
import re
from typing import Dict, List, Optional, Sequence, Tuple

from ..core.models import Link, Node

# d3.schemeCategory10
CATEGORY10 = [
    "#1f77b4",
    "#ff7f0e",
    "#2ca02c",
    "#d62728",
    "#9467bd",
    "#8c564b",
    "#e377c2",
    "#7f7f7f",
    "#bcbd22",
    "#17becf",
]

BASE_RADIUS = 30.0
MAX_RADIUS = 50.0

# Lightness (percent) for doi 0 and the drop applied at doi 1.
LIGHTNESS_CEILING = 90.0
LIGHTNESS_RANGE = 60.0

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def node_radius(node: Node, nodes: Sequence[Node]) -> float:
    if not nodes:
        return BASE_RADIUS
    degrees = [n.degree for n in nodes]
    lo, hi = min(degrees), max(degrees)
    if hi == lo:
        return BASE_RADIUS
    normalized = (node.degree - lo) / (hi - lo)
    return min(BASE_RADIUS + normalized * (MAX_RADIUS - BASE_RADIUS), MAX_RADIUS)


def hex_to_hsl(hex_color: str) -> Tuple[float, float, float]:
    """'#rrggbb' -> (h degrees, s percent, l percent)."""
    h = hex_color.lstrip("#")
    r = int(h[0:2], 16) / 255
    g = int(h[2:4], 16) / 255
    b = int(h[4:6], 16) / 255

    mx, mn = max(r, g, b), min(r, g, b)
    lightness = (mx + mn) / 2
    hue = sat = 0.0
    if mx != mn:
        d = mx - mn
        sat = d / (2 - mx - mn) if lightness > 0.5 else d / (mx + mn)
        if mx == r:
            hue = (g - b) / d + (6 if g < b else 0)
        elif mx == g:
            hue = (b - r) / d + 2
        else:
            hue = (r - g) / d + 4
        hue /= 6
    return hue * 360, sat * 100, lightness * 100


def hsl_to_hex(h: float, s: float, l: float) -> str:
    l /= 100
    a = s * min(l, 1 - l) / 100

    def channel(n: int) -> str:
        k = (n + h / 30) % 12
        color = l - a * max(min(k - 3, 9 - k, 1), -1)
        return format(int(math.floor(255 * color + 0.5)), "02x")

    return f"#{channel(0)}{channel(8)}{channel(4)}"


def group_color(group: int) -> str:
    return CATEGORY10[group % len(CATEGORY10)]


def doi_color(group: int, doi: float) -> str:
    """Group hue with lightness falling from 90% (doi 0) to 30% (doi 1)."""
    h, s, _ = hex_to_hsl(group_color(group))
    doi = min(1.0, max(0.0, doi))
    return hsl_to_hex(h, s, LIGHTNESS_CEILING - doi * LIGHTNESS_RANGE)


def initials(name: str) -> str:
    """Collapse long words to their initial; short words (<= 3 chars) stay whole."""
    out: List[str] = []
    for part in name.split(" "):
        if len(part) > 3:
            out.append(_NON_ALNUM.sub("", part[0]).upper())
        else:
            out.append(part)
    return "".join(out)


def z_order(nodes: Sequence[Node]) -> List[Node]:
    """Draw order: least interesting first so high-doi nodes end up on top."""
    return sorted(nodes, key=lambda n: n.doi)


def orient_link(
    link: Link,
    node_map: Dict[str, Node],
    center: Tuple[float, float],
) -> Optional[Tuple[Node, Node]]:
    """(from, to) where ``to`` is the endpoint farther from the viewport center.

    Following a link then travels away from what is currently in view.
    """
    source = node_map.get(link.source_id)
    target = node_map.get(link.target_id)
    if source is None or target is None:
        return None
    cx, cy = center
    sd = math.hypot(cx - (source.x or 0.0), cy - (source.y or 0.0))
    td = math.hypot(cx - (target.x or 0.0), cy - (target.y or 0.0))
    return (target, source) if sd > td else (source, target)
