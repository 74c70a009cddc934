"""Network View - node-link snapshot with interest and highlight encoding."""

from __future__ import annotations

import math
from typing import Dict, Optional, Sequence

from ..core.models import Link, Node
from ..highlight import Highlight
from .svg import COLORS, Style, SVGCanvas
from .visual import doi_color, initials, node_radius, z_order

# Keeps zero-weight links visible.
MIN_LINK_WIDTH = 0.5


class NetworkView:
    def __init__(
        self,
        nodes: Sequence[Node],
        links: Sequence[Link],
        width: float,
        height: float,
        dark_mode: bool = False,
    ):
        self.nodes = nodes
        self.links = links
        self.width = width
        self.height = height
        self.dark_mode = dark_mode

    def render(
        self,
        *,
        highlight: Optional[Highlight] = None,
        focus_id: Optional[str] = None,
        show_labels: bool = True,
        directed: bool = False,
        output_path: str | None = None,
    ) -> str:
        """Render the current positions and scores as an SVG string."""
        highlight = highlight or Highlight()
        node_map: Dict[str, Node] = {n.id: n for n in self.nodes}
        canvas = SVGCanvas(
            width=int(math.ceil(self.width)),
            height=int(math.ceil(self.height)),
            dark_mode=self.dark_mode,
        )

        canvas.open_group("links")
        for link in self.links:
            s = node_map.get(link.source_id)
            t = node_map.get(link.target_id)
            if s is None or t is None or s.x is None or t.x is None:
                continue
            style = Style(
                stroke=COLORS["link"],
                stroke_width=round(max(math.sqrt(max(link.weight, 0.0)), MIN_LINK_WIDTH), 3),
                opacity=highlight.link_opacity(link),
            )
            canvas.add_line(s.x, s.y, t.x, t.y, style, marker_end="arrow" if directed else None)
        canvas.close_group()

        canvas.open_group("nodes")
        for node in z_order(self.nodes):
            if node.x is None or node.y is None:
                continue
            opacity = highlight.node_opacity(node.id)
            r = node_radius(node, self.nodes)
            ring = COLORS["focus"] if node.id == focus_id else "none"
            canvas.add_circle(
                node.x,
                node.y,
                r,
                Style(fill=doi_color(node.group, node.doi), stroke=ring, stroke_width=3, opacity=opacity),
            )
            if show_labels:
                canvas.add_text(
                    node.x,
                    node.y,
                    initials(node.name),
                    Style(
                        fill=COLORS["label_text"],
                        font_size=15,
                        font_weight="bold",
                        text_anchor="middle",
                        dominant_baseline="middle",
                        opacity=opacity,
                    ),
                )
        canvas.close_group()

        if output_path:
            canvas.save(output_path)
        return canvas.render()
