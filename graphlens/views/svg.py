"""
graphlens SVG engine.

Minimal SVG generation primitives for network snapshots.
"""

from __future__ import annotations

import html
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

COLORS = {
    "bg": "#ffffff",
    "bg_dark": "#0e1116",
    "link": "#999999",
    "label_text": "#ffffff",
    "focus": "#facc15",
}


@dataclass
class Style:
    fill: str = "none"
    stroke: str = "none"
    stroke_width: float = 1.0
    stroke_dasharray: Optional[str] = None
    opacity: float = 1.0
    font_size: int = 12
    font_family: str = "system-ui, -apple-system, sans-serif"
    font_weight: str = "normal"
    text_anchor: str = "start"
    dominant_baseline: Optional[str] = None


class SVGCanvas:
    """
    Lightweight SVG generator.
    """

    def __init__(self, width: int = 800, height: int = 600, dark_mode: bool = False):
        self.width = width
        self.height = height
        self.elements: List[str] = []
        self.defs: List[str] = []
        self.bg_color = COLORS["bg_dark"] if dark_mode else COLORS["bg"]

        self._add_markers()

    def _add_markers(self):
        """Arrow marker for directed links."""
        self.defs.append(
            """
        <marker id="arrow" viewBox="0 -5 10 10" refX="8" refY="0"
                markerWidth="6" markerHeight="6" orient="auto">
            <path d="M0,-5L10,0L0,5" fill="{}" />
        </marker>
        """.format(COLORS["link"])
        )

    def open_group(self, css_class: str, opacity: float = 1.0):
        self.elements.append(f'<g class="{html.escape(css_class, quote=True)}" opacity="{opacity}">')

    def close_group(self):
        self.elements.append("</g>")

    def add_circle(self, cx: float, cy: float, r: float, style: Style | None = None):
        """Draw a circle."""
        attrs = self._style_to_attrs(style or Style())
        self.elements.append(f'<circle cx="{cx}" cy="{cy}" r="{r}" {attrs} />')

    def add_text(self, x: float, y: float, text: str, style: Style | None = None):
        """Draw text."""
        s = style or Style()
        attrs = self._style_to_attrs(s)
        escaped_text = html.escape(str(text))
        self.elements.append(f'<text x="{x}" y="{y}" {attrs}>{escaped_text}</text>')

    def add_line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        style: Style | None = None,
        marker_end: str | None = None,
    ):
        """Draw a line."""
        attrs = self._style_to_attrs(style or Style())
        marker_attr = f' marker-end="url(#{marker_end})"' if marker_end else ""
        self.elements.append(f'<line x1="{x1}" y1="{y1}" x2="{x2}" y2="{y2}" {attrs}{marker_attr} />')

    def _style_to_attrs(self, style: Style) -> str:
        """Convert Style object to SVG attributes string."""
        attrs = [
            f'fill="{style.fill}"',
            f'stroke="{style.stroke}"',
            f'stroke-width="{style.stroke_width}"',
            f'opacity="{style.opacity}"',
            f'font-family="{style.font_family}"',
            f'font-size="{style.font_size}px"',
            f'font-weight="{style.font_weight}"',
            f'text-anchor="{style.text_anchor}"',
        ]
        if style.stroke_dasharray:
            attrs.append(f'stroke-dasharray="{style.stroke_dasharray}"')
        if style.dominant_baseline:
            attrs.append(f'dominant-baseline="{style.dominant_baseline}"')

        return " ".join(attrs)

    def render(self) -> str:
        """Generate full SVG string."""
        defs_block = f"<defs>{''.join(self.defs)}</defs>" if self.defs else ""
        content = "\n".join(self.elements)

        return f"""<?xml version="1.0" encoding="UTF-8" standalone="no"?>
<svg width="{self.width}" height="{self.height}" viewBox="0 0 {self.width} {self.height}"
     xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink">
    <rect width="100%" height="100%" fill="{self.bg_color}" />
    {defs_block}
    {content}
</svg>"""

    def save(self, path: str | Path):
        """Save SVG to file."""
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.render())


# --- Rasterization helpers ---


def svg_string_to_png_bytes(svg: str) -> bytes:
    """Convert an SVG string to PNG bytes."""
    import cairosvg

    return cairosvg.svg2png(bytestring=svg.encode("utf-8"))


def save_png(svg: str, png_path: str | Path) -> bytes:
    """Save SVG-rendered content to a PNG on disk and return the bytes."""
    out_path = Path(png_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    png_bytes = svg_string_to_png_bytes(svg)
    out_path.write_bytes(png_bytes)
    return png_bytes
