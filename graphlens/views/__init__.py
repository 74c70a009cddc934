"""Visualization views for graphlens."""

from .network import NetworkView
from .svg import COLORS, Style, SVGCanvas, save_png, svg_string_to_png_bytes
from .visual import (
    CATEGORY10,
    doi_color,
    hex_to_hsl,
    hsl_to_hex,
    initials,
    node_radius,
    orient_link,
    z_order,
)

__all__ = [
    "NetworkView",
    "COLORS",
    "Style",
    "SVGCanvas",
    "save_png",
    "svg_string_to_png_bytes",
    "CATEGORY10",
    "doi_color",
    "hex_to_hsl",
    "hsl_to_hex",
    "initials",
    "node_radius",
    "orient_link",
    "z_order",
]
