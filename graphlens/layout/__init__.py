"""Force-directed layout."""

from .fruchterman import EPSILON, FruchtermanReingold, LayoutState, classify_roots

__all__ = ["EPSILON", "FruchtermanReingold", "LayoutState", "classify_roots"]
