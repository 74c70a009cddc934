"""Degree-of-interest scoring."""

from .doi import DOIComponents, FocusSearch, InterestEngine

__all__ = ["DOIComponents", "FocusSearch", "InterestEngine"]
