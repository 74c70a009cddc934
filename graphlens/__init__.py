"""
graphlens: force-directed layout and degree-of-interest scoring for
interactive node-link views.

Main interface: Explorer
"""

__version__ = "0.1.0"

from .session import Explorer
from .core.dataset import load_dataset

__all__ = ["Explorer", "load_dataset"]
