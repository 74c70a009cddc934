"""Core domain types, graph index and dataset loading."""

from .dataset import Dataset, DatasetError, load_dataset, parse_dataset, parse_timestamp
from .graph import GraphIndex, build
from .models import (
    DEFAULT_DATE_RANGE,
    DateRange,
    Edge,
    FilterState,
    Link,
    NeighborMap,
    Node,
    NodeRole,
    Vertex,
)

__all__ = [
    # models
    "DEFAULT_DATE_RANGE",
    "DateRange",
    "Edge",
    "FilterState",
    "Link",
    "NeighborMap",
    "Node",
    "NodeRole",
    "Vertex",
    # graph
    "GraphIndex",
    "build",
    # dataset
    "Dataset",
    "DatasetError",
    "load_dataset",
    "parse_dataset",
    "parse_timestamp",
]
