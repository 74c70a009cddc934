"""Shared fixtures for graphlens tests."""

import json

import pytest

from graphlens.config import LayoutSettings
from graphlens.core.graph import GraphIndex
from graphlens.core.models import Link, Node


def make_chain():
    """A -> B -> C -> D."""
    nodes = [
        Node(id="A", name="Alpha", group=0),
        Node(id="B", name="Bravo", group=1),
        Node(id="C", name="Charlie", group=0),
        Node(id="D", name="Delta", group=2),
    ]
    links = [Link("A", "B"), Link("B", "C"), Link("C", "D")]
    return nodes, links


@pytest.fixture
def chain():
    """Indexed 4-node chain with degrees set."""
    nodes, links = make_chain()
    return GraphIndex.from_nodes(nodes, links)


@pytest.fixture
def chain_settings():
    return LayoutSettings(width=400, height=400, k=100, seed=7)


@pytest.fixture
def sample_dataset():
    """Raw dataset record in the vertices/edges format."""
    return {
        "vertices": [
            {
                "id": 1,
                "title": "Johann Sebastian Bach",
                "archetype": 0,
                "attributes": {"1": "1685-03-31", "2": "1750-07-28"},
            },
            {"id": 2, "title": "Leipzig", "archetype": 1, "attributes": {}},
            {"id": 3, "title": "Thomaskirche", "archetype": 1, "attributes": {"timestamp": "1212"}},
            {"id": 4, "title": "Anna Magdalena", "archetype": 0},
            {"title": "No id, skipped"},
        ],
        "edges": [
            {"from": 1, "to": 2, "attributes": {"3": "lived in"}},
            {"from": 2, "to": 3},
            {"from": 1, "to": 4, "attributes": {"weight": 4}},
            {"from": 1, "to": 99},
        ],
        "vertexArchetypes": [{"name": "person"}, {"name": "place"}],
    }


@pytest.fixture
def dataset_file(tmp_path, sample_dataset):
    path = tmp_path / "graph.json"
    path.write_text(json.dumps(sample_dataset), encoding="utf-8")
    return path
