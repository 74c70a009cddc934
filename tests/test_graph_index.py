"""Tests for graph index construction."""

from graphlens.core.graph import GraphIndex, build
from graphlens.core.models import Link, Node


def test_neighbor_map_is_symmetric(chain):
    for node_id, neighbors in chain.neighbor_map.items():
        for other in neighbors:
            assert node_id in chain.neighbor_map[other]

    assert chain.neighbors("B") == {"A", "C"}
    assert chain.neighbors("A") == {"B"}


def test_degree_is_neighbor_count(chain):
    degrees = {n.id: n.degree for n in chain.nodes}
    assert degrees == {"A": 1, "B": 2, "C": 2, "D": 1}


def test_dangling_links_are_dropped():
    nodes = [Node(id="a"), Node(id="b")]
    links, neighbor_map = build(nodes, [("a", "b"), ("a", "ghost"), ("ghost", "b", 2.0)])

    assert [l.key() for l in links] == ["a->b"]
    assert neighbor_map == {"a": {"b"}, "b": {"a"}}


def test_dropped_count_is_reported():
    index = GraphIndex.from_nodes([Node(id="a")], [("a", "x"), ("y", "a")])
    assert index.dropped_links == 2
    assert index.stats()["dropped_links"] == 2


def test_duplicate_ids_last_write_wins():
    first = Node(id="a", name="first")
    second = Node(id="a", name="second")
    index = GraphIndex.from_nodes([first, second, Node(id="b")], [("a", "b")])

    assert len(index.nodes) == 2
    assert index.get_node("a") is second
    assert second.degree == 1


def test_self_loop_kept_but_not_a_neighbor():
    index = GraphIndex.from_nodes([Node(id="a")], [("a", "a")])
    assert len(index.links) == 1
    assert index.neighbors("a") == set()
    assert index.get_node("a").degree == 0


def test_negative_weight_clamped():
    index = GraphIndex.from_nodes([Node(id="a"), Node(id="b")], [Link("a", "b", weight=-3.0)])
    assert index.links[0].weight == 0.0


def test_directed_input_gives_undirected_view():
    index = GraphIndex.from_nodes([Node(id="a"), Node(id="b")], [("b", "a")])
    assert index.neighbors("a") == {"b"}
    assert index.roots() == {"b"}


def test_empty_graph():
    index = GraphIndex.from_nodes([], [])
    assert index.nodes == []
    assert index.stats()["max_degree"] == 0


def test_unknown_node_has_no_neighbors(chain):
    assert chain.neighbors("nope") == set()
    assert chain.get_node("nope") is None


def test_to_networkx_carries_attributes(chain):
    chain.get_node("A").x = 1.0
    chain.get_node("A").y = 2.0
    G = chain.to_networkx()

    assert G.number_of_nodes() == 4
    assert G.number_of_edges() == 3
    assert G.nodes["A"]["x"] == 1.0
    assert G.nodes["B"]["degree"] == 2
    assert "x" not in G.nodes["B"]


def test_stats(chain):
    chain_stats = chain.stats()
    assert chain_stats == {
        "nodes": 4,
        "links": 3,
        "dropped_links": 0,
        "roots": 1,
        "isolated": 0,
        "max_degree": 2,
    }
