"""Tests for the Explorer session."""

import asyncio

import pytest

from graphlens.config import LayoutSettings, Settings
from graphlens.core.dataset import parse_dataset
from graphlens.core.models import Link
from graphlens.highlight import LIGHT_OPACITY
from graphlens.session import Explorer

from conftest import make_chain


@pytest.fixture
def explorer():
    nodes, links = make_chain()
    settings = Settings(layout=LayoutSettings(width=400, height=400, k=100, seed=7))
    return Explorer(nodes, links, settings)


def test_initial_state(explorer):
    assert explorer.filters.selected_archetypes == frozenset({0, 1, 2})
    assert explorer.filters.focus_node_id is None
    assert explorer.highlight.is_cleared
    assert all(0.0 <= n.doi <= 1.0 for n in explorer.nodes)
    assert all(n.is_positioned for n in explorer.nodes)


def test_hover_sets_focus_and_highlight(explorer):
    highlight = explorer.hover("B")

    assert explorer.filters.focus_node_id == "B"
    assert highlight.active == frozenset({"A", "B", "C"})
    scores = {n.id: n.doi for n in explorer.nodes}
    assert scores["B"] > scores["D"]


def test_hover_unknown_node_is_ignored(explorer):
    highlight = explorer.hover("ghost")
    assert explorer.filters.focus_node_id is None
    assert highlight.is_cleared


def test_hover_unknown_node_keeps_previous_focus(explorer):
    explorer.hover("A")
    scores = {n.id: n.doi for n in explorer.nodes}

    highlight = explorer.hover("ghost")
    assert explorer.filters.focus_node_id == "A"
    assert highlight.active == frozenset({"A", "B"})
    assert {n.id: n.doi for n in explorer.nodes} == scores


def test_leave_clears(explorer):
    explorer.hover("A")
    explorer.leave()
    assert explorer.filters.focus_node_id is None
    assert explorer.highlight.is_cleared


def test_hover_link(explorer):
    highlight = explorer.hover_link(Link("C", "D"))
    assert highlight.active == frozenset({"B", "C", "D"})


def test_set_filters_recomputes(explorer):
    before = {n.id: n.doi for n in explorer.nodes}
    explorer.set_filters(search_query="delta")
    after = {n.id: n.doi for n in explorer.nodes}

    assert after["D"] > before["D"]
    assert after["A"] < before["A"]
    assert explorer.filters.selected_archetypes == frozenset({0, 1, 2})


def test_set_filters_keeps_focus(explorer):
    explorer.set_focus("A")
    explorer.set_filters(selected_archetypes=[0])
    assert explorer.filters.focus_node_id == "A"
    assert explorer.filters.selected_archetypes == frozenset({0})


def test_search(explorer):
    assert {n.id for n in explorer.search("HA")} == {"A", "C"}
    assert explorer.search("") == []
    assert explorer.search("zzz") == []


def test_drag_and_release(explorer):
    assert explorer.drag("A", 10.0, 20.0)
    explorer.run(5)
    node = explorer.index.get_node("A")
    assert (node.x, node.y) == (10.0, 20.0)

    explorer.release("A")
    explorer.step()
    assert not node.is_pinned


def test_follow_link_goes_outward(explorer):
    a = explorer.index.get_node("A")
    b = explorer.index.get_node("B")
    a.x, a.y = 200.0, 200.0
    b.x, b.y = 390.0, 10.0
    assert explorer.follow_link(Link("A", "B")) is b
    assert explorer.follow_link(Link("B", "A")) is b


def test_snapshot(explorer):
    explorer.hover("A")
    snap = explorer.snapshot()

    assert snap["focus"] == "A"
    assert snap["width"] == 400
    dois = [n["doi"] for n in snap["nodes"]]
    assert dois == sorted(dois)

    by_id = {n["id"]: n for n in snap["nodes"]}
    assert by_id["A"]["opacity"] == 1.0
    assert by_id["D"]["opacity"] == LIGHT_OPACITY
    assert by_id["B"]["radius"] == 50.0
    assert by_id["A"]["label"] == "A"
    assert len(snap["links"]) == 3


def test_render_svg(explorer, tmp_path):
    out = tmp_path / "view.svg"
    svg = explorer.render_svg(output_path=str(out))
    assert svg.count("<circle") == 4
    assert svg.count("<line") == 3
    assert out.read_text(encoding="utf-8") == svg


def test_from_dataset(sample_dataset):
    dataset = parse_dataset(sample_dataset)
    explorer = Explorer.from_dataset(dataset, Settings(layout=LayoutSettings(seed=1)))

    assert len(explorer.nodes) == 4
    assert explorer.index.dropped_links == 1
    assert explorer.filters.selected_archetypes == frozenset({0, 1})


def test_play_and_pause(explorer):
    frames = []

    async def scenario():
        explorer.play(on_frame=lambda: frames.append(explorer.layout.temperature))
        await asyncio.sleep(0.2)
        explorer.pause()

    explorer.animator.interval_s = 0.01
    asyncio.run(scenario())

    assert frames
    assert frames == sorted(frames, reverse=True)
    assert not explorer.animator.is_running
