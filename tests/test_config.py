"""Tests for settings loading and fallbacks."""

import pytest

from graphlens.config import (
    AnimationSettings,
    FilterDefaults,
    InterestSettings,
    LayoutSettings,
    Settings,
    load_config,
)


def test_defaults():
    settings = Settings()
    assert settings.layout.width == 960
    assert settings.layout.cooling_factor == 0.95
    assert settings.interest.weights() == (0.3, 0.3, 0.4)
    assert settings.animation.interval_s == pytest.approx(0.05)


def test_load_config_missing_file(tmp_path):
    settings = load_config(tmp_path / "nope.yaml")
    assert settings == Settings()


def test_load_config_none():
    assert load_config() == Settings()


def test_load_config_yaml(tmp_path):
    path = tmp_path / "graphlens.yaml"
    path.write_text(
        """
layout:
  width: 400
  height: 300
  seed: 9
interest:
  weight_set: filter_driven
animation:
  interval_ms: 20
filters:
  selected_archetypes: [0, 2]
unknown_section: ignored
""",
        encoding="utf-8",
    )
    settings = load_config(path)

    assert settings.layout.width == 400
    assert settings.layout.center == (200, 150)
    assert settings.layout.seed == 9
    assert settings.interest.weights() == (0.3, 0.5, 0.2)
    assert settings.animation.interval_s == pytest.approx(0.02)
    assert settings.filters.selected_archetypes == [0, 2]


def test_load_config_non_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    assert load_config(path) == Settings()


def test_layout_invalid_values_fall_back():
    settings = LayoutSettings(width=-5, height=0, k=-1, temperature=0, cooling_factor=1.5, iterations=-3)
    assert settings.width == 960
    assert settings.height == 720
    assert settings.k is None
    assert settings.temperature is None
    assert settings.cooling_factor == 0.95
    assert settings.iterations == 0


def test_interest_invalid_weights_fall_back():
    settings = InterestSettings(alpha=-1.0, search_weight=-0.4, neutral_focus=2.0, max_hops=0)
    assert settings.weights() == (0.3, 0.3, 0.4)
    assert (settings.search_weight, settings.archetype_weight, settings.date_weight) == (0.4, 0.4, 0.2)
    assert settings.neutral_focus == 0.5
    assert settings.max_hops == 5


def test_interest_override_wins_over_weight_set():
    settings = InterestSettings(weight_set="filter_driven", gamma=0.0)
    assert settings.weights() == (0.3, 0.5, 0.0)


def test_animation_invalid_interval():
    assert AnimationSettings(interval_ms=0).interval_ms == 50


def test_filter_date_bounds():
    lo, hi = FilterDefaults().date_bounds_ms()
    assert lo == -1893456000000
    assert hi == 1704067200000

    lo, hi = FilterDefaults(date_min="garbage").date_bounds_ms()
    assert lo == -1893456000000


def test_cooling_factor_of_one_falls_back():
    assert LayoutSettings(cooling_factor=1.0).cooling_factor == 0.95


def test_load_config_wrong_type_falls_back(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("layout:\n  width: wide\n", encoding="utf-8")
    assert load_config(path) == Settings()


def test_load_config_invalid_yaml_falls_back(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("layout: [unclosed\n", encoding="utf-8")
    assert load_config(path) == Settings()
