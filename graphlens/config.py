"""Configuration loading for graphlens.

Settings are pydantic models loaded from an optional YAML file. Invalid
values never abort a visualization: they fall back to the defaults with a
warning.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

logger = logging.getLogger(__name__)

WeightSetName = Literal["balanced", "filter_driven"]

# alpha, beta, gamma
WEIGHT_SETS: Dict[str, Tuple[float, float, float]] = {
    "balanced": (0.3, 0.3, 0.4),
    "filter_driven": (0.3, 0.5, 0.2),
}


class LayoutSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    width: float = 960.0
    height: float = 720.0
    iterations: int = 50
    k: Optional[float] = None  # optimal pairwise distance
    temperature: Optional[float] = None  # initial max displacement
    cooling_factor: float = 0.95
    centering_strength: float = 0.1
    root_repulsion_multiplier: float = 4.0
    isolated_root_repulsion_multiplier: float = 0.1
    settle_temperature: float = 0.5
    clamp_to_viewport: bool = False
    seed: Optional[int] = None

    @model_validator(mode="after")
    def _safe_fallbacks(self) -> "LayoutSettings":
        defaults = LayoutSettings.model_construct()
        if not self.width > 0:
            logger.warning("Invalid layout width %r, using %s", self.width, defaults.width)
            self.width = defaults.width
        if not self.height > 0:
            logger.warning("Invalid layout height %r, using %s", self.height, defaults.height)
            self.height = defaults.height
        if self.iterations < 0:
            self.iterations = 0
        if self.k is not None and not self.k > 0:
            logger.warning("Invalid k %r, deriving from viewport", self.k)
            self.k = None
        if self.temperature is not None and not self.temperature > 0:
            logger.warning("Invalid temperature %r, using width/4", self.temperature)
            self.temperature = None
        if not 0 < self.cooling_factor < 1:
            logger.warning("Invalid cooling factor %r, using %s", self.cooling_factor, defaults.cooling_factor)
            self.cooling_factor = defaults.cooling_factor
        if self.centering_strength < 0:
            self.centering_strength = defaults.centering_strength
        if self.root_repulsion_multiplier < 0:
            self.root_repulsion_multiplier = defaults.root_repulsion_multiplier
        if self.isolated_root_repulsion_multiplier < 0:
            self.isolated_root_repulsion_multiplier = defaults.isolated_root_repulsion_multiplier
        return self

    @property
    def center(self) -> Tuple[float, float]:
        return (self.width / 2, self.height / 2)


class InterestSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    weight_set: WeightSetName = "balanced"
    alpha: Optional[float] = None
    beta: Optional[float] = None
    gamma: Optional[float] = None
    search_weight: float = 0.4
    archetype_weight: float = 0.4
    date_weight: float = 0.2
    neutral_focus: float = 0.5
    max_hops: int = 5

    @model_validator(mode="after")
    def _safe_fallbacks(self) -> "InterestSettings":
        a, b, g = self.weights()
        if min(a, b, g) < 0 or a + b + g <= 0:
            logger.warning("Invalid DOI weights %r, using the %s set", (a, b, g), self.weight_set)
            self.alpha = self.beta = self.gamma = None
        subs = (self.search_weight, self.archetype_weight, self.date_weight)
        if min(subs) < 0 or sum(subs) <= 0:
            logger.warning("Invalid user-interest weights %r, using defaults", subs)
            self.search_weight, self.archetype_weight, self.date_weight = 0.4, 0.4, 0.2
        if not 0 <= self.neutral_focus <= 1:
            self.neutral_focus = 0.5
        if self.max_hops < 1:
            self.max_hops = 5
        return self

    def weights(self) -> Tuple[float, float, float]:
        """Resolved (alpha, beta, gamma): explicit overrides win over the named set."""
        a, b, g = WEIGHT_SETS[self.weight_set]
        return (
            a if self.alpha is None else self.alpha,
            b if self.beta is None else self.beta,
            g if self.gamma is None else self.gamma,
        )


class AnimationSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    interval_ms: int = Field(default=50, description="Fixed tick interval; no delta-time compensation")

    @model_validator(mode="after")
    def _safe_fallbacks(self) -> "AnimationSettings":
        if self.interval_ms <= 0:
            self.interval_ms = 50
        return self

    @property
    def interval_s(self) -> float:
        return self.interval_ms / 1000.0


class FilterDefaults(BaseModel):
    """Initial filter state; every archetype is selected when none are listed."""

    model_config = ConfigDict(extra="ignore")

    date_min: str = "1910-01-01"
    date_max: str = "2024-01-01"
    selected_archetypes: Optional[List[int]] = None

    def date_bounds_ms(self) -> Tuple[int, int]:
        return _iso_to_ms(self.date_min, -1893456000000), _iso_to_ms(self.date_max, 1704067200000)


class DatasetSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    begin_keys: List[str] = Field(default_factory=lambda: ["1", "begin", "start"])
    end_keys: List[str] = Field(default_factory=lambda: ["2", "end"])
    timestamp_keys: List[str] = Field(default_factory=lambda: ["timestamp", "date"])
    label_keys: List[str] = Field(default_factory=lambda: ["3", "label"])
    weight_key: str = "weight"


class Settings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    layout: LayoutSettings = Field(default_factory=LayoutSettings)
    interest: InterestSettings = Field(default_factory=InterestSettings)
    animation: AnimationSettings = Field(default_factory=AnimationSettings)
    filters: FilterDefaults = Field(default_factory=FilterDefaults)
    dataset: DatasetSettings = Field(default_factory=DatasetSettings)


def _iso_to_ms(value: str, fallback: int) -> int:
    try:
        dt = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        logger.warning("Invalid date %r, using fallback", value)
        return fallback
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def load_config(config_path: Optional[Path] = None) -> Settings:
    """Load settings from YAML. Falls back to defaults if the file is missing or invalid."""
    if config_path is None:
        return Settings()

    path = Path(config_path)
    if not path.exists():
        logger.info("Config file %s not found, using defaults", path)
        return Settings()

    try:
        raw: Dict[str, Any] = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        logger.warning("Config file %s is not valid YAML (%s), using defaults", path, e)
        return Settings()
    if not isinstance(raw, dict):
        logger.warning("Config file %s is not a mapping, using defaults", path)
        return Settings()
    try:
        return Settings(**raw)
    except ValidationError as e:
        logger.warning("Invalid settings in %s, using defaults: %s", path, e)
        return Settings()
