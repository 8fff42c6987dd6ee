"""
Weights and simulation settings.

Settings arrive as loosely-typed dictionaries (a JSON file, a stored blob).
The parsers here never fail: anything unusable falls back to its default and
numbers are truncated to integers and clamped into range.
"""

import datetime
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from cardweight.common.card import CARD_LABELS, Label
from cardweight.baccarat.constants import (
    DEFAULT_DECKS,
    DEFAULT_ITERATIONS,
    DEFAULT_WEIGHTS,
    MAX_DECKS,
    MAX_ITERATIONS,
    MIN_DECKS,
    MIN_ITERATIONS,
)
from cardweight.simulation.sampler import SimulationConfig


def _number(raw: Any) -> Optional[float]:
    """Return `raw` if it is a finite real number (bools excluded), else None."""
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    if not math.isfinite(raw):
        return None
    return raw


def parse_weights(raw: Any) -> Dict[Label, int]:
    """
    Build a full weight table from a mapping keyed by label string.

    Every label starts at its default; a finite number for a label replaces
    it, truncated toward zero.
    """
    weights = dict(DEFAULT_WEIGHTS)
    if not isinstance(raw, Mapping):
        return weights
    for label in CARD_LABELS:
        value = _number(raw.get(label.value, raw.get(label)))
        if value is not None:
            weights[label] = int(value)
    return weights


def _bounded(raw: Any, default: int, low: int, high: int) -> int:
    """
    Truncate `raw` toward zero and clamp it into [low, high].

    Infinities clamp to the nearest bound; NaN and non-numbers give `default`.
    """
    value = default
    if not isinstance(raw, bool) and isinstance(raw, (int, float)) and not math.isnan(raw):
        if math.isinf(raw):
            value = high if raw > 0 else low
        else:
            value = int(raw)
    return max(low, min(high, value))


def parse_simulation(raw: Any) -> SimulationConfig:
    """Read deck count and iterations, truncated and clamped to their bounds."""
    data = raw if isinstance(raw, Mapping) else {}
    return SimulationConfig(
        decks=_bounded(data.get("decks"), DEFAULT_DECKS, MIN_DECKS, MAX_DECKS),
        iterations=_bounded(
            data.get("iterations"), DEFAULT_ITERATIONS, MIN_ITERATIONS, MAX_ITERATIONS
        ),
    )


def weights_to_dict(weights: Mapping[Label, int]) -> Dict[str, int]:
    return {label.value: int(weights.get(label, 0)) for label in CARD_LABELS}


def utc_now() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


@dataclass
class Settings:
    """
    Weight table plus simulation parameters, as persisted.

    Attributes:
        weights: Weight per label
        simulation: Deck count and iterations
        updated_at: ISO-8601 time of the last save
    """

    weights: Dict[Label, int] = field(default_factory=lambda: dict(DEFAULT_WEIGHTS))
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    updated_at: str = field(default_factory=utc_now)

    @classmethod
    def from_dict(cls, data: Any) -> "Settings":
        data = data if isinstance(data, Mapping) else {}
        updated_at = data.get("updated_at")
        return cls(
            weights=parse_weights(data.get("weights")),
            simulation=parse_simulation(data.get("simulation")),
            updated_at=updated_at if isinstance(updated_at, str) else utc_now(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weights": weights_to_dict(self.weights),
            "simulation": {
                "decks": self.simulation.decks,
                "iterations": self.simulation.iterations,
            },
            "updated_at": self.updated_at,
        }
