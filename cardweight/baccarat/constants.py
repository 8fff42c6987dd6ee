"""Baccarat-specific constants: default weights, shoe composition and bounds."""

from types import MappingProxyType
from typing import Mapping

from cardweight.common.card import Label

# Default card weights. Positive weights lean Banker, negative lean Player.
DEFAULT_WEIGHTS: Mapping[Label, int] = MappingProxyType(
    {
        Label.ZERO: 1,
        Label.ACE: 4,
        Label.TWO: 6,
        Label.THREE: 9,
        Label.FOUR: 19,
        Label.FIVE: -12,
        Label.SIX: -18,
        Label.SEVEN: -12,
        Label.EIGHT: -6,
        Label.NINE: -1,
    }
)

# Cards per label in a single 52-card deck (10, J, Q, K all count as "0").
COMPOSITION_PER_DECK: Mapping[Label, int] = MappingProxyType(
    {
        Label.ZERO: 16,
        Label.ACE: 4,
        Label.TWO: 4,
        Label.THREE: 4,
        Label.FOUR: 4,
        Label.FIVE: 4,
        Label.SIX: 4,
        Label.SEVEN: 4,
        Label.EIGHT: 4,
        Label.NINE: 4,
    }
)

MAX_HAND_CARDS = 3
MIN_ROUND_CARDS = 4
MAX_ROUND_CARDS = 6

# A simulated round always draws the full six cards.
CARDS_PER_SIMULATED_ROUND = 6

MIN_DECKS = 1
MAX_DECKS = 12
DEFAULT_DECKS = 8

MIN_ITERATIONS = 100
MAX_ITERATIONS = 200_000
DEFAULT_ITERATIONS = 20_000

HISTORY_LIMIT = 100
ROLLING_WINDOW = 6

DEFAULT_SETTINGS_KEY = "baccarat:settings:default"


def get_weight(weights: Mapping, label: Label) -> int:
    """Get the weight for a label, treating a missing entry as 0."""
    if label in weights:
        return weights[label]
    return weights.get(label.value, 0)
