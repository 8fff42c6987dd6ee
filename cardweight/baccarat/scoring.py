"""
Weighted scoring of dealt cards.

The weight table is always passed in by the caller and never mutated here.
A label missing from the table weighs 0.
"""

from enum import Enum
from typing import Iterable, Mapping, Optional, Sequence

from cardweight.common.card import LabelLike, Side, parse_label
from cardweight.baccarat.constants import DEFAULT_WEIGHTS, get_weight
from cardweight.baccarat.hand import hand_value


class Winner(Enum):
    """Outcome of a completed round."""

    PLAYER = "player"
    BANKER = "banker"
    TIE = "tie"

    def __str__(self) -> str:
        return self.value


def score(cards: Iterable[LabelLike], weights: Optional[Mapping] = None) -> int:
    """
    Sum the weights of a set of cards.

    Args:
        cards: Card labels from either or both hands
        weights: Weight table keyed by Label or label string (defaults to DEFAULT_WEIGHTS)

    Returns:
        Integer score; positive leans Banker
    """
    table = DEFAULT_WEIGHTS if weights is None else weights
    return sum(get_weight(table, parse_label(card)) for card in cards)


def recommend(total: float) -> Side:
    """Banker on a score of zero or more, Player otherwise."""
    return Side.BANKER if total >= 0 else Side.PLAYER


def round_winner(player: Sequence[LabelLike], banker: Sequence[LabelLike]) -> Winner:
    """
    Determine the winner of a completed round from the final hand values.

    Returns:
        Winner enum value
    """
    player_value = hand_value(player)
    banker_value = hand_value(banker)

    if player_value > banker_value:
        return Winner.PLAYER
    elif banker_value > player_value:
        return Winner.BANKER
    else:
        return Winner.TIE
