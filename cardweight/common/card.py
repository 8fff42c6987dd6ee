"""
This module defines the `Label` enum and the `Side` enum used throughout the calculator.

- `Label`: An enum of the ten card labels a dealer can call out in baccarat.
Tens and face cards share the single label "0" since they all count as zero
points.

- `Side`: An enum of the two hands dealt in a round, Player and Banker.

Labels arrive from the outside world as plain strings. `parse_label` is the
input boundary: anything outside the ten symbols is rejected there so the rule
engine and the sampler never see a malformed label.
"""

from enum import Enum, unique
from typing import Iterable, Tuple, Union


@unique
class Label(Enum):
    """
    Enum for the card labels of a baccarat round.

    >>> Label("A").point
    1
    >>> Label("0").point
    0
    """

    ZERO = "0"
    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"

    @property
    def point(self) -> int:
        """The baccarat point value of the label."""
        if self is Label.ZERO:
            return 0
        if self is Label.ACE:
            return 1
        return int(self.value)

    def __str__(self) -> str:
        return self.value


@unique
class Side(Enum):
    """The two hands of a baccarat round."""

    PLAYER = "player"
    BANKER = "banker"

    def __str__(self) -> str:
        return self.value


# Canonical label order, also the order of the weight editor.
CARD_LABELS: Tuple[Label, ...] = tuple(Label)

LabelLike = Union[Label, str]

_ALIASES = {
    "10": Label.ZERO,
    "T": Label.ZERO,
    "J": Label.ZERO,
    "Q": Label.ZERO,
    "K": Label.ZERO,
    "1": Label.ACE,
}


def parse_label(raw: LabelLike) -> Label:
    """
    Convert a raw card symbol into a Label.

    Ten and face cards may be entered as "10", "T", "J", "Q" or "K" and are
    folded into the "0" label. Aces may be entered as "A" or "1".

    :param raw: A Label or a string symbol
    :return: The matching Label
    :raises ValueError: If the symbol is not a baccarat card label
    """
    if isinstance(raw, Label):
        return raw
    if not isinstance(raw, str):
        raise ValueError(f"Invalid card label: {raw!r}")
    symbol = raw.strip().upper()
    if symbol in _ALIASES:
        return _ALIASES[symbol]
    try:
        return Label(symbol)
    except ValueError:
        raise ValueError(f"Invalid card label: {raw!r}") from None


def parse_labels(raw: Iterable[LabelLike]) -> Tuple[Label, ...]:
    """Convert a sequence of raw symbols into a tuple of Labels."""
    return tuple(parse_label(item) for item in raw)


def point(label: LabelLike) -> int:
    """
    Get the point value of a card label.

    :raises ValueError: If the label is not one of the ten enumerated symbols
    """
    return parse_label(label).point
