"""
Baccarat hand implementation.

In Baccarat, hand values are calculated differently than blackjack:
- Cards 2-9 are worth face value
- 10, J, Q, K (the "0" label) are worth 0
- Aces are worth 1
- Only the rightmost digit of the sum counts (17 = 7, 23 = 3)

The module-level functions work on any sequence of labels so the rule engine
can stay a pure function of two sequences. `BaccaratHand` is the mutable
holder used by the round tracker.
"""

from typing import List, Sequence, Tuple

from cardweight.common.card import Label, LabelLike, parse_label, point
from cardweight.baccarat.constants import MAX_HAND_CARDS


def hand_value(cards: Sequence[LabelLike]) -> int:
    """
    Calculate the baccarat value of any number of cards.

    Returns:
        Hand value (0-9)
    """
    return sum(point(card) for card in cards) % 10


def two_card_total(cards: Sequence[LabelLike]) -> int:
    """
    Calculate the value of the first two cards of a hand.

    Raises:
        ValueError: If the hand has fewer than two cards
    """
    if len(cards) < 2:
        raise ValueError("two_card_total needs at least two cards")
    return (point(cards[0]) + point(cards[1])) % 10


def is_natural(cards: Sequence[LabelLike]) -> bool:
    """Check for a natural: an 8 or 9 on the first two cards."""
    return len(cards) >= 2 and two_card_total(cards) >= 8


class BaccaratHand:
    """Represents one side's hand in a round being entered."""

    def __init__(self, cards: Sequence[LabelLike] = ()):
        """
        Initialize a Baccarat hand.

        Args:
            cards: Optional initial cards, at most three
        """
        self.cards: List[Label] = []
        for card in cards:
            self.add_card(card)

    def add_card(self, card: LabelLike) -> None:
        """
        Add a card to the hand.

        Args:
            card: Card label to add

        Raises:
            ValueError: If the label is malformed or the hand already holds three cards
        """
        label = parse_label(card)
        if len(self.cards) >= MAX_HAND_CARDS:
            raise ValueError(f"A hand holds at most {MAX_HAND_CARDS} cards")
        self.cards.append(label)

    def remove_last(self) -> Label:
        """Remove and return the most recently dealt card."""
        if not self.cards:
            raise IndexError("remove_last from an empty hand")
        return self.cards.pop()

    def clear(self) -> None:
        self.cards.clear()

    @property
    def labels(self) -> Tuple[Label, ...]:
        """An immutable snapshot of the cards."""
        return tuple(self.cards)

    def value(self) -> int:
        """
        Calculate the value of the hand.

        Returns:
            Hand value (0-9)
        """
        return hand_value(self.cards)

    def is_natural(self) -> bool:
        return len(self.cards) == 2 and is_natural(self.cards)

    def card_count(self) -> int:
        return len(self.cards)

    def third_card_value(self) -> int:
        """
        Get the point value of the third card (used for Banker drawing rules).

        Returns:
            Point value of the third card, or -1 if no third card
        """
        if len(self.cards) >= 3:
            return self.cards[2].point
        return -1

    def __len__(self) -> int:
        return len(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        return f"[{cards_str}] = {self.value()}"

    def __repr__(self) -> str:
        return f"BaccaratHand(cards={[str(c) for c in self.cards]}, value={self.value()})"
