"""
Count-based shoe used by the Monte Carlo sampler.

A baccarat calculator never needs the identity of individual cards, only how
many of each label are left, so the shoe is a multiset of label counts rather
than a list of Card objects. The sampler reads the counts as an array and
draws from it in bulk.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import numpy as np

from cardweight.common.card import CARD_LABELS, Label, LabelLike, parse_label


class ShoeComposition:
    def __init__(self, counts: Optional[Mapping[Label, int]] = None):
        """
        Initialize a ShoeComposition instance.

        :param counts: Remaining cards per label; labels not listed start at 0
        :raises ValueError: If a count is negative
        """
        self.counts: Dict[Label, int] = {label: 0 for label in CARD_LABELS}
        for label, count in (counts or {}).items():
            if count < 0:
                raise ValueError(f"Negative count for label {label}: {count}")
            self.counts[parse_label(label)] = int(count)

    @classmethod
    def from_decks(cls, per_deck: Mapping[Label, int], num_decks: int) -> "ShoeComposition":
        """
        Build a shoe holding `num_decks` copies of a single-deck composition.

        :raises ValueError: If `num_decks` is less than 1
        """
        if num_decks < 1:
            raise ValueError("Number of decks must be at least 1")
        return cls({label: count * num_decks for label, count in per_deck.items()})

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def copy(self) -> "ShoeComposition":
        return ShoeComposition(self.counts)

    def remove(self, cards: Iterable[LabelLike]) -> "ShoeComposition":
        """
        Take known cards out of the shoe, one per occurrence, never below 0.

        :return: self, for chaining
        """
        for card in cards:
            label = parse_label(card)
            if self.counts[label] > 0:
                self.counts[label] -= 1
        return self

    def as_arrays(self) -> Tuple[List[Label], np.ndarray]:
        """Labels in canonical order and their counts as an int64 array."""
        return list(CARD_LABELS), np.array([self.counts[label] for label in CARD_LABELS], dtype=np.int64)

    def __len__(self) -> int:
        return self.total

    def __repr__(self) -> str:
        counts = ", ".join(f"{label}:{self.counts[label]}" for label in CARD_LABELS)
        return f"ShoeComposition({counts})"
