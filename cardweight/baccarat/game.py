"""
Baccarat round tracker.

Holds the two hands of the round being entered, drives the round state
machine as cards come in, and hands finished rounds to the history.
"""

import logging
from typing import Mapping, Optional, Tuple

from cardweight.common.card import Label, LabelLike, Side, parse_label
from cardweight.baccarat.constants import DEFAULT_WEIGHTS
from cardweight.baccarat.hand import BaccaratHand
from cardweight.baccarat.history import History, RoundRecord
from cardweight.baccarat.scoring import Winner, recommend, round_winner, score
from cardweight.baccarat.state import NextStep, RoundValidation
from cardweight.baccarat.transitions import last_dealt_side, next_step, validate_round

logger = logging.getLogger("cardweight.baccarat.game")


class RoundError(Exception):
    """Raised when a tracker operation is not allowed in the current round state."""

    pass


class RoundTracker:
    """
    Manual entry of a baccarat round.

    Cards are fed one at a time. `deal` follows the state machine and puts
    the card on the side that needs it; `deal_to` lets the caller pick the
    side, which may leave the round in an invalid state for the caller to
    undo or reset.
    """

    def __init__(self, weights: Optional[Mapping] = None, history: Optional[History] = None):
        """
        Initialize a round tracker.

        Args:
            weights: Weight table used for scoring (defaults to DEFAULT_WEIGHTS)
            history: History receiving submitted rounds (a new one if not provided)
        """
        self.weights = dict(DEFAULT_WEIGHTS if weights is None else weights)
        self.history = history if history is not None else History()
        self.player_hand = BaccaratHand()
        self.banker_hand = BaccaratHand()

    @property
    def player_cards(self) -> Tuple[Label, ...]:
        return self.player_hand.labels

    @property
    def banker_cards(self) -> Tuple[Label, ...]:
        return self.banker_hand.labels

    @property
    def cards(self) -> Tuple[Label, ...]:
        return self.player_cards + self.banker_cards

    def next_step(self) -> NextStep:
        return next_step(self.player_cards, self.banker_cards)

    @property
    def status(self) -> RoundValidation:
        return validate_round(self.player_cards, self.banker_cards)

    def deal(self, card: LabelLike) -> Side:
        """
        Deal a card to the side the drawing rules call for.

        Returns:
            The side that received the card

        Raises:
            RoundError: If the round is complete or invalid
            ValueError: If the label is malformed
        """
        label = parse_label(card)
        step = self.next_step()
        if not step.needs_card:
            raise RoundError(f"Cannot deal {label}: {step.message}")
        self._hand(step.side).add_card(label)
        logger.debug("Dealt %s to %s", label, step.side)
        return step.side

    def deal_to(self, side: Side, card: LabelLike) -> RoundValidation:
        """
        Deal a card to an explicit side.

        Returns:
            The validation of the round after the card

        Raises:
            RoundError: If that hand already holds three cards
        """
        label = parse_label(card)
        hand = self._hand(side)
        if hand.card_count() >= 3:
            raise RoundError(f"{side} already holds three cards")
        hand.add_card(label)
        return self.status

    def undo(self) -> Label:
        """
        Remove the most recently dealt card.

        Raises:
            RoundError: If no card has been dealt
        """
        side = last_dealt_side(self.player_cards, self.banker_cards)
        if side is None:
            raise RoundError("Nothing to undo")
        return self._hand(side).remove_last()

    def reset(self) -> None:
        self.player_hand.clear()
        self.banker_hand.clear()

    def set_weights(self, weights: Mapping) -> None:
        self.weights = dict(weights)

    @property
    def score(self) -> int:
        return score(self.cards, self.weights)

    @property
    def recommendation(self) -> Optional[Side]:
        """Suggested side for the cards entered so far, None with no cards."""
        if not self.cards:
            return None
        return recommend(self.score)

    @property
    def winner(self) -> Optional[Winner]:
        """Winner of the round once it is valid."""
        if not self.status.is_valid:
            return None
        return round_winner(self.player_cards, self.banker_cards)

    def submit(self) -> RoundRecord:
        """
        Record the finished round in the history and start a new one.

        Raises:
            RoundError: If the round is not valid yet
        """
        status = self.status
        if not status.is_valid:
            raise RoundError(f"Cannot submit round: {status.message}")
        record = self.history.add(self.player_cards, self.banker_cards, self.weights)
        logger.info("Recorded round #%d: %s, score %+d", record.id, record.winner, record.score)
        self.reset()
        return record

    def _hand(self, side: Side) -> BaccaratHand:
        return self.player_hand if side is Side.PLAYER else self.banker_hand

    def __str__(self) -> str:
        return f"Player {self.player_hand} | Banker {self.banker_hand}"

    def __repr__(self) -> str:
        return f"RoundTracker(player={self.player_hand!r}, banker={self.banker_hand!r})"
