"""
Baccarat card-weight calculator.

This package validates manually entered baccarat rounds against the standard
drawing rules, scores them with a card weight table and keeps a history of
finished rounds.
"""

from cardweight.baccarat.game import RoundError, RoundTracker
from cardweight.baccarat.hand import BaccaratHand, hand_value, two_card_total
from cardweight.baccarat.history import History, RoundRecord
from cardweight.baccarat.rules import banker_should_draw, player_draws_third_card
from cardweight.baccarat.scoring import Winner, recommend, round_winner, score
from cardweight.baccarat.state import (
    NextStep,
    RoundStage,
    RoundState,
    RoundValidation,
    StepStatus,
    ValidationStatus,
)
from cardweight.baccarat.transitions import last_dealt_side, next_step, validate_round

__all__ = [
    "BaccaratHand",
    "History",
    "NextStep",
    "RoundError",
    "RoundRecord",
    "RoundStage",
    "RoundState",
    "RoundTracker",
    "RoundValidation",
    "StepStatus",
    "ValidationStatus",
    "Winner",
    "banker_should_draw",
    "hand_value",
    "last_dealt_side",
    "next_step",
    "player_draws_third_card",
    "recommend",
    "round_winner",
    "score",
    "two_card_total",
    "validate_round",
]
