"""
Immutable state models for a baccarat round.

A round's state is never stored on its own: it is derived from the two hands
by replaying the dealt cards through the pure transition functions in
`cardweight.baccarat.transitions`. These dataclasses are what that replay
produces and what callers (the round tracker, the CLI) consume.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple

from cardweight.common.card import Label, Side


class RoundStage(Enum):
    """Stages of the round state machine."""

    AWAITING_PLAYER_1 = auto()
    AWAITING_BANKER_1 = auto()
    AWAITING_PLAYER_2 = auto()
    AWAITING_BANKER_2 = auto()
    AWAITING_PLAYER_THIRD = auto()
    AWAITING_BANKER_THIRD = auto()
    COMPLETE = auto()
    INVALID = auto()

    @property
    def expected_side(self) -> Optional[Side]:
        """The side allowed to receive the next card, or None in a terminal stage."""
        return _EXPECTED_SIDE.get(self)


_EXPECTED_SIDE = {
    RoundStage.AWAITING_PLAYER_1: Side.PLAYER,
    RoundStage.AWAITING_BANKER_1: Side.BANKER,
    RoundStage.AWAITING_PLAYER_2: Side.PLAYER,
    RoundStage.AWAITING_BANKER_2: Side.BANKER,
    RoundStage.AWAITING_PLAYER_THIRD: Side.PLAYER,
    RoundStage.AWAITING_BANKER_THIRD: Side.BANKER,
}


@dataclass(frozen=True)
class RoundState:
    """
    Immutable representation of a round part-way through the deal.

    Attributes:
        player: Cards dealt to Player so far
        banker: Cards dealt to Banker so far
        stage: Current stage of the state machine
        message: Prompt or verdict describing the stage
        natural: Whether either opening hand is a natural
        player_drew: Whether Player has taken a third card
    """

    player: Tuple[Label, ...] = ()
    banker: Tuple[Label, ...] = ()
    stage: RoundStage = RoundStage.AWAITING_PLAYER_1
    message: str = "Deal Player's first card"
    natural: bool = False
    player_drew: bool = False

    @property
    def total_cards(self) -> int:
        return len(self.player) + len(self.banker)


class StepStatus(Enum):
    """Result kinds of `next_step`."""

    NEED_CARD = "need_card"
    COMPLETE = "complete"
    INVALID = "invalid"


@dataclass(frozen=True)
class NextStep:
    """
    What the round needs next.

    `side` is set only when `status` is NEED_CARD.
    """

    status: StepStatus
    message: str
    side: Optional[Side] = None

    @property
    def needs_card(self) -> bool:
        return self.status is StepStatus.NEED_CARD

    @property
    def is_complete(self) -> bool:
        return self.status is StepStatus.COMPLETE

    @property
    def is_invalid(self) -> bool:
        return self.status is StepStatus.INVALID


class ValidationStatus(Enum):
    """Result kinds of `validate_round`."""

    INCOMPLETE = "incomplete"
    INVALID = "invalid"
    VALID = "valid"


@dataclass(frozen=True)
class RoundValidation:
    """Verdict on a round, used to gate scoring and submission."""

    status: ValidationStatus
    message: str

    @property
    def is_valid(self) -> bool:
        return self.status is ValidationStatus.VALID
