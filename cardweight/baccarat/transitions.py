"""
State transition functions for a baccarat round.

This module provides pure functions for moving a round through its stages,
without modifying the original state objects. The round is an acceptor over
partial card sequences: `next_step` replays the dealt cards in the canonical
order (Player, Banker, Player, Banker, then the third cards) and reports the
first card that breaks the standard drawing rule.

The natural check runs as soon as both hands hold two cards, before any
draw-forcing rule is looked at.
"""

import logging
from dataclasses import replace
from typing import Optional, Sequence

from cardweight.common.card import Label, LabelLike, Side, parse_labels
from cardweight.baccarat.constants import MAX_HAND_CARDS, MAX_ROUND_CARDS, MIN_ROUND_CARDS
from cardweight.baccarat.hand import two_card_total
from cardweight.baccarat.rules import banker_should_draw, player_draws_third_card
from cardweight.baccarat.state import (
    NextStep,
    RoundStage,
    RoundState,
    RoundValidation,
    StepStatus,
    ValidationStatus,
)

logger = logging.getLogger("cardweight.baccarat.transitions")

OUT_OF_ORDER = "Cards out of order: deal Player, Banker, Player, Banker"


class RoundTransitionEngine:
    """
    Pure functions for round state transitions.

    Each method takes a state and returns a new state, without modifying the
    original.
    """

    @staticmethod
    def initial_state() -> RoundState:
        return RoundState()

    @staticmethod
    def invalidate(state: RoundState, message: str) -> RoundState:
        return replace(state, stage=RoundStage.INVALID, message=message)

    @staticmethod
    def apply_card(state: RoundState, side: Side, label: Label) -> RoundState:
        """
        Deal one card to one side.

        Args:
            state: Current round state
            side: Side receiving the card
            label: The card

        Returns:
            New round state; INVALID when the card breaks the deal order or
            the drawing rule
        """
        if state.stage is RoundStage.INVALID:
            return state

        if state.stage is RoundStage.COMPLETE:
            return RoundTransitionEngine.invalidate(
                state, RoundTransitionEngine._extra_card_message(state, side)
            )

        if side is not state.stage.expected_side:
            return RoundTransitionEngine.invalidate(
                state, RoundTransitionEngine._wrong_side_message(state)
            )

        if side is Side.PLAYER:
            dealt = replace(state, player=state.player + (label,))
        else:
            dealt = replace(state, banker=state.banker + (label,))

        return RoundTransitionEngine._advance(dealt)

    @staticmethod
    def _advance(state: RoundState) -> RoundState:
        """Move to the next stage after the expected side received a card."""
        stage = state.stage

        if stage is RoundStage.AWAITING_PLAYER_1:
            return replace(state, stage=RoundStage.AWAITING_BANKER_1, message="Deal Banker's first card")
        if stage is RoundStage.AWAITING_BANKER_1:
            return replace(state, stage=RoundStage.AWAITING_PLAYER_2, message="Deal Player's second card")
        if stage is RoundStage.AWAITING_PLAYER_2:
            return replace(state, stage=RoundStage.AWAITING_BANKER_2, message="Deal Banker's second card")
        if stage is RoundStage.AWAITING_BANKER_2:
            return RoundTransitionEngine._resolve_opening(state)
        if stage is RoundStage.AWAITING_PLAYER_THIRD:
            banker_total = two_card_total(state.banker)
            drawn = replace(state, player_drew=True)
            if banker_should_draw(banker_total, state.player[2]):
                return replace(
                    drawn,
                    stage=RoundStage.AWAITING_BANKER_THIRD,
                    message="Banker must draw a third card",
                )
            return replace(
                drawn,
                stage=RoundStage.COMPLETE,
                message="Banker stands, round over with 5 cards",
            )
        if stage is RoundStage.AWAITING_BANKER_THIRD:
            return replace(
                state,
                stage=RoundStage.COMPLETE,
                message=f"Banker drew, round over with {state.total_cards} cards",
            )
        raise ValueError(f"No transition out of {stage.name}")

    @staticmethod
    def _resolve_opening(state: RoundState) -> RoundState:
        """Apply natural, Player and Banker rules once both hands hold two cards."""
        player_initial = two_card_total(state.player)
        banker_initial = two_card_total(state.banker)

        if player_initial >= 8 or banker_initial >= 8:
            return replace(
                state,
                stage=RoundStage.COMPLETE,
                natural=True,
                message="Natural (8/9), round over",
            )
        if player_draws_third_card(player_initial):
            return replace(
                state,
                stage=RoundStage.AWAITING_PLAYER_THIRD,
                message="Player must draw a third card",
            )
        if banker_initial <= 5:
            return replace(
                state,
                stage=RoundStage.AWAITING_BANKER_THIRD,
                message="Player stands, Banker must draw a third card",
            )
        return replace(
            state,
            stage=RoundStage.COMPLETE,
            message="Both sides stand on 6/7, round over",
        )

    @staticmethod
    def _wrong_side_message(state: RoundState) -> str:
        if state.stage is RoundStage.AWAITING_PLAYER_THIRD:
            return "Player draws on 0-5 and takes the third card before Banker"
        if state.stage is RoundStage.AWAITING_BANKER_THIRD:
            if state.player_drew:
                return f"A hand holds at most {MAX_HAND_CARDS} cards"
            return "Player stands on 6/7 and must not take a third card"
        return OUT_OF_ORDER

    @staticmethod
    def _extra_card_message(state: RoundState, side: Side) -> str:
        if state.natural:
            return "No more cards may be dealt after a natural (8/9)"
        if side is Side.PLAYER:
            if state.player_drew:
                return "Round is already complete"
            return "Player stands on 6/7 and must not take a third card"
        if len(state.banker) == MAX_HAND_CARDS:
            return "Round is already complete"
        if state.player_drew:
            return "Banker must stand against this Player third card"
        return "Banker stands on 6/7 when Player stands"


def replay(player: Sequence[LabelLike], banker: Sequence[LabelLike]) -> RoundState:
    """
    Replay two hands through the state machine.

    Cards are consumed in the canonical deal order. When the side the machine
    expects has nothing left, the next card of the other side (if any) is
    applied and the machine decides whether that is legal.

    Raises:
        ValueError: If a label is not one of the ten card symbols
    """
    player_cards = parse_labels(player)
    banker_cards = parse_labels(banker)

    if len(player_cards) > MAX_HAND_CARDS or len(banker_cards) > MAX_HAND_CARDS:
        return RoundState(
            player=player_cards,
            banker=banker_cards,
            stage=RoundStage.INVALID,
            message=f"A hand holds at most {MAX_HAND_CARDS} cards",
        )

    remaining = {Side.PLAYER: list(player_cards), Side.BANKER: list(banker_cards)}
    state = RoundTransitionEngine.initial_state()

    while state.stage is not RoundStage.INVALID:
        side = state.stage.expected_side
        if side is None or not remaining[side]:
            side = next((s for s in (Side.PLAYER, Side.BANKER) if remaining[s]), None)
        if side is None:
            break
        state = RoundTransitionEngine.apply_card(state, side, remaining[side].pop(0))

    if state.stage is RoundStage.INVALID:
        # Report the hands as given, not the prefix accepted before the violation.
        state = replace(state, player=player_cards, banker=banker_cards)
    return state


def next_step(player: Sequence[LabelLike], banker: Sequence[LabelLike]) -> NextStep:
    """
    Decide what a round needs next.

    Returns:
        NEED_CARD with the side that must receive the next card, COMPLETE when
        the round has reached a terminal shape, or INVALID when the cards break
        the deal order or the drawing rule
    """
    state = replay(player, banker)
    if state.stage is RoundStage.INVALID:
        logger.debug("Round rejected: %s", state.message)
        return NextStep(StepStatus.INVALID, state.message)
    if state.stage is RoundStage.COMPLETE:
        return NextStep(StepStatus.COMPLETE, state.message)
    return NextStep(StepStatus.NEED_CARD, state.message, side=state.stage.expected_side)


def validate_round(player: Sequence[LabelLike], banker: Sequence[LabelLike]) -> RoundValidation:
    """Verdict on a round: INCOMPLETE, INVALID or VALID."""
    step = next_step(player, banker)
    if step.is_invalid:
        return RoundValidation(ValidationStatus.INVALID, step.message)

    total_cards = len(player) + len(banker)
    if step.is_complete:
        if not MIN_ROUND_CARDS <= total_cards <= MAX_ROUND_CARDS:
            return RoundValidation(
                ValidationStatus.INVALID,
                f"A round has {MIN_ROUND_CARDS} to {MAX_ROUND_CARDS} cards",
            )
        return RoundValidation(ValidationStatus.VALID, step.message)

    if total_cards < MIN_ROUND_CARDS:
        return RoundValidation(
            ValidationStatus.INCOMPLETE,
            "Deal the four opening cards first (Player 2, Banker 2)",
        )
    return RoundValidation(ValidationStatus.INCOMPLETE, step.message)


def last_dealt_side(player: Sequence[LabelLike], banker: Sequence[LabelLike]) -> Optional[Side]:
    """
    Identify the side that most recently received a card.

    Within the canonical order a pair of equal-length hands always ends with
    a Banker card, so ties go to Banker.
    """
    if not player and not banker:
        return None
    if len(player) > len(banker):
        return Side.PLAYER
    return Side.BANKER
