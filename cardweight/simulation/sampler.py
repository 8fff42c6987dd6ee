"""
Monte Carlo estimate of the next round's weighted score.

Every run draws six cards without replacement from its own fresh copy of the
shoe left after removing the current round's cards, and sums their weights.
A score of zero or more counts for Banker, below zero for Player.

Runs are processed in batches. Each batch owns its counts matrix and its own
`numpy.random.Generator`, spawned from a single `SeedSequence`, so batches can
run on worker threads and the result for a given seed does not depend on the
number of workers. Partial sums are merged after every batch has finished.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import numpy as np

from cardweight.common.card import CARD_LABELS, LabelLike
from cardweight.common.shoe import ShoeComposition
from cardweight.baccarat.constants import (
    CARDS_PER_SIMULATED_ROUND,
    COMPOSITION_PER_DECK,
    DEFAULT_DECKS,
    DEFAULT_ITERATIONS,
    DEFAULT_WEIGHTS,
    MAX_DECKS,
    MAX_ITERATIONS,
    MIN_DECKS,
    MIN_ITERATIONS,
    get_weight,
)
from cardweight.simulation.statistics import (
    ConfidenceInterval,
    mean_interval,
    proportion_interval,
)

logger = logging.getLogger("cardweight.simulation")

DEFAULT_BATCH_SIZE = 10_000


class InsufficientShoeError(Exception):
    """Raised when the shoe holds too few cards to deal a full round."""

    def __init__(self, remaining: int, required: int = CARDS_PER_SIMULATED_ROUND):
        self.remaining = remaining
        self.required = required
        super().__init__(
            f"Insufficient shoe: {remaining} cards left, {required} needed. "
            "Add decks or remove fewer cards."
        )


class SimulationCancelled(Exception):
    """Raised when a simulation is cancelled between batches."""

    pass


@dataclass
class SimulationConfig:
    """
    Simulation parameters as the host passes them in.

    Attributes:
        decks: Number of decks in the shoe
        iterations: Number of simulated rounds
        workers: Worker threads used for batches (1 runs inline)
        seed: Optional seed for reproducible results
    """

    decks: int = DEFAULT_DECKS
    iterations: int = DEFAULT_ITERATIONS
    workers: int = 1
    seed: Optional[int] = None

    def clamped(self) -> "SimulationConfig":
        """Copy with decks and iterations forced into their allowed ranges."""
        return SimulationConfig(
            decks=max(MIN_DECKS, min(MAX_DECKS, int(self.decks))),
            iterations=max(MIN_ITERATIONS, min(MAX_ITERATIONS, int(self.iterations))),
            workers=max(1, int(self.workers)),
            seed=self.seed,
        )


@dataclass(frozen=True)
class SimulationResult:
    """Aggregate outcome of a simulation."""

    runs: int
    banker_wins: int
    player_wins: int
    banker_rate: float
    player_rate: float
    avg_score: float
    banker_rate_ci: Optional[ConfidenceInterval] = field(default=None, compare=False)
    avg_score_ci: Optional[ConfidenceInterval] = field(default=None, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary suitable for JSON output."""
        return {
            "runs": self.runs,
            "banker_wins": self.banker_wins,
            "player_wins": self.player_wins,
            "banker_rate": self.banker_rate,
            "player_rate": self.player_rate,
            "avg_score": self.avg_score,
            "banker_rate_ci": self.banker_rate_ci.to_dict() if self.banker_rate_ci else None,
            "avg_score_ci": self.avg_score_ci.to_dict() if self.avg_score_ci else None,
        }


@dataclass
class _BatchTotals:
    runs: int = 0
    banker_wins: int = 0
    score_sum: int = 0
    score_sq_sum: int = 0

    def merge(self, other: "_BatchTotals") -> "_BatchTotals":
        return _BatchTotals(
            self.runs + other.runs,
            self.banker_wins + other.banker_wins,
            self.score_sum + other.score_sum,
            self.score_sq_sum + other.score_sq_sum,
        )


def draw_rounds(
    base_counts: np.ndarray,
    weight_vector: np.ndarray,
    runs: int,
    rng: np.random.Generator,
    cards: int = CARDS_PER_SIMULATED_ROUND,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Draw `runs` independent rounds of `cards` cards without replacement.

    Each row of the counts matrix is a private copy of `base_counts`. For
    every draw a uniform index below the row's remaining total is mapped to
    the label whose cumulative-count bucket contains it; that label's count is
    then decremented so an exhausted label can never be chosen again.

    Args:
        base_counts: Remaining cards per label, shape (labels,)
        weight_vector: Weight per label, same order as `base_counts`
        runs: Number of rounds
        rng: Random source owned by the caller
        cards: Cards per round

    Returns:
        (scores, drawn) where scores has shape (runs,) and drawn holds the
        label index of every card, shape (runs, cards)
    """
    counts = np.tile(base_counts.astype(np.int64), (runs, 1))
    rows = np.arange(runs)
    scores = np.zeros(runs, dtype=np.int64)
    drawn = np.empty((runs, cards), dtype=np.int64)

    for step in range(cards):
        cumulative = counts.cumsum(axis=1)
        totals = cumulative[:, -1]
        index = rng.integers(0, totals)
        chosen = (cumulative <= index[:, None]).sum(axis=1)
        counts[rows, chosen] -= 1
        scores += weight_vector[chosen]
        drawn[:, step] = chosen

    return scores, drawn


def _run_batch(
    base_counts: np.ndarray,
    weight_vector: np.ndarray,
    runs: int,
    seed: np.random.SeedSequence,
    cancel_event: Optional[threading.Event],
) -> _BatchTotals:
    if cancel_event is not None and cancel_event.is_set():
        raise SimulationCancelled("Simulation cancelled")
    rng = np.random.default_rng(seed)
    scores, _ = draw_rounds(base_counts, weight_vector, runs, rng)
    logger.debug("Batch of %d runs finished", runs)
    return _BatchTotals(
        runs=runs,
        banker_wins=int(np.count_nonzero(scores >= 0)),
        score_sum=int(scores.sum()),
        score_sq_sum=int(np.square(scores).sum()),
    )


def _batch_sizes(iterations: int, batch_size: int) -> List[int]:
    full, rest = divmod(iterations, batch_size)
    return [batch_size] * full + ([rest] if rest else [])


def simulate(
    composition_per_deck: Mapping = COMPOSITION_PER_DECK,
    deck_count: int = DEFAULT_DECKS,
    removed_cards: Iterable[LabelLike] = (),
    weights: Optional[Mapping] = None,
    iterations: int = DEFAULT_ITERATIONS,
    *,
    seed: Optional[int] = None,
    workers: int = 1,
    batch_size: int = DEFAULT_BATCH_SIZE,
    cancel_event: Optional[threading.Event] = None,
    confidence: float = 0.95,
) -> SimulationResult:
    """
    Estimate the outcome distribution of a fresh six-card round.

    Deck count and iteration bounds are the caller's job (see
    `SimulationConfig.clamped`); only non-positive values are rejected here.

    Args:
        composition_per_deck: Cards per label in one deck
        deck_count: Number of decks in the shoe
        removed_cards: Cards already known to be out of the shoe
        weights: Weight table (defaults to DEFAULT_WEIGHTS)
        iterations: Number of simulated rounds
        seed: Optional seed for reproducible results
        workers: Worker threads for batches
        batch_size: Runs per batch; cancellation is checked between batches
        cancel_event: Set it to stop the simulation before the next batch
        confidence: Confidence level of the reported intervals

    Returns:
        SimulationResult

    Raises:
        ValueError: If iterations, workers or batch_size is not positive
        InsufficientShoeError: If fewer than six cards remain, including a
            deck_count below 1
        SimulationCancelled: If `cancel_event` was set
    """
    if iterations <= 0:
        raise ValueError(f"iterations must be positive, got {iterations}")
    if workers < 1 or batch_size < 1:
        raise ValueError("workers and batch_size must be positive")

    # A deck count below 1 is an empty shoe, reported as insufficient below.
    shoe = ShoeComposition(
        {label: count * max(deck_count, 0) for label, count in composition_per_deck.items()}
    ).remove(removed_cards)
    if shoe.total < CARDS_PER_SIMULATED_ROUND:
        raise InsufficientShoeError(shoe.total)

    table = DEFAULT_WEIGHTS if weights is None else weights
    _, base_counts = shoe.as_arrays()
    weight_vector = np.array([get_weight(table, label) for label in CARD_LABELS], dtype=np.int64)

    sizes = _batch_sizes(iterations, batch_size)
    seeds = np.random.SeedSequence(seed).spawn(len(sizes))
    logger.debug(
        "Simulating %d runs from a %d-card shoe in %d batches on %d workers",
        iterations,
        shoe.total,
        len(sizes),
        workers,
    )

    if workers == 1:
        partials = [
            _run_batch(base_counts, weight_vector, size, child, cancel_event)
            for size, child in zip(sizes, seeds)
        ]
    else:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(_run_batch, base_counts, weight_vector, size, child, cancel_event)
                for size, child in zip(sizes, seeds)
            ]
            partials = [future.result() for future in futures]

    totals = _BatchTotals()
    for partial in partials:
        totals = totals.merge(partial)

    player_wins = totals.runs - totals.banker_wins
    result = SimulationResult(
        runs=totals.runs,
        banker_wins=totals.banker_wins,
        player_wins=player_wins,
        banker_rate=totals.banker_wins / totals.runs,
        player_rate=player_wins / totals.runs,
        avg_score=totals.score_sum / totals.runs,
        banker_rate_ci=proportion_interval(totals.banker_wins, totals.runs, confidence),
        avg_score_ci=mean_interval(totals.score_sum, totals.score_sq_sum, totals.runs, confidence),
    )
    logger.info(
        "Simulated %d runs: banker %.4f, player %.4f, avg score %.3f",
        result.runs,
        result.banker_rate,
        result.player_rate,
        result.avg_score,
    )
    return result


def simulate_next_round(
    removed_cards: Iterable[LabelLike],
    weights: Optional[Mapping] = None,
    config: Optional[SimulationConfig] = None,
    cancel_event: Optional[threading.Event] = None,
) -> SimulationResult:
    """Run `simulate` on a standard shoe with host-supplied, clamped parameters."""
    config = (config or SimulationConfig()).clamped()
    return simulate(
        COMPOSITION_PER_DECK,
        config.decks,
        removed_cards,
        weights,
        config.iterations,
        seed=config.seed,
        workers=config.workers,
        cancel_event=cancel_event,
    )
