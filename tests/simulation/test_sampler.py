"""
Tests for the Monte Carlo shoe sampler.

Tests cover:
- Outcome partition and score bounds
- Insufficient shoe and argument errors
- Sampling without replacement and fresh shoes per run
- Reproducibility across worker counts
- Cancellation
"""

import threading

import numpy as np
import pytest
from scipy import stats

from cardweight.common.card import CARD_LABELS, Label
from cardweight.common.shoe import ShoeComposition
from cardweight.baccarat.constants import COMPOSITION_PER_DECK, DEFAULT_WEIGHTS
from cardweight.simulation.sampler import (
    InsufficientShoeError,
    SimulationCancelled,
    SimulationConfig,
    draw_rounds,
    simulate,
    simulate_next_round,
)
from cardweight.simulation.statistics import score_range


class TestSimulate:
    def test_rates_partition_outcomes(self):
        """Test that Banker and Player rates sum to one."""
        result = simulate(COMPOSITION_PER_DECK, 1, [], DEFAULT_WEIGHTS, 1000, seed=42)
        assert result.runs == 1000
        assert result.banker_wins + result.player_wins == 1000
        assert result.banker_rate + result.player_rate == pytest.approx(1.0, abs=1e-12)
        assert 0.0 <= result.banker_rate <= 1.0

    def test_avg_score_within_theoretical_range(self):
        """Test that the average score lies inside the possible range."""
        shoe = ShoeComposition.from_decks(COMPOSITION_PER_DECK, 1)
        low, high = score_range(shoe, DEFAULT_WEIGHTS)
        result = simulate(COMPOSITION_PER_DECK, 1, [], DEFAULT_WEIGHTS, 1000, seed=1)
        assert low <= result.avg_score <= high

    def test_confidence_intervals(self):
        """Test that the intervals contain their estimates."""
        result = simulate(COMPOSITION_PER_DECK, 8, [], DEFAULT_WEIGHTS, 5000, seed=5)
        assert result.banker_rate_ci.contains(result.banker_rate)
        assert result.avg_score_ci.contains(result.avg_score)

    def test_insufficient_shoe(self):
        """Test that fewer than six cards left raises InsufficientShoeError."""
        removed = ["0"] * 16 + [label for label in "A2345678" for _ in range(4)] + ["9", "9"]
        with pytest.raises(InsufficientShoeError) as exc_info:
            simulate(COMPOSITION_PER_DECK, 1, removed, DEFAULT_WEIGHTS, 100)
        assert exc_info.value.remaining == 2
        assert exc_info.value.required == 6

    def test_zero_decks_is_insufficient(self):
        """Test that a zero-deck shoe fails as an insufficient shoe, not a bad argument."""
        with pytest.raises(InsufficientShoeError) as exc_info:
            simulate(COMPOSITION_PER_DECK, 0, [], DEFAULT_WEIGHTS, 100)
        assert exc_info.value.remaining == 0
        assert exc_info.value.required == 6

    def test_exactly_six_cards_left(self):
        """All six remaining cards are drawn every run, so every score is identical."""
        composition = {Label.ACE: 3, Label.FIVE: 3}
        result = simulate(composition, 1, [], DEFAULT_WEIGHTS, 200, seed=0)
        assert result.avg_score == 3 * 4 + 3 * -12
        assert result.player_rate == 1.0

    @pytest.mark.parametrize("iterations", [0, -5])
    def test_non_positive_iterations(self, iterations):
        """Test that non-positive iterations are rejected."""
        with pytest.raises(ValueError):
            simulate(COMPOSITION_PER_DECK, 1, [], DEFAULT_WEIGHTS, iterations)

    def test_removed_cards_change_the_shoe(self):
        """With every positive-weight card gone, Player always wins."""
        composition = {Label.FOUR: 2, Label.SIX: 10}
        result = simulate(composition, 1, ["4", "4"], DEFAULT_WEIGHTS, 300, seed=2)
        assert result.player_rate == 1.0
        assert result.avg_score == 6 * -18

    def test_zero_score_counts_for_banker(self):
        """Test that a zero score counts as a Banker win."""
        result = simulate({Label.ZERO: 10}, 1, [], {Label.ZERO: 0}, 100, seed=9)
        assert result.banker_rate == 1.0
        assert result.avg_score == 0

    def test_missing_weights_count_as_zero(self):
        """Test that labels missing from the weights score 0."""
        result = simulate(COMPOSITION_PER_DECK, 1, [], {}, 100, seed=9)
        assert result.avg_score == 0
        assert result.banker_rate == 1.0


class TestReproducibility:
    def test_same_seed_same_result(self):
        """Test that a seed reproduces the result."""
        first = simulate(COMPOSITION_PER_DECK, 6, ["A"], DEFAULT_WEIGHTS, 2000, seed=123)
        second = simulate(COMPOSITION_PER_DECK, 6, ["A"], DEFAULT_WEIGHTS, 2000, seed=123)
        assert first == second

    def test_workers_do_not_change_result(self):
        """Test that the worker count does not change a seeded result."""
        kwargs = dict(seed=99, batch_size=500)
        single = simulate(COMPOSITION_PER_DECK, 8, [], DEFAULT_WEIGHTS, 3000, workers=1, **kwargs)
        threaded = simulate(COMPOSITION_PER_DECK, 8, [], DEFAULT_WEIGHTS, 3000, workers=4, **kwargs)
        assert single == threaded

    def test_uneven_batches(self):
        """Test iterations that do not divide into whole batches."""
        result = simulate(COMPOSITION_PER_DECK, 1, [], DEFAULT_WEIGHTS, 1234, seed=4, batch_size=500)
        assert result.runs == 1234


class TestDrawRounds:
    def test_never_exceeds_label_counts(self):
        """Each run is a fresh copy: no label is drawn more often than the shoe holds it."""
        base = np.array([1, 0, 2, 0, 0, 0, 0, 0, 0, 3], dtype=np.int64)
        weights = np.zeros(10, dtype=np.int64)
        rng = np.random.default_rng(0)
        _, drawn = draw_rounds(base, weights, 2000, rng)
        for row in drawn:
            counts = np.bincount(row, minlength=10)
            assert np.array_equal(counts, base)

    def test_exhausted_label_never_selected(self):
        """Test that a label with no cards left is never drawn."""
        base = np.array([0, 1, 0, 0, 0, 0, 0, 0, 0, 10], dtype=np.int64)
        rng = np.random.default_rng(1)
        _, drawn = draw_rounds(base, np.zeros(10, dtype=np.int64), 1000, rng)
        assert (drawn == 0).sum() == 0
        assert ((drawn == 1).sum(axis=1) <= 1).all()

    def test_scores_are_weight_sums(self):
        """Test that round scores are the sum of card weights."""
        base = np.array([4, 4, 4, 4, 4, 4, 4, 4, 4, 4], dtype=np.int64)
        weights = np.arange(10, dtype=np.int64)
        rng = np.random.default_rng(2)
        scores, drawn = draw_rounds(base, weights, 100, rng)
        assert np.array_equal(scores, weights[drawn].sum(axis=1))

    def test_first_card_distribution_matches_composition(self):
        """Test that first cards follow the shoe composition."""
        base = np.array([COMPOSITION_PER_DECK[label] for label in CARD_LABELS], dtype=np.int64)
        rng = np.random.default_rng(3)
        runs = 20000
        _, drawn = draw_rounds(base, np.zeros(10, dtype=np.int64), runs, rng)
        observed = np.bincount(drawn[:, 0], minlength=10)
        expected = base / base.sum() * runs
        _, p_value = stats.chisquare(observed, expected)
        assert p_value > 0.001


class TestCancellation:
    def test_cancelled_before_start(self):
        """Test that a set event cancels the simulation."""
        event = threading.Event()
        event.set()
        with pytest.raises(SimulationCancelled):
            simulate(COMPOSITION_PER_DECK, 1, [], DEFAULT_WEIGHTS, 1000, cancel_event=event)

    def test_unset_event_runs(self):
        """Test that an unset event lets the simulation run."""
        result = simulate(COMPOSITION_PER_DECK, 1, [], DEFAULT_WEIGHTS, 100, cancel_event=threading.Event())
        assert result.runs == 100


class TestSimulateNextRound:
    def test_config_is_clamped(self):
        """Test that simulate_next_round clamps its config."""
        result = simulate_next_round([], config=SimulationConfig(decks=50, iterations=10, seed=1))
        assert result.runs == 100

    def test_clamped(self):
        """Test SimulationConfig.clamped bounds."""
        config = SimulationConfig(decks=0, iterations=10**7, workers=0).clamped()
        assert (config.decks, config.iterations, config.workers) == (1, 200000, 1)
