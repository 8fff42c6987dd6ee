"""Tests for the round history and its rolling recommendation."""

import pytest

from cardweight.common.card import Label, Side
from cardweight.baccarat.history import History
from cardweight.baccarat.scoring import Winner

# Player 8 A, Banker 9 2: score -6 - 1 + 4 + 6 = 3, Player wins
PLAYER_ROUND = (["8", "A"], ["9", "2"])
# Player 0 0 6, Banker 6 6 6: score 1 + 1 - 18 - 18 - 18 - 18 = -70, Banker wins
BANKER_ROUND = (["0", "0", "6"], ["6", "6", "6"])


class TestHistory:
    def test_newest_first_with_sequential_ids(self):
        """Test that records come newest first with increasing ids."""
        history = History()
        first = history.add(*PLAYER_ROUND)
        second = history.add(*BANKER_ROUND)
        assert [record.id for record in history] == [2, 1]
        assert history.latest is second
        assert first.winner is Winner.PLAYER
        assert second.winner is Winner.BANKER
        assert first.player_cards == (Label.EIGHT, Label.ACE)

    def test_limit(self):
        """Test that the oldest records drop past the limit."""
        history = History(limit=3)
        for _ in range(5):
            history.add(*PLAYER_ROUND)
        assert len(history) == 3
        assert [record.id for record in history] == [5, 4, 3]

    def test_rolling_sum_needs_full_window(self):
        """Test that the rolling sum is absent until the window fills."""
        history = History(window=6)
        for _ in range(5):
            record = history.add(*PLAYER_ROUND)
            assert record.rolling_sum is None
            assert record.recommendation is None
        record = history.add(*PLAYER_ROUND)
        assert record.rolling_sum == 18
        assert record.recommendation is Side.BANKER

    def test_rolling_sum_slides(self):
        """Test that the rolling sum covers only the latest window."""
        history = History(window=2)
        history.add(*PLAYER_ROUND)
        record = history.add(*BANKER_ROUND)
        assert record.rolling_sum == 3 - 70
        assert record.recommendation is Side.PLAYER
        record = history.add(*PLAYER_ROUND)
        assert record.rolling_sum == -70 + 3

    def test_weights_used_for_score(self):
        """Test that records are scored with the given weights."""
        history = History()
        record = history.add(["A"] * 2, ["2"] * 2, {"A": 1, "2": 1})
        assert record.score == 4

    def test_counts_and_clear(self):
        """Test winner and recommendation counts, then clearing."""
        history = History(window=1)
        history.add(*PLAYER_ROUND)
        history.add(*BANKER_ROUND)
        history.add(["3", "4"], ["0", "7"])
        counts = history.winner_counts()
        assert counts[Winner.PLAYER] == 1
        assert counts[Winner.BANKER] == 1
        assert counts[Winner.TIE] == 1
        recommendations = history.recommendation_counts()
        assert recommendations[Side.BANKER] == 2
        assert recommendations[Side.PLAYER] == 1
        history.clear()
        assert len(history) == 0
        assert history.latest is None

    def test_to_dict(self):
        """Test record serialization."""
        history = History()
        data = history.add(*PLAYER_ROUND).to_dict()
        assert data["player_cards"] == ["8", "A"]
        assert data["winner"] == "player"
        assert data["recommendation"] is None
        assert "timestamp" in data

    def test_invalid_parameters(self):
        """Test that a non-positive limit or window is rejected."""
        with pytest.raises(ValueError):
            History(limit=0)
