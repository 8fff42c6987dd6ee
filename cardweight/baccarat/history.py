"""
In-memory history of submitted rounds.

Records are kept newest first and capped at a fixed number. Each record
carries the rolling sum of the most recent scores, which is what the
"next round" recommendation is based on.
"""

import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from cardweight.common.card import Label, LabelLike, Side, parse_labels
from cardweight.baccarat.constants import HISTORY_LIMIT, ROLLING_WINDOW
from cardweight.baccarat.scoring import Winner, recommend, round_winner, score


@dataclass(frozen=True)
class RoundRecord:
    """
    A completed round as stored in the history.

    Attributes:
        id: Sequential record number, starting at 1
        player_cards: Player's cards
        banker_cards: Banker's cards
        winner: Winner of the round
        score: Weighted score of all six-or-fewer cards
        rolling_sum: Sum of the last `window` scores including this one, or
            None while fewer records exist
        recommendation: Side suggested for the next round, or None when
            there is no rolling sum yet
        timestamp: When the round was recorded
    """

    id: int
    player_cards: Tuple[Label, ...]
    banker_cards: Tuple[Label, ...]
    winner: Winner
    score: int
    rolling_sum: Optional[int] = None
    recommendation: Optional[Side] = None
    timestamp: datetime.datetime = field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc)
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "player_cards": [str(card) for card in self.player_cards],
            "banker_cards": [str(card) for card in self.banker_cards],
            "winner": self.winner.value,
            "score": self.score,
            "rolling_sum": self.rolling_sum,
            "recommendation": self.recommendation.value if self.recommendation else None,
            "timestamp": self.timestamp.isoformat(),
        }


class History:
    """Bounded, newest-first list of round records."""

    def __init__(self, limit: int = HISTORY_LIMIT, window: int = ROLLING_WINDOW):
        if limit < 1 or window < 1:
            raise ValueError("limit and window must be positive")
        self.limit = limit
        self.window = window
        self.records: List[RoundRecord] = []
        self._next_id = 1

    def add(
        self,
        player_cards: Sequence[LabelLike],
        banker_cards: Sequence[LabelLike],
        weights: Optional[Mapping] = None,
    ) -> RoundRecord:
        """
        Record a completed round.

        The caller is expected to have validated the round.

        Returns:
            The new record, also placed at the front of `records`
        """
        player = parse_labels(player_cards)
        banker = parse_labels(banker_cards)
        round_score = score(player + banker, weights)

        recent = [round_score] + [record.score for record in self.records[: self.window - 1]]
        rolling_sum = sum(recent) if len(recent) == self.window else None

        record = RoundRecord(
            id=self._next_id,
            player_cards=player,
            banker_cards=banker,
            winner=round_winner(player, banker),
            score=round_score,
            rolling_sum=rolling_sum,
            recommendation=recommend(rolling_sum) if rolling_sum is not None else None,
        )
        self._next_id += 1
        self.records.insert(0, record)
        del self.records[self.limit :]
        return record

    def clear(self) -> None:
        self.records.clear()

    def winner_counts(self) -> Dict[Winner, int]:
        counts = {winner: 0 for winner in Winner}
        for record in self.records:
            counts[record.winner] += 1
        return counts

    def recommendation_counts(self) -> Dict[Side, int]:
        counts = {side: 0 for side in Side}
        for record in self.records:
            if record.recommendation is not None:
                counts[record.recommendation] += 1
        return counts

    @property
    def latest(self) -> Optional[RoundRecord]:
        return self.records[0] if self.records else None

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)
