"""
Statistical helpers for Monte Carlo results.

Confidence intervals for the simulated rates and mean score, and the exact
range a six-card weight sum can take for a given shoe.
"""

import math
from dataclasses import dataclass
from typing import Dict, Mapping

import scipy.stats as stats

from cardweight.common.card import CARD_LABELS
from cardweight.common.shoe import ShoeComposition
from cardweight.baccarat.constants import get_weight


@dataclass(frozen=True)
class ConfidenceInterval:
    """
    Represents a confidence interval with lower and upper bounds.

    Attributes:
        lower: The lower bound of the confidence interval
        upper: The upper bound of the confidence interval
        confidence: The confidence level (e.g., 0.95 for 95% confidence)
    """

    lower: float
    upper: float
    confidence: float

    def contains(self, value: float) -> bool:
        """Check if the interval contains a value."""
        return self.lower <= value <= self.upper

    def to_dict(self) -> Dict[str, float]:
        """Convert to a dictionary."""
        return {"lower": self.lower, "upper": self.upper, "confidence": self.confidence}


def proportion_interval(successes: int, trials: int, confidence: float = 0.95) -> ConfidenceInterval:
    """
    Normal-approximation interval for a binomial proportion, clipped to [0, 1].

    Args:
        successes: Number of successes
        trials: Number of trials, must be positive
        confidence: Confidence level

    Returns:
        ConfidenceInterval around successes / trials
    """
    if trials <= 0:
        raise ValueError("trials must be positive")
    p = successes / trials
    z = stats.norm.ppf((1 + confidence) / 2)
    margin = z * math.sqrt(p * (1 - p) / trials)
    return ConfidenceInterval(max(0.0, p - margin), min(1.0, p + margin), confidence)


def mean_interval(total: float, total_sq: float, n: int, confidence: float = 0.95) -> ConfidenceInterval:
    """
    Student-t interval for a mean given running sums.

    Args:
        total: Sum of the observations
        total_sq: Sum of the squared observations
        n: Number of observations
        confidence: Confidence level
    """
    if n <= 0:
        raise ValueError("n must be positive")
    mean = total / n
    if n == 1:
        return ConfidenceInterval(mean, mean, confidence)
    variance = max(0.0, (total_sq - n * mean * mean) / (n - 1))
    std_err = math.sqrt(variance / n)
    margin = std_err * stats.t.ppf((1 + confidence) / 2, n - 1)
    return ConfidenceInterval(mean - margin, mean + margin, confidence)


def score_range(shoe: ShoeComposition, weights: Mapping, cards: int = 6) -> tuple:
    """
    Lowest and highest weight sum achievable by drawing `cards` cards from `shoe`.

    Returns:
        (min_score, max_score)

    Raises:
        ValueError: If the shoe holds fewer than `cards` cards
    """
    if shoe.total < cards:
        raise ValueError(f"Shoe holds {shoe.total} cards, need {cards}")

    # (weight, count) pairs; greedy picking from either end is exact for a sum.
    pool = sorted(
        (get_weight(weights, label), shoe.counts[label]) for label in CARD_LABELS if shoe.counts[label] > 0
    )

    def _take(ordered):
        need, acc = cards, 0
        for weight, count in ordered:
            taken = min(need, count)
            acc += weight * taken
            need -= taken
            if need == 0:
                break
        return acc

    return _take(pool), _take(reversed(pool))
