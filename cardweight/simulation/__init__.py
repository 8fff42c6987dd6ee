"""
Monte Carlo simulation of the next baccarat round.

This package estimates how often a fresh six-card round drawn from the
remaining shoe scores for Banker or Player under a given weight table.
"""

from cardweight.simulation.sampler import (
    InsufficientShoeError,
    SimulationCancelled,
    SimulationConfig,
    SimulationResult,
    simulate,
    simulate_next_round,
)
from cardweight.simulation.statistics import ConfidenceInterval, score_range

__all__ = [
    "InsufficientShoeError",
    "SimulationCancelled",
    "SimulationConfig",
    "SimulationResult",
    "simulate",
    "simulate_next_round",
    "ConfidenceInterval",
    "score_range",
]
