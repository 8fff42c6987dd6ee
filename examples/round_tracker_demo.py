#!/usr/bin/env python3
"""
Round Tracker Demo

Enters a few rounds card by card, prints the prompt the state machine gives
before each card, and finishes with a simulation of the next round.
"""

import logging

from cardweight.baccarat import RoundTracker
from cardweight.simulation import SimulationConfig, simulate_next_round

ROUNDS = [
    ["0", "6", "0", "6", "5", "3"],  # Player draws, Banker 2 draws
    ["8", "9", "A", "2"],  # Player natural
    ["3", "4", "3", "3"],  # Both stand
    ["2", "2", "2", "3", "6", "0"],  # Banker 5 draws against a Player 6
]


def main():
    logging.basicConfig(level=logging.INFO, format="%(name)s - %(message)s")
    tracker = RoundTracker()
    last_cards = ()

    for cards in ROUNDS:
        print("-" * 60)
        for card in cards:
            step = tracker.next_step()
            side = tracker.deal(card)
            print(f"{step.message:<45} -> {card} to {side}")
        print(f"Status: {tracker.status.message}")
        print(f"{tracker}  score {tracker.score:+d}  recommend {tracker.recommendation}")
        last_cards = tracker.cards
        record = tracker.submit()
        print(f"Recorded #{record.id}: winner {record.winner}")

    print("-" * 60)
    result = simulate_next_round(last_cards, tracker.weights, SimulationConfig(decks=8, iterations=20000, seed=1))
    print(
        f"Next round: banker {result.banker_rate:.2%}, player {result.player_rate:.2%}, "
        f"avg score {result.avg_score:+.2f}"
    )


if __name__ == "__main__":
    main()
