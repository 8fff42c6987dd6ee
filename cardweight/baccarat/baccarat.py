"""
Baccarat calculator command line interface.

Check a round against the drawing rules, score it, and simulate the next
round from the remaining shoe.
"""

import argparse
import json
import logging
import sys
import time
from typing import Dict, List, Optional

from cardweight.common.card import Label, parse_labels
from cardweight.baccarat.constants import DEFAULT_DECKS, DEFAULT_ITERATIONS, DEFAULT_WEIGHTS
from cardweight.baccarat.scoring import recommend, round_winner, score
from cardweight.baccarat.settings import Settings, parse_simulation, parse_weights
from cardweight.baccarat.storage import SettingsStore
from cardweight.baccarat.state import ValidationStatus
from cardweight.baccarat.transitions import next_step, validate_round
from cardweight.simulation.sampler import InsufficientShoeError, SimulationConfig, simulate_next_round

logger = logging.getLogger("cardweight.cli")

EXIT_OK = 0
EXIT_FAILED = 1


def load_weights(path: Optional[str]) -> Dict[Label, int]:
    """Read a JSON weight file, or return the defaults when no path is given."""
    if not path:
        return dict(DEFAULT_WEIGHTS)
    with open(path, encoding="utf-8") as handle:
        return parse_weights(json.load(handle))


def check_round(player: List[str], banker: List[str], weights: Dict[Label, int], as_json: bool = False) -> int:
    """
    Validate a round and print its verdict, winner, score and recommendation.

    Returns:
        Process exit status
    """
    validation = validate_round(player, banker)
    step = next_step(player, banker)
    cards = parse_labels(player) + parse_labels(banker)
    total = score(cards, weights)

    result = {
        "status": validation.status.value,
        "message": validation.message,
        "next_side": step.side.value if step.side else None,
        "winner": round_winner(player, banker).value if validation.is_valid else None,
        "score": total,
        "recommendation": recommend(total).value if cards else None,
    }

    if as_json:
        print(json.dumps(result, indent=2))
    else:
        print(f"Player: {' '.join(player) or '-'}   Banker: {' '.join(banker) or '-'}")
        print(f"Status: {result['status']} - {result['message']}")
        if result["next_side"]:
            print(f"Next card: {result['next_side']}")
        if result["winner"]:
            print(f"Winner: {result['winner']}")
        print(f"Score: {total:+d}")
        if result["recommendation"]:
            print(f"Recommendation: {result['recommendation']}")

    return EXIT_FAILED if validation.status is ValidationStatus.INVALID else EXIT_OK


def run_simulation(
    removed: List[str], weights: Dict[Label, int], config: SimulationConfig, as_json: bool = False
) -> int:
    """
    Run the next-round simulation and print the rates.

    Returns:
        Process exit status
    """
    start_time = time.time()
    try:
        result = simulate_next_round(removed, weights, config)
    except InsufficientShoeError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILED
    duration = time.time() - start_time

    if as_json:
        print(json.dumps(result.to_dict(), indent=2))
        return EXIT_OK

    config = config.clamped()
    print(f"\nNext Round Simulation ({config.decks} decks)")
    print("=" * 60)
    print(f"Runs: {result.runs:,}")
    print(f"Banker: {result.banker_rate * 100:.2f}%  "
          f"({result.banker_rate_ci.lower * 100:.2f}% - {result.banker_rate_ci.upper * 100:.2f}%)")
    print(f"Player: {result.player_rate * 100:.2f}%")
    print(f"Average score: {result.avg_score:+.2f}")
    print(f"\nDuration: {duration:.2f} seconds")
    print("=" * 60)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cardweight",
        description="Baccarat card-weight calculator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check a six-card round
  cardweight check --player 0 0 5 --banker 6 6 2

  # Simulate the next round from an 8-deck shoe
  cardweight simulate --decks 8 --iterations 20000 --removed 0 0 5 6 6 2

  # Save weights and simulation settings to a database
  cardweight settings --db settings.db --save --weights-file weights.json
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--weights-file", help="JSON file mapping card labels to weights")
    parser.add_argument("--json", action="store_true", help="Print machine-readable output")

    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="Validate and score a round")
    check.add_argument("--player", nargs="*", default=[], help="Player cards in deal order")
    check.add_argument("--banker", nargs="*", default=[], help="Banker cards in deal order")

    sim = subparsers.add_parser("simulate", help="Monte Carlo estimate for the next round")
    sim.add_argument("--decks", type=int, default=DEFAULT_DECKS, help="Number of decks in the shoe (1-12, default: 8)")
    sim.add_argument(
        "--iterations", type=int, default=DEFAULT_ITERATIONS, help="Simulated rounds (100-200000, default: 20000)"
    )
    sim.add_argument("--removed", nargs="*", default=[], help="Cards already out of the shoe")
    sim.add_argument("--seed", type=int, default=None, help="Random seed")
    sim.add_argument("--workers", type=int, default=1, help="Worker threads (default: 1)")

    settings = subparsers.add_parser("settings", help="Show or store saved settings")
    settings.add_argument("--db", required=True, help="SQLite database file")
    settings.add_argument("--key", default=None, help="Settings key")
    settings.add_argument("--save", action="store_true", help="Store current weights and simulation options")
    settings.add_argument("--decks", type=int, default=None)
    settings.add_argument("--iterations", type=int, default=None)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI interface for the calculator."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        weights = load_weights(args.weights_file)
        player = list(args.player) if args.command == "check" else []
        banker = list(args.banker) if args.command == "check" else []
        removed = list(args.removed) if args.command == "simulate" else []
        parse_labels(player + banker + removed)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILED

    if args.command == "check":
        return check_round(player, banker, weights, args.json)

    if args.command == "simulate":
        config = SimulationConfig(
            decks=args.decks, iterations=args.iterations, workers=args.workers, seed=args.seed
        )
        return run_simulation(removed, weights, config, args.json)

    with SettingsStore(args.db) as store:
        if args.save:
            simulation = parse_simulation(
                {
                    "decks": args.decks if args.decks is not None else DEFAULT_DECKS,
                    "iterations": args.iterations if args.iterations is not None else DEFAULT_ITERATIONS,
                }
            )
            stored = store.set(Settings(weights=weights, simulation=simulation), args.key)
            print(json.dumps(stored.to_dict(), indent=2))
            return EXIT_OK
        current = store.get(args.key)
        if current is None:
            print(json.dumps({"settings": None}))
        else:
            print(json.dumps(current.to_dict(), indent=2))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
