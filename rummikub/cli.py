from __future__ import annotations

import argparse
import os
from typing import List, Optional

from .engine import GameSession
from .logging_config import setup_logging
from .rules import Ruleset

LOG_LEVEL_ENV = "RUMMIKUB_LOG_LEVEL"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def run_game(seed: Optional[int] = None, max_turns: int = 500, ruleset: Optional[Ruleset] = None) -> GameSession:
    session = GameSession(ruleset=ruleset, rng_seed=seed, human_players=())
    for _ in range(max_turns):
        if session.state.winner is not None:
            break
        session.play_ai_turn()
    return session


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Simulate a Rummikub game between automated players.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible deck order.")
    parser.add_argument("--max-turns", type=int, default=500, help="Stop the game after this many turns.")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=os.environ.get(LOG_LEVEL_ENV, "WARNING").upper(),
        help=f"Logging level (default: ${LOG_LEVEL_ENV} or WARNING).",
    )
    parser.add_argument("--log-dir", default=None, help="Also write logs to a timestamped file in this directory.")
    args = parser.parse_args(argv)

    setup_logging(args.log_dir, args.log_level)
    session = run_game(seed=args.seed, max_turns=args.max_turns)
    state = session.state
    print(f"Game finished after {state.turn_number} turns")
    if state.winner is not None:
        print(f"Winner: player {state.winner}")
    else:
        print("No winner (turn limit reached)")
    print("Hands sizes:", [len(h) for h in state.hands])
    print("Board sets:", len(state.board))


if __name__ == "__main__":
    main()
