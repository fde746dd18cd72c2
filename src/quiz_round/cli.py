# Area: Shared
"""
quiz_round.cli — Command-line interface
========================================

Runs a scripted demo game so the phase timing can be watched in a
terminal without any UI or network transport.

Usage:
    python -m quiz_round --demo                         # Built-in questions
    python -m quiz_round --demo --fast                  # Timings scaled to 10%
    python -m quiz_round --demo --questions bank.json   # Own question bank
    python -m quiz_round --demo --config config.json    # Own timings

Timings can also be overridden through QUIZ_* environment variables
(a local .env file is read).
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .config import load_config
from .demo import DEFAULT_BOT_NAMES, DEMO_QUESTIONS, run_demo
from ._shared import setup_logging

FAST_FACTOR = 0.1


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="quiz-round",
        description="Quiz round engine - run a scripted demo game",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m quiz_round --demo
  python -m quiz_round --demo --fast --players ANA BEN
  QUIZ_OPTION_SELECTION_MS=8000 python -m quiz_round --demo
        """,
    )

    parser.add_argument(
        "--demo",
        action="store_true",
        help="Play one full game with bot players",
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to JSON config file with phase timings",
    )

    parser.add_argument(
        "--questions",
        type=str,
        help="Path to a JSON list of questions (default: built-in sample)",
    )

    parser.add_argument(
        "--players",
        nargs="+",
        default=list(DEFAULT_BOT_NAMES),
        help="Names of the bot players",
    )

    parser.add_argument(
        "--fast",
        action="store_true",
        help=f"Scale every phase duration to {int(FAST_FACTOR * 100)}%%",
    )

    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for option shuffling and bot choices",
    )

    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write JSON logs to this file",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def load_questions(path: Optional[str]) -> List[Dict[str, Any]]:
    """Load a question bank from a JSON file, or return the sample bank."""
    if not path:
        return list(DEMO_QUESTIONS)
    with open(Path(path), encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON list of questions")
    return data


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    setup_logging(
        log_file_path=args.log_file,
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    if not args.demo:
        print("Error: only demo mode is available from the command line.", file=sys.stderr)
        print("Use --demo, or embed quiz_round.GameRoom in your server.", file=sys.stderr)
        return 1

    try:
        config = load_config(args.config)
        questions = load_questions(args.questions)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.fast:
        config = config.scaled(FAST_FACTOR)

    try:
        asyncio.run(run_demo(config, questions, player_names=args.players, seed=args.seed))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except asyncio.TimeoutError:
        print("Error: the demo game did not finish in time", file=sys.stderr)
        return 1
    return 0
