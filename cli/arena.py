"""CLI command to run an AI-vs-AI difficulty ladder."""

from __future__ import annotations

import argparse
import json
import logging

from arena.ratings import run_ladder
from arena.self_play import ArenaConfig


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rate Quoridor AI tiers against each other.")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to arena config JSON",
    )
    parser.add_argument("--games", type=int, default=None, help="Override games per pairing")
    parser.add_argument("--log-level", type=str, default="INFO", help="Python logging level")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))

    config = ArenaConfig.from_json(args.config) if args.config else ArenaConfig()
    if args.games is not None:
        config.games = args.games

    report = run_ladder(config)
    print(json.dumps({"results": report.results, "leaderboard": report.leaderboard}, indent=2))


if __name__ == "__main__":
    main()
