"""CLI entrypoint for playing Quoridor against the AI."""

from __future__ import annotations

import argparse
import logging
import random
import time
from typing import Optional

from ai.difficulty import Difficulty, load_profiles
from ai.heuristic_ai import HeuristicAI
from ai.history import SearchHistory
from engine.board import Move, Snapshot, apply_move, initial_snapshot
from engine.errors import ErrorKind, IllegalActionError
from engine.pieces import Orientation, PlayerId, Wall

HELP_TEXT = "Commands: move <row> <col> | wall <row> <col> <h|v> | help | quit"

ERROR_MESSAGES = {
    ErrorKind.OUT_OF_BOUNDS: "That is off the board.",
    ErrorKind.EDGE_BLOCKED: "A wall is in the way.",
    ErrorKind.CELL_OCCUPIED: "That cell is taken.",
    ErrorKind.UNREACHABLE_TARGET: "Your pawn cannot reach that cell in one move.",
    ErrorKind.WALL_OVERLAP: "That wall overlaps or crosses another wall.",
    ErrorKind.WALL_WOULD_SEVER_PATH: "That wall would cut a player off from their goal.",
    ErrorKind.NO_WALLS_REMAINING: "You have no walls left.",
    ErrorKind.NOT_YOUR_TURN: "It is not your turn.",
    ErrorKind.GAME_ALREADY_OVER: "The game is over.",
}


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play Quoridor in terminal.")
    parser.add_argument(
        "--difficulty",
        type=str,
        default=Difficulty.MEDIUM.value,
        choices=[d.value for d in Difficulty],
        help="AI difficulty tier",
    )
    parser.add_argument("--seed", type=int, default=None, help="Deterministic AI seed")
    parser.add_argument(
        "--human-side",
        type=str,
        default=PlayerId.FIRST.value,
        choices=[p.value for p in PlayerId],
        help="Which side the human controls (first moves first)",
    )
    parser.add_argument("--profiles", type=str, default=None, help="JSON file with difficulty overrides")
    parser.add_argument("--pace", action="store_true", help="Wait the AI's suggested thinking delay")
    parser.add_argument("--log-level", type=str, default="INFO", help="Python logging level")
    return parser.parse_args()


def parse_user_move(command: str) -> Optional[Move]:
    parts = command.strip().split()
    if not parts:
        return None

    op = parts[0].lower()
    if op == "move" and len(parts) == 3:
        row, col = int(parts[1]), int(parts[2])
        return Move.pawn((row, col))
    if op == "wall" and len(parts) == 4:
        row, col = int(parts[1]), int(parts[2])
        orientation = {"h": Orientation.HORIZONTAL, "v": Orientation.VERTICAL}.get(parts[3].lower())
        if orientation is None:
            return None
        return Move.place(Wall(row, col, orientation))
    return None


def print_status(snapshot: Snapshot) -> None:
    print()
    print(snapshot.render_ascii())
    remaining = snapshot.walls_remaining
    print(
        f"Turn: {snapshot.current_player.value} | Walls left: "
        f"first={remaining[PlayerId.FIRST]} second={remaining[PlayerId.SECOND]}"
    )


def run_cli() -> None:
    args = parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    logger = logging.getLogger("quoridor.cli")

    difficulty = Difficulty(args.difficulty)
    profile = load_profiles(args.profiles)[difficulty] if args.profiles else None
    history = SearchHistory()
    ai = HeuristicAI(difficulty=difficulty, rng=random.Random(args.seed), profile=profile, history=history)
    human_side = PlayerId(args.human_side)
    snapshot = initial_snapshot()

    logger.info("Starting Quoridor game. Human=%s AI=%s (%s)", human_side.value, human_side.opponent().value, difficulty.value)
    print(HELP_TEXT)

    while True:
        print_status(snapshot)
        if snapshot.is_terminal:
            print(f"Winner: {snapshot.winner.value}")
            break

        if snapshot.current_player is human_side:
            user_input = input("Your move> ").strip()
            if user_input.lower() in {"quit", "exit"}:
                print("Exiting game.")
                break
            if user_input.lower() == "help":
                print(HELP_TEXT)
                continue

            try:
                move = parse_user_move(user_input)
                if move is None:
                    print("Invalid command format.")
                    continue
                snapshot = apply_move(snapshot, move)
            except IllegalActionError as exc:
                logger.debug("Rejected human action: %s", exc)
                print(ERROR_MESSAGES.get(exc.kind, "Illegal action."))
                continue
            except ValueError:
                print("Invalid numeric input.")
                continue
        else:
            if args.pace:
                time.sleep(ai.thinking_delay())
            scored = ai.select_move(snapshot)
            snapshot = apply_move(snapshot, scored.move)
            print(f"AI {scored.move} (score {scored.score:.1f})")

    logger.info("Game over after %d plies; AI made %d decisions", snapshot.ply, len(history))


if __name__ == "__main__":
    run_cli()
