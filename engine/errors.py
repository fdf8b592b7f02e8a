"""Error kinds raised by the Quoridor engine."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Machine-readable reason an action was rejected."""

    OUT_OF_BOUNDS = "out_of_bounds"
    EDGE_BLOCKED = "edge_blocked"
    CELL_OCCUPIED = "cell_occupied"
    UNREACHABLE_TARGET = "unreachable_target"
    WALL_OVERLAP = "wall_overlap"
    WALL_WOULD_SEVER_PATH = "wall_would_sever_path"
    NO_WALLS_REMAINING = "no_walls_remaining"
    NOT_YOUR_TURN = "not_your_turn"
    GAME_ALREADY_OVER = "game_already_over"
    NO_LEGAL_MOVE = "no_legal_move"


class EngineError(Exception):
    """Base class for engine errors.

    Attributes:
        kind: reason for the failure
        message: developer-facing description
        context: extra values for debugging
    """

    def __init__(self, kind: ErrorKind, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{key}={value}" for key, value in self.context.items())
            return f"[{self.kind.value}] {self.message} ({ctx})"
        return f"[{self.kind.value}] {self.message}"


class IllegalActionError(EngineError):
    """A proposed action breaks the rules. The snapshot is left unchanged."""


class EngineInconsistencyError(EngineError):
    """An internal invariant failed, e.g. a pawn with no legal move."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(ErrorKind.NO_LEGAL_MOVE, message, context)
