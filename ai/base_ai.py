"""Agent contract shared by every Quoridor player."""

from __future__ import annotations

from abc import ABC, abstractmethod

from engine.board import Move, Snapshot, apply_move


class BaseAI(ABC):
    """Picks actions for the side to move. Agents never modify a snapshot."""

    name = "agent"

    @abstractmethod
    def choose_move(self, snapshot: Snapshot) -> Move:
        raise NotImplementedError

    def play(self, snapshot: Snapshot) -> Snapshot:
        """Choose a move for ``snapshot.current_player`` and return the resulting snapshot."""
        return apply_move(snapshot, self.choose_move(snapshot))
