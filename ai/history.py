"""Bounded, caller-owned log of AI decisions."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterator, List, Optional, Union

from engine.pieces import PlayerId, Position, Wall


@dataclass(frozen=True)
class SearchRecord:
    """What the selector saw and picked at one decision point."""

    ply: int
    player: PlayerId
    difficulty: str
    kind: str
    data: Union[Position, Wall]
    score: float
    pawn_candidates: int
    wall_candidates: int
    walls_considered: bool


class SearchHistory:
    """
    Append-only ring buffer of ``SearchRecord`` entries.

    One instance belongs to one match. Pass it to ``select_move`` to have
    decisions recorded; the selector keeps no log of its own.
    """

    def __init__(self, maxlen: int = 256) -> None:
        if maxlen <= 0:
            raise ValueError("maxlen must be positive")
        self._records: Deque[SearchRecord] = deque(maxlen=maxlen)

    @property
    def maxlen(self) -> int:
        return self._records.maxlen or 0

    def append(self, record: SearchRecord) -> None:
        self._records.append(record)

    def last(self) -> Optional[SearchRecord]:
        return self._records[-1] if self._records else None

    def records(self) -> List[SearchRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[SearchRecord]:
        return iter(list(self._records))
