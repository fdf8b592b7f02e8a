"""Player sides, wall orientation, and wall pieces."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

BOARD_SIZE = 9
MAX_WALLS_PER_PLAYER = 10

Position = Tuple[int, int]


class PlayerId(str, Enum):
    """Player side. FIRST starts on row 0 and races to the last row."""

    FIRST = "first"
    SECOND = "second"

    def opponent(self) -> "PlayerId":
        return PlayerId.SECOND if self is PlayerId.FIRST else PlayerId.FIRST

    @property
    def goal_row(self) -> int:
        return GOAL_ROW[self]

    @property
    def start_position(self) -> Position:
        return START_POSITIONS[self]

    @property
    def forward(self) -> int:
        """Row delta of one step toward the goal row."""
        return 1 if self is PlayerId.FIRST else -1

    def advancement(self, row: int) -> int:
        """Rows travelled away from this side's starting edge."""
        return abs(row - START_POSITIONS[self][0])


class Orientation(str, Enum):
    """Groove a wall occupies between cells."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


GOAL_ROW: Dict[PlayerId, int] = {
    PlayerId.FIRST: BOARD_SIZE - 1,
    PlayerId.SECOND: 0,
}

START_POSITIONS: Dict[PlayerId, Position] = {
    PlayerId.FIRST: (0, BOARD_SIZE // 2),
    PlayerId.SECOND: (BOARD_SIZE - 1, BOARD_SIZE // 2),
}

SIDE_SYMBOL: Dict[PlayerId, str] = {
    PlayerId.FIRST: "1",
    PlayerId.SECOND: "2",
}


@dataclass(frozen=True)
class Wall:
    """A two-cell wall anchored at the top-left grid intersection (row, col)."""

    row: int
    col: int
    orientation: Orientation

    def __post_init__(self) -> None:
        # Rehydrated walls may carry the orientation as a plain string.
        object.__setattr__(self, "orientation", Orientation(self.orientation))

    @property
    def anchor(self) -> Position:
        return (self.row, self.col)

    @property
    def symbol(self) -> str:
        return "H" if self.orientation is Orientation.HORIZONTAL else "V"

    def describe(self) -> str:
        direction = "east-west" if self.orientation is Orientation.HORIZONTAL else "north-south"
        return f"{direction} wall at row {self.row}, column {self.col}"
