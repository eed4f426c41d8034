from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Tuple


BOARD_SIZE = 3


class Mark(Enum):
    """Cell contents / player symbols."""
    EMPTY = 0
    NOUGHT = 1
    CROSS = 2

    def symbol(self) -> str:
        return {0: ".", 1: "O", 2: "X"}[self.value]

    def next(self) -> "Mark":
        """
        The mark that moves after this one.

        Raises:
            ValueError for EMPTY (an unfilled cell has no successor).
        """
        if self == Mark.NOUGHT:
            return Mark.CROSS
        if self == Mark.CROSS:
            return Mark.NOUGHT
        raise ValueError("EMPTY has no next mark")

    def __str__(self) -> str:
        return self.symbol()


@dataclass(frozen=True)
class Position:
    """
    Immutable cell on the board.
    Coordinates are 0-based: (0..2, 0..2)
    """
    row: int
    column: int

    def __post_init__(self):
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in (self.row, self.column)):
            raise TypeError("Position coordinates must be integers")
        if not (0 <= self.row < BOARD_SIZE and 0 <= self.column < BOARD_SIZE):
            raise ValueError(f"Position out of range: ({self.row}, {self.column})")

    def __str__(self) -> str:
        return f"({self.row}, {self.column})"


ALL_POSITIONS: FrozenSet[Position] = frozenset(
    Position(r, c) for r in range(BOARD_SIZE) for c in range(BOARD_SIZE)
)

# Rows, then columns, then diagonals
WINNING_LINES: Tuple[FrozenSet[Position], ...] = (
    *(frozenset(Position(r, c) for c in range(BOARD_SIZE)) for r in range(BOARD_SIZE)),
    *(frozenset(Position(r, c) for r in range(BOARD_SIZE)) for c in range(BOARD_SIZE)),
    frozenset(Position(i, i) for i in range(BOARD_SIZE)),
    frozenset(Position(i, BOARD_SIZE - 1 - i) for i in range(BOARD_SIZE)),
)
