from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Optional, Sequence, Tuple

import numpy as np

from noughts.core.board import ALL_POSITIONS, BOARD_SIZE, WINNING_LINES, Mark, Position
from noughts.core.move import Move


class StatusKind(Enum):
    ONGOING = "ongoing"
    WON = "won"
    DRAWN = "drawn"


@dataclass(frozen=True)
class Status:
    """
    Game outcome.
    `mark` and `line` are set only for WON.
    """
    kind: StatusKind
    mark: Optional[Mark] = None
    line: Optional[FrozenSet[Position]] = None

    @staticmethod
    def ongoing() -> "Status":
        return Status(StatusKind.ONGOING)

    @staticmethod
    def won(mark: Mark, line: FrozenSet[Position]) -> "Status":
        return Status(StatusKind.WON, mark=mark, line=frozenset(line))

    @staticmethod
    def drawn() -> "Status":
        return Status(StatusKind.DRAWN)

    @property
    def is_ongoing(self) -> bool:
        return self.kind == StatusKind.ONGOING

    def __str__(self) -> str:
        if self.kind == StatusKind.WON:
            cells = ", ".join(str(p) for p in sorted(self.line, key=lambda p: (p.row, p.column)))
            return f"won by {self.mark.symbol()} [{cells}]"
        return self.kind.value


# ---------- Derivations over a move history ----------

def positions_of(moves: Sequence[Move], mark: Mark) -> FrozenSet[Position]:
    """
    Cells holding `mark`. For EMPTY this is the set of unfilled cells.
    """
    if mark == Mark.EMPTY:
        return ALL_POSITIONS - frozenset(m.position for m in moves)
    return frozenset(m.position for m in moves if m.mark == mark)


def turn_after(moves: Sequence[Move]) -> Optional[Mark]:
    """Mark expected next; None until the first move fixes the alternation."""
    if not moves:
        return None
    return moves[-1].mark.next()


def status_of(moves: Sequence[Move]) -> Status:
    for mark in (Mark.NOUGHT, Mark.CROSS):
        occupied = positions_of(moves, mark)
        for line in WINNING_LINES:
            if occupied >= line:
                return Status.won(mark, line)
    if len(moves) == BOARD_SIZE * BOARD_SIZE:
        return Status.drawn()
    return Status.ongoing()


def replay(moves: Sequence[Move]) -> List[List[Mark]]:
    """Grid of marks, EMPTY by default, each move overwriting its cell."""
    grid = [[Mark.EMPTY for _ in range(BOARD_SIZE)] for _ in range(BOARD_SIZE)]
    for move in moves:
        grid[move.position.row][move.position.column] = move.mark
    return grid


def to_array(moves: Sequence[Move]) -> np.ndarray:
    """3x3 int8 array of Mark values (0 empty, 1 nought, 2 cross)."""
    arr = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
    for move in moves:
        arr[move.position.row, move.position.column] = move.mark.value
    return arr


@dataclass(frozen=True)
class GameState:
    """Read-only snapshot of a board, handed to opponents."""
    moves: Tuple[Move, ...] = ()
    turn: Optional[Mark] = None
    status: Status = field(default_factory=Status.ongoing)

    @staticmethod
    def from_moves(moves: Sequence[Move]) -> "GameState":
        moves = tuple(moves)
        return GameState(moves=moves, turn=turn_after(moves), status=status_of(moves))

    def cell(self, pos: Position) -> Mark:
        return replay(self.moves)[pos.row][pos.column]

    def positions(self, mark: Mark) -> FrozenSet[Position]:
        return positions_of(self.moves, mark)

    def empty_positions(self) -> List[Position]:
        """Unfilled cells in row-major order."""
        return sorted(positions_of(self.moves, Mark.EMPTY), key=lambda p: (p.row, p.column))

    def to_array(self) -> np.ndarray:
        return to_array(self.moves)
