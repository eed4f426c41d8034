from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from noughts.core.board import Mark, WINNING_LINES
from noughts.core.gamestate import positions_of, status_of
from noughts.core.move import Move, MoveResult


@dataclass
class MoveValidator:
    """
    Validates a move against a move history.

    Rejects when:
      - the game is no longer ongoing
      - the cell is already occupied
      - the mark breaks the alternation fixed by the first move
    """

    def validate(self, moves: Sequence[Move], move: Move) -> MoveResult:
        if not status_of(moves).is_ongoing:
            return MoveResult.fail("Game is already over.")

        if move.position not in positions_of(moves, Mark.EMPTY):
            return MoveResult.fail(f"Cell {move.position} is already occupied.")

        if moves and move.mark != moves[-1].mark.next():
            return MoveResult.fail(f"Not {move.mark.symbol()}'s turn.")

        return MoveResult.ok(completes_line=self._completes_line(moves, move))

    @staticmethod
    def _completes_line(moves: Sequence[Move], move: Move) -> bool:
        """Check whether placing `move` completes a line (virtual placement)."""
        occupied = positions_of(moves, move.mark) | {move.position}
        return any(occupied >= line for line in WINNING_LINES if move.position in line)
