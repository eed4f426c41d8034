from __future__ import annotations

import logging
import threading
from typing import FrozenSet, List, Optional, Tuple

import numpy as np

from noughts.core.board import ALL_POSITIONS, BOARD_SIZE, WINNING_LINES, Mark, Position
from noughts.core.gamestate import (
    GameState,
    Status,
    positions_of,
    replay,
    status_of,
    to_array,
    turn_after,
)
from noughts.core.move import Move
from noughts.core.movevalidator import MoveValidator
from noughts.core.observable import Observable

logger = logging.getLogger(__name__)


class BoardState:
    """
    Tic-tac-toe board held as an append-only history of moves.

    Owns:
      - the move history (the only stored state)
      - a MoveValidator
      - the `move` observable (last accepted move, None after clear)

    Cell contents, turn and status are derived from the history on every read.
    Mutations (submit / clear) are serialized by a re-entrant lock; observers
    run synchronously inside it, on the mutating thread.
    """

    def __init__(self) -> None:
        self.validator = MoveValidator()
        self._moves: List[Move] = []
        self._lock = threading.RLock()
        self.move: Observable[Optional[Move]] = Observable(None)

    @property
    def lock(self) -> threading.RLock:
        """Lock guarding mutation; hold it to make a check-then-submit atomic."""
        return self._lock

    # -------------------------
    # Mutation
    # -------------------------

    def submit(self, move: Move) -> bool:
        """
        Append `move` if legal.

        Returns:
            True if accepted. On rejection the history is untouched.
        """
        with self._lock:
            result = self.validator.validate(self._moves, move)
            if not result.success:
                logger.debug("Rejected %s: %s", move, result.error_message)
                return False

            self._moves.append(move)
            logger.debug("Accepted %s (move %d)", move, len(self._moves))
            if result.completes_line:
                logger.info("%s completes a line", move)
            self.move.value = move
            return True

    def clear(self) -> None:
        """Discard all moves."""
        with self._lock:
            self._moves.clear()
            self.move.value = None

    # -------------------------
    # Derived views
    # -------------------------

    @property
    def all_positions(self) -> FrozenSet[Position]:
        return ALL_POSITIONS

    @property
    def winning_lines(self) -> Tuple[FrozenSet[Position], ...]:
        return WINNING_LINES

    @property
    def moves(self) -> Tuple[Move, ...]:
        return tuple(self._moves)

    @property
    def turn(self) -> Optional[Mark]:
        """Mark expected to move next, or None before the first move."""
        return turn_after(self._moves)

    @property
    def status(self) -> Status:
        return status_of(self._moves)

    def positions(self, mark: Mark) -> FrozenSet[Position]:
        return positions_of(self._moves, mark)

    def cells_at(self, row: int) -> List[Mark]:
        if not isinstance(row, int) or not (0 <= row < BOARD_SIZE):
            raise ValueError(f"Row out of range: {row}")
        return replay(self._moves)[row]

    def __getitem__(self, row: int) -> List[Mark]:
        return self.cells_at(row)

    def cell(self, pos: Position) -> Mark:
        return replay(self._moves)[pos.row][pos.column]

    def __len__(self) -> int:
        return len(self._moves)

    def snapshot(self) -> GameState:
        with self._lock:
            return GameState.from_moves(self._moves)

    def to_array(self) -> np.ndarray:
        return to_array(self._moves)

    # ---------- Rendering (log output) ----------

    def to_ascii(self) -> str:
        """
        Render board as ASCII.
        Uses Mark.symbol(): EMPTY '.', NOUGHT 'O', CROSS 'X'
        """
        return "\n".join(
            " ".join(mark.symbol() for mark in row) for row in replay(self._moves)
        )
