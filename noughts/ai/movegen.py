from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from noughts.core.board import BOARD_SIZE, WINNING_LINES, Mark, Position
from noughts.core.gamestate import GameState
from noughts.ai.config import (
    PRIORITY_WIN,
    PRIORITY_BLOCK,
    PRIORITY_FORK,
    PRIORITY_CENTRE,
    PRIORITY_CORNER,
    PRIORITY_EDGE,
)


@dataclass(frozen=True)
class PrioritizedMove:
    """Move with priority score (higher = better)."""
    position: Position
    priority: int


def band_of(priority: int) -> int:
    """Priority band: a threat band, else the positional value itself."""
    for band in (PRIORITY_WIN, PRIORITY_BLOCK, PRIORITY_FORK):
        if priority >= band:
            return band
    return priority


# (8, 3) row / column index arrays for the winning lines
_LINE_ROWS = np.array(
    [[p.row for p in sorted(line, key=lambda p: (p.row, p.column))] for line in WINNING_LINES]
)
_LINE_COLS = np.array(
    [[p.column for p in sorted(line, key=lambda p: (p.row, p.column))] for line in WINNING_LINES]
)


class MoveGenerator:
    """
    Orders the empty cells of a GameState for the side to move.

    Bands, best first:
      - completes a line for the mover (win)
      - completes a line for the other side (block)
      - opens two lines at once (fork)
      - centre, corners, edges
    """

    def __init__(self, state: GameState, mark: Optional[Mark] = None) -> None:
        self.state = state
        self.mark = mark if mark is not None else state.turn

    def get_ordered_moves(self, max_moves: Optional[int] = None) -> List[Position]:
        """
        Return empty cells ordered by priority (best first, row-major on ties).
        """
        ranked = self.get_prioritized_moves()
        if max_moves is not None:
            ranked = ranked[:max_moves]
        return [pm.position for pm in ranked]

    def get_prioritized_moves(self) -> List[PrioritizedMove]:
        if not self.state.status.is_ongoing:
            return []
        empties = self.state.empty_positions()
        ranked = [PrioritizedMove(pos, self._priority(pos)) for pos in empties]
        # stable sort keeps row-major order within a band
        ranked.sort(key=lambda pm: pm.priority, reverse=True)
        return ranked

    # ---------- Scoring ----------

    def _line_counts(self, mark: Mark) -> np.ndarray:
        """Per line: (own count, empty count) as an (8, 2) array."""
        cells = self.state.to_array()[_LINE_ROWS, _LINE_COLS]
        own = (cells == mark.value).sum(axis=1)
        empty = (cells == Mark.EMPTY.value).sum(axis=1)
        return np.stack([own, empty], axis=1)

    def _priority(self, pos: Position) -> int:
        base = self._positional(pos)
        if self.mark is None:
            # nobody has moved yet; no threats exist
            return base

        through = [i for i, line in enumerate(WINNING_LINES) if pos in line]
        mine = self._line_counts(self.mark)[through]
        theirs = self._line_counts(self.mark.next())[through]

        if np.any((mine[:, 0] == BOARD_SIZE - 1) & (mine[:, 1] == 1)):
            return PRIORITY_WIN + base
        if np.any((theirs[:, 0] == BOARD_SIZE - 1) & (theirs[:, 1] == 1)):
            return PRIORITY_BLOCK + base
        # lines with one own mark and otherwise empty become threats
        open_lines = int(np.sum((mine[:, 0] == 1) & (mine[:, 1] == BOARD_SIZE - 1)))
        if open_lines >= 2:
            return PRIORITY_FORK + base
        return base

    @staticmethod
    def _positional(pos: Position) -> int:
        centre = BOARD_SIZE // 2
        if pos.row == centre and pos.column == centre:
            return PRIORITY_CENTRE
        if pos.row in (0, BOARD_SIZE - 1) and pos.column in (0, BOARD_SIZE - 1):
            return PRIORITY_CORNER
        return PRIORITY_EDGE
