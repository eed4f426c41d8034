from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from typing import Optional

from noughts.core.board import Position
from noughts.core.gamestate import GameState
from noughts.ai.config import OPPONENT_LEVELS
from noughts.ai.movegen import MoveGenerator, band_of

logger = logging.getLogger(__name__)


class Opponent(ABC):
    """Picks a cell for the computer side. None means it declines to move."""

    @abstractmethod
    def choose_move(self, state: GameState) -> Optional[Position]:
        raise NotImplementedError


class RandomOpponent(Opponent):
    """Any empty cell, uniformly."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def choose_move(self, state: GameState) -> Optional[Position]:
        if not state.status.is_ongoing:
            return None
        empties = state.empty_positions()
        if not empties:
            return None
        return self.rng.choice(empties)


class TacticalOpponent(Opponent):
    """
    Win, block, fork, then centre / corner / edge.
    Lower levels mix in random cells (see ai.config.OPPONENT_LEVELS).
    """

    def __init__(self, lvl: int = 3, rng: Optional[random.Random] = None) -> None:
        if lvl not in OPPONENT_LEVELS:
            raise ValueError(f"Unknown opponent level: {lvl}")
        self.lvl = lvl
        self.cfg = OPPONENT_LEVELS[lvl]
        self.rng = rng or random.Random()

    def choose_move(self, state: GameState) -> Optional[Position]:
        ranked = MoveGenerator(state).get_prioritized_moves()
        if not ranked:
            return None

        if self.rng.random() < self.cfg.random_rate:
            pos = self.rng.choice(ranked).position
            logger.debug("lvl%d random pick %s", self.lvl, pos)
            return pos

        k = self.cfg.randomize_top_k
        if k > 1:
            # only mix among cells in the best band
            best = band_of(ranked[0].priority)
            top = [pm for pm in ranked[:k] if band_of(pm.priority) == best]
            return self.rng.choice(top).position
        return ranked[0].position
