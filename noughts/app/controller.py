from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from noughts.ai.opponent import Opponent
from noughts.app.scheduler import ScheduledTask, Scheduler
from noughts.core.board import Mark, Position
from noughts.core.board_state import BoardState
from noughts.core.gamestate import Status, StatusKind
from noughts.core.move import Move
from noughts.core.observable import Observable

logger = logging.getLogger(__name__)


@dataclass
class ControllerConfig:
    first_mark: Mark = Mark.NOUGHT
    robot_first: bool = False
    reply_delay: Tuple[float, float] = (0.8, 1.3)
    seed: Optional[int] = None

    def __post_init__(self):
        if self.first_mark == Mark.EMPTY:
            raise ValueError("first_mark must be NOUGHT or CROSS")
        low, high = self.reply_delay
        if low < 0 or high < low:
            raise ValueError(f"Invalid reply_delay range: {self.reply_delay}")


class Announcement(Enum):
    """What the presentation layer should tell the player. Values are text keys."""
    YOUR_TURN = "your_turn"
    OPPONENTS_TURN = "opponent's_turn"
    YOU_WIN = "you_win"
    YOU_LOSE = "you_lose"
    DRAW = "draw"


class GameController:
    """
    Human vs computer controller.

    Rules:
      - The human may only move on their own turn; other taps are ignored.
      - The computer replies after a random delay; the pending reply is
        cancelled on reset, and only one reply is outstanding at a time.
      - Each reset flips who moves first. The first mark advances whenever
        the computer had the opening, so the human alternates O / X across
        pairs of rounds.

    OOP rule:
      - Controller orchestrates.
      - BoardState holds the game.
      - Opponent picks cells only.
      - Scheduler runs the delay only.
    """

    def __init__(
        self,
        board: BoardState,
        opponent: Opponent,
        scheduler: Scheduler,
        config: Optional[ControllerConfig] = None,
    ) -> None:
        self.board = board
        self.opponent = opponent
        self.scheduler = scheduler
        self.cfg = config or ControllerConfig()

        self._first: Mark = self.cfg.first_mark
        self._robot_first: bool = self.cfg.robot_first
        self._rng = random.Random(self.cfg.seed)

        # Single outstanding reply; the generation invalidates captured closures
        self._task: Optional[ScheduledTask] = None
        self._generation = 0
        self._subscribed = False

        self.move: Observable[Optional[Move]] = Observable(None)
        self.status: Observable[Status] = Observable(Status.ongoing())
        self.whose_turn: Observable[Optional[Announcement]] = Observable(self._turn_announcement())
        self.winner_announcement: Observable[Optional[Announcement]] = Observable(None)
        self.winning_line: Observable[Optional[FrozenSet[Position]]] = Observable(None)

    # ============================================================
    # Turn policy
    # ============================================================

    @property
    def first_mark(self) -> Mark:
        return self._first

    @property
    def robot_first(self) -> bool:
        return self._robot_first

    @property
    def your_mark(self) -> Mark:
        return self._first.next() if self._robot_first else self._first

    @property
    def is_your_turn(self) -> bool:
        turn = self.board.turn
        if turn is None:
            return not self._robot_first
        return turn == self.your_mark

    @property
    def pending_reply(self) -> Optional[ScheduledTask]:
        task = self._task
        if task is None or task.cancelled or task.fired:
            return None
        return task

    def _next_mark(self) -> Mark:
        turn = self.board.turn
        return turn if turn is not None else self._first

    # ============================================================
    # Inputs
    # ============================================================

    def on_view_ready(self) -> None:
        """Start following the board. Runs the reaction for the current board at once."""
        with self.board.lock:
            if self._subscribed:
                return
            self._subscribed = True
            self.board.move.observe(self, self._on_board_moved)

    def attempt_human_move(self, position: Position) -> bool:
        """
        Place the human's mark at `position`.

        Returns:
            True if the board accepted the move. Out-of-turn or illegal
            attempts return False and change nothing.
        """
        with self.board.lock:
            if not self.is_your_turn:
                logger.debug("Ignored human move at %s: not your turn", position)
                return False
            return self.board.submit(Move(position, self._next_mark()))

    def reset_round(self) -> None:
        """Cancel any pending reply, flip who goes first, and clear the board."""
        with self.board.lock:
            self.cancel_pending()
            if self._robot_first:
                self._first = self._first.next()
            self._robot_first = not self._robot_first
            logger.info(
                "New round: %s first, you play %s",
                "computer" if self._robot_first else "you",
                self.your_mark.symbol(),
            )
            self.board.clear()

    def close(self) -> None:
        with self.board.lock:
            self.cancel_pending()
            self.board.move.remove(self)
            self._subscribed = False

    # ============================================================
    # Board reaction
    # ============================================================

    def _on_board_moved(self, move: Optional[Move]) -> None:
        self.move.value = move

        status = self.board.status
        if status.kind == StatusKind.ONGOING:
            self.whose_turn.value = self._turn_announcement()
            self.winner_announcement.value = None
            self.winning_line.value = None
        elif status.kind == StatusKind.WON:
            self.whose_turn.value = None
            self.winner_announcement.value = (
                Announcement.YOU_WIN if status.mark == self.your_mark else Announcement.YOU_LOSE
            )
            self.winning_line.value = status.line
            logger.info("Round over: %s\n%s", status, self.board.to_ascii())
        else:
            self.whose_turn.value = None
            self.winner_announcement.value = Announcement.DRAW
            self.winning_line.value = None
            logger.info("Round over: draw\n%s", self.board.to_ascii())
        self.status.value = status

        if status.is_ongoing and not self.is_your_turn:
            self._schedule_reply()

    def _turn_announcement(self) -> Announcement:
        return Announcement.YOUR_TURN if self.is_your_turn else Announcement.OPPONENTS_TURN

    # ============================================================
    # Computer reply
    # ============================================================

    def _schedule_reply(self) -> None:
        position = self.opponent.choose_move(self.board.snapshot())
        if position is None:
            logger.debug("Opponent declined to move")
            return

        self.cancel_pending()
        generation = self._generation
        delay = self._rng.uniform(*self.cfg.reply_delay)

        def reply() -> None:
            self._deliver_reply(generation, position)

        self._task = self.scheduler.after(delay, reply)
        logger.debug("Opponent reply at %s in %.2fs", position, delay)

    def _deliver_reply(self, generation: int, position: Position) -> None:
        with self.board.lock:
            # reset / reschedule since this reply was planned
            if generation != self._generation:
                return
            self._task = None
            if self.is_your_turn:
                return
            if not self.board.submit(Move(position, self._next_mark())):
                logger.warning("Opponent move at %s was rejected", position)

    def cancel_pending(self) -> None:
        """Cancel the outstanding computer reply, if any."""
        with self.board.lock:
            self._generation += 1
            if self._task is not None:
                self._task.cancel()
                self._task = None
