from __future__ import annotations

import argparse
import logging
import queue
import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from noughts.ai.config import OPPONENT_LEVELS
from noughts.ai.opponent import Opponent, TacticalOpponent
from noughts.app.controller import Announcement, ControllerConfig, GameController
from noughts.app.scheduler import ManualScheduler, Scheduler, ThreadingScheduler
from noughts.core.board_state import BoardState
from noughts.core.gamestate import Status

logger = logging.getLogger(__name__)


# =========================
# Events (driver internal)
# =========================

class EventType(Enum):
    YOUR_TURN = "your_turn"
    ROUND_OVER = "round_over"


@dataclass(frozen=True)
class DriverEvent:
    type: EventType
    payload: object = None


class SelfPlayDriver:
    """
    Plays the human side with an Opponent of its own.

    Controller observers only enqueue events; the loop below handles them,
    so no move is made from inside another move's notification.
    """

    def __init__(
        self,
        controller: GameController,
        autopilot: Opponent,
        scheduler: Scheduler,
        tick_sec: float = 0.1,
    ) -> None:
        self.controller = controller
        self.autopilot = autopilot
        self.scheduler = scheduler
        self.tick_sec = tick_sec

        self._events: "queue.Queue[DriverEvent]" = queue.Queue()
        self.tally: Dict[str, int] = {"win": 0, "loss": 0, "draw": 0}

    def run(self, rounds: int) -> Dict[str, int]:
        self.controller.whose_turn.observe(self, self._on_whose_turn)
        self.controller.status.observe(self, self._on_status)
        self.controller.on_view_ready()

        played = 0
        while played < rounds:
            ev = self._next_event()
            if ev is None:
                continue

            if ev.type == EventType.YOUR_TURN:
                pos = self.autopilot.choose_move(self.controller.board.snapshot())
                if pos is not None:
                    self.controller.attempt_human_move(pos)
                continue

            played += 1
            self._record(played, ev.payload)  # type: ignore[arg-type]
            if played < rounds:
                self.controller.reset_round()

        self.controller.whose_turn.remove(self)
        self.controller.status.remove(self)
        self.controller.close()
        return self.tally

    # ---------- Event plumbing ----------

    def _on_whose_turn(self, announcement: Optional[Announcement]) -> None:
        if announcement == Announcement.YOUR_TURN:
            self._events.put(DriverEvent(EventType.YOUR_TURN))

    def _on_status(self, status: Status) -> None:
        if not status.is_ongoing:
            self._events.put(DriverEvent(EventType.ROUND_OVER, status))

    def _next_event(self) -> Optional[DriverEvent]:
        if isinstance(self.scheduler, ManualScheduler):
            try:
                return self._events.get_nowait()
            except queue.Empty:
                pass
            if self.scheduler.run_all() == 0 and self._events.empty():
                raise RuntimeError("Game stalled: no pending reply and no event")
            return None
        try:
            return self._events.get(timeout=self.tick_sec)
        except queue.Empty:
            return None

    def _record(self, number: int, status: Status) -> None:
        you = self.controller.your_mark
        if status.mark is None:
            key = "draw"
        elif status.mark == you:
            key = "win"
        else:
            key = "loss"
        self.tally[key] += 1
        print(f"Round {number}: you={you.symbol()} -> {status}")
        print(self.controller.board.to_ascii())


def main():
    ap = argparse.ArgumentParser(description="Headless noughts and crosses self-play")
    ap.add_argument("--rounds", type=int, default=2)
    ap.add_argument(
        "--level",
        type=int,
        default=3,
        choices=sorted(OPPONENT_LEVELS),
        help="Computer level (1-3)",
    )
    ap.add_argument(
        "--autopilot-level",
        type=int,
        default=2,
        choices=sorted(OPPONENT_LEVELS),
        help="Level of the player standing in for the human",
    )
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument(
        "--instant",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Use a virtual clock instead of real reply delays (default: True)",
    )
    ap.add_argument("--log-level", default="WARNING")
    args = ap.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    rng = random.Random(args.seed)
    scheduler: Scheduler = ManualScheduler() if args.instant else ThreadingScheduler()
    controller = GameController(
        BoardState(),
        TacticalOpponent(lvl=args.level, rng=random.Random(rng.getrandbits(32))),
        scheduler,
        ControllerConfig(seed=args.seed),
    )
    driver = SelfPlayDriver(
        controller,
        TacticalOpponent(lvl=args.autopilot_level, rng=random.Random(rng.getrandbits(32))),
        scheduler,
    )
    try:
        tally = driver.run(args.rounds)
    finally:
        if isinstance(scheduler, ThreadingScheduler):
            scheduler.shutdown()

    print(f"You: {tally['win']} won, {tally['loss']} lost, {tally['draw']} drawn")


if __name__ == "__main__":
    main()
