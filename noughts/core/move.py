from __future__ import annotations
from dataclasses import dataclass
from noughts.core.board import Mark, Position

@dataclass(frozen=True)
class Move:
    """Represents one placement on the board."""
    position: Position
    mark: Mark

    def __post_init__(self):
        if self.mark == Mark.EMPTY:
            raise ValueError("A move cannot place EMPTY")

    def __str__(self) -> str:
        return f"{self.mark.symbol()} at {self.position}"

@dataclass
class MoveResult:
    """Verdict on a proposed move: accepted, and whether it completes a line."""
    success: bool
    completes_line: bool = False
    error_message: str = ""

    @staticmethod
    def ok(*, completes_line: bool = False) -> "MoveResult":
        return MoveResult(success=True, completes_line=completes_line)

    @staticmethod
    def fail(msg: str) -> "MoveResult":
        return MoveResult(success=False, error_message=msg)
