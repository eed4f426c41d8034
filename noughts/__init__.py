"""
noughts: a tic-tac-toe board engine with a timed computer opponent.
"""

from noughts.core.board import Mark, Position, ALL_POSITIONS, WINNING_LINES
from noughts.core.move import Move
from noughts.core.gamestate import GameState, Status, StatusKind
from noughts.core.board_state import BoardState
from noughts.app.controller import GameController, ControllerConfig, Announcement
