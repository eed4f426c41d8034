import logging

import numpy as np
import pytest

from noughts.core.board import ALL_POSITIONS, Mark, Position
from noughts.core.board_state import BoardState
from noughts.core.gamestate import Status, StatusKind
from noughts.core.move import Move

O, X = Mark.NOUGHT, Mark.CROSS

DRAW_SEQUENCE = [
    ((0, 1), X), ((0, 0), O), ((1, 0), X), ((0, 2), O), ((1, 2), X),
    ((1, 1), O), ((2, 0), X), ((2, 1), O), ((2, 2), X),
]


def play(board, sequence):
    return [board.submit(Move(Position(*rc), mark)) for rc, mark in sequence]


@pytest.fixture
def board():
    return BoardState()


def test_empty_board(board):
    assert board.turn is None
    assert board.status == Status.ongoing()
    assert [board.cells_at(r) for r in range(3)] == [[Mark.EMPTY] * 3] * 3
    assert board.positions(Mark.EMPTY) == ALL_POSITIONS
    assert board.positions(O) == frozenset()


def test_first_move_fixes_alternation(board):
    assert board.submit(Move(Position(1, 1), X))
    assert board.turn == O
    assert not board.submit(Move(Position(0, 0), X))
    assert board.submit(Move(Position(0, 0), O))
    assert board.turn == X
    marks = [m.mark for m in board.moves]
    assert all(b == a.next() for a, b in zip(marks, marks[1:]))


def test_cells_replay_history(board):
    play(board, [((0, 0), O), ((2, 1), X)])
    assert board.cells_at(0) == [O, Mark.EMPTY, Mark.EMPTY]
    assert board[2] == [Mark.EMPTY, X, Mark.EMPTY]
    assert board.cell(Position(2, 1)) == X


def test_cells_at_rejects_bad_row(board):
    with pytest.raises(ValueError):
        board.cells_at(3)


def test_occupied_cell_is_rejected(board):
    board.submit(Move(Position(0, 0), O))
    before = board.moves
    assert not board.submit(Move(Position(0, 0), X))
    assert board.moves == before
    assert len(board) == 1


def test_occupied_positions_match_history(board):
    play(board, DRAW_SEQUENCE[:6])
    occupied = board.positions(O) | board.positions(X)
    assert occupied == frozenset(m.position for m in board.moves)
    assert len(occupied) == len(board.moves)
    assert not (board.positions(O) & board.positions(X))


def test_win_on_top_row(board):
    play(board, [((0, 0), O), ((1, 1), X), ((0, 1), O), ((1, 2), X), ((0, 2), O)])
    assert board.status == Status.won(O, frozenset({Position(0, 0), Position(0, 1), Position(0, 2)}))
    assert board.status.kind == StatusKind.WON


def test_no_moves_after_win(board):
    play(board, [((0, 0), O), ((1, 1), X), ((0, 1), O), ((1, 2), X), ((0, 2), O)])
    before = board.moves
    assert not board.submit(Move(Position(2, 2), X))
    assert not board.submit(Move(Position(1, 1), X))
    assert board.moves == before


def test_draw(board):
    assert all(play(board, DRAW_SEQUENCE))
    assert board.status == Status.drawn()
    assert board.positions(Mark.EMPTY) == frozenset()
    assert not board.submit(Move(Position(0, 0), O))


def test_win_on_last_cell_is_not_a_draw(board):
    play(board, [
        ((0, 0), O), ((0, 1), X), ((0, 2), O),
        ((1, 1), X), ((1, 2), O), ((1, 0), X),
        ((2, 1), O), ((2, 0), X), ((2, 2), O),
    ])
    assert len(board) == 9
    status = board.status
    assert status.kind == StatusKind.WON
    assert status.mark == O
    assert status.line == frozenset({Position(0, 2), Position(1, 2), Position(2, 2)})


def test_positions_empty_after_one_move(board):
    assert len(board.positions(Mark.EMPTY)) == 9
    board.submit(Move(Position(2, 2), O))
    empties = board.positions(Mark.EMPTY)
    assert Position(2, 2) not in empties
    assert len(empties) == 8


def test_clear(board):
    play(board, DRAW_SEQUENCE[:4])
    board.clear()
    assert board.turn is None
    assert board.status.is_ongoing
    assert all(cell == Mark.EMPTY for r in range(3) for cell in board.cells_at(r))
    assert board.submit(Move(Position(0, 0), O))


def test_move_events(board):
    seen = []
    board.move.observe(seen, seen.append)
    move = Move(Position(0, 0), O)
    board.submit(move)
    board.submit(Move(Position(0, 0), X))
    board.clear()
    assert seen == [None, move, None]


def test_snapshot_and_array(board):
    play(board, [((0, 0), O), ((1, 1), X)])
    state = board.snapshot()
    assert state.turn == O
    assert state.cell(Position(1, 1)) == X
    assert state.empty_positions()[0] == Position(0, 1)
    np.testing.assert_array_equal(
        board.to_array(), np.array([[1, 0, 0], [0, 2, 0], [0, 0, 0]], dtype=np.int8)
    )
    board.submit(Move(Position(2, 2), O))
    assert len(state.moves) == 2


def test_to_ascii(board):
    play(board, [((0, 0), O), ((1, 1), X)])
    assert board.to_ascii() == "O . .\n. X .\n. . ."


def test_validator_flags_line_completing_move(board):
    play(board, [((0, 0), O), ((1, 1), X), ((0, 1), O), ((1, 2), X)])
    finishing = board.validator.validate(board.moves, Move(Position(0, 2), O))
    quiet = board.validator.validate(board.moves, Move(Position(2, 2), O))
    assert finishing.success and finishing.completes_line
    assert quiet.success and not quiet.completes_line


def test_line_completing_submit_is_logged(board, caplog):
    play(board, [((0, 0), O), ((1, 1), X), ((0, 1), O), ((1, 2), X)])
    with caplog.at_level(logging.INFO, logger="noughts.core.board_state"):
        board.submit(Move(Position(2, 2), O))
        assert "completes a line" not in caplog.text
        board.submit(Move(Position(1, 0), X))
        assert "completes a line" in caplog.text
