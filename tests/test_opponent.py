import random

import pytest

from noughts.ai.config import PRIORITY_BLOCK, PRIORITY_FORK, PRIORITY_WIN, OpponentLevelConfig
from noughts.ai.movegen import MoveGenerator, band_of
from noughts.ai.opponent import RandomOpponent, TacticalOpponent
from noughts.core.board import Mark, Position
from noughts.core.gamestate import GameState
from noughts.core.move import Move

O, X = Mark.NOUGHT, Mark.CROSS


def state_of(*sequence):
    return GameState.from_moves([Move(Position(*rc), mark) for rc, mark in sequence])


def test_empty_board_prefers_centre_then_corners():
    moves = MoveGenerator(GameState()).get_ordered_moves()
    assert moves[0] == Position(1, 1)
    assert set(moves[1:5]) == {Position(0, 0), Position(0, 2), Position(2, 0), Position(2, 2)}
    assert len(moves) == 9


def test_win_beats_block():
    # O to move: O can finish the top row, X threatens the middle row
    state = state_of(((0, 0), O), ((1, 1), X), ((0, 1), O), ((1, 0), X))
    ranked = MoveGenerator(state).get_prioritized_moves()
    assert ranked[0].position == Position(0, 2)
    assert ranked[0].priority >= PRIORITY_WIN


def test_block():
    state = state_of(((0, 0), O), ((1, 1), X), ((2, 2), O), ((1, 0), X))
    ranked = MoveGenerator(state).get_prioritized_moves()
    assert ranked[0].position == Position(1, 2)
    assert PRIORITY_BLOCK <= ranked[0].priority < PRIORITY_WIN


def test_max_moves_and_finished_game():
    assert len(MoveGenerator(GameState()).get_ordered_moves(max_moves=3)) == 3
    won = state_of(((0, 0), O), ((1, 1), X), ((0, 1), O), ((1, 2), X), ((0, 2), O))
    assert MoveGenerator(won).get_ordered_moves() == []


def test_random_opponent_picks_empty_cell():
    state = state_of(((0, 0), O), ((1, 1), X))
    opp = RandomOpponent(random.Random(7))
    for _ in range(20):
        assert opp.choose_move(state) in state.positions(Mark.EMPTY)


def test_random_opponent_declines_when_game_over():
    won = state_of(((0, 0), O), ((1, 1), X), ((0, 1), O), ((1, 2), X), ((0, 2), O))
    assert RandomOpponent().choose_move(won) is None


def test_tactical_opponent_takes_the_win():
    state = state_of(((0, 0), O), ((1, 1), X), ((0, 1), O), ((2, 1), X))
    assert TacticalOpponent(lvl=3).choose_move(state) == Position(0, 2)


def test_tactical_opponent_opening_is_centre():
    assert TacticalOpponent(lvl=3).choose_move(GameState()) == Position(1, 1)


def test_unknown_level():
    with pytest.raises(ValueError):
        TacticalOpponent(lvl=9)


def test_top_k_mixing_stays_inside_one_band():
    opp = TacticalOpponent(lvl=2, rng=random.Random(4))
    opp.cfg = OpponentLevelConfig(random_rate=0.0, randomize_top_k=2)
    assert {opp.choose_move(GameState()) for _ in range(30)} == {Position(1, 1)}

    corners = {Position(0, 0), Position(0, 2)}
    state = state_of(((1, 1), X))
    picks = {opp.choose_move(state) for _ in range(30)}
    assert picks <= corners


@pytest.mark.parametrize(
    "priority, band",
    [
        (PRIORITY_WIN + 300, PRIORITY_WIN),
        (PRIORITY_BLOCK + 100, PRIORITY_BLOCK),
        (PRIORITY_FORK + 200, PRIORITY_FORK),
        (300, 300),
        (100, 100),
    ],
)
def test_band_of(priority, band):
    assert band_of(priority) == band
