from __future__ import annotations

import pytest

from sudoku_dfs import GPos, OutOfRangeError, SolverInvariantError, SudokuBoard
from sudoku_dfs.board import ALL_POSITIONS, FLAG_COUNT, bit_index
from sudoku_dfs.grid_io import board_from_clues, parse_puzzle

SOLVED_GRID = (
    "123456789"
    "456789123"
    "789123456"
    "214365897"
    "365897214"
    "897214365"
    "531642978"
    "642978531"
    "978531642"
)


def _narrow(board: SudokuBoard, pos: GPos, keep: set[int]) -> None:
    for value in range(1, 10):
        board.set_possible(pos, value, value in keep)


def test_fresh_board_has_every_candidate() -> None:
    board = SudokuBoard()
    assert board.remaining_flags() == FLAG_COUNT
    for pos in ALL_POSITIONS:
        assert board.candidate_count(pos) == 9
        assert board.only_value(pos) is None
        assert board.candidates(pos) == list(range(1, 10))
    assert not board.is_solved()
    assert not board.has_contradiction()


def test_bit_index_is_a_bijection() -> None:
    indices = {bit_index(pos, value) for pos in ALL_POSITIONS for value in range(1, 10)}
    assert indices == set(range(FLAG_COUNT))
    assert bit_index(GPos(0, 0), 1) == 0
    assert bit_index(GPos(1, 0), 1) == 9
    assert bit_index(GPos(0, 1), 9) == 89


def test_set_possible_round_trip_and_change_report() -> None:
    board = SudokuBoard()
    pos = GPos(3, 7)
    assert board.set_possible(pos, 4, False) is True
    assert board.is_possible(pos, 4) is False
    assert board.set_possible(pos, 4, False) is False
    assert board.set_possible(pos, 4, True) is True
    assert board.is_possible(pos, 4) is True
    assert board.set_possible(pos, 4, True) is False


def test_set_possible_touches_a_single_flag() -> None:
    board = SudokuBoard()
    board.set_possible(GPos(4, 4), 5, False)
    assert board.remaining_flags() == FLAG_COUNT - 1
    assert board.is_possible(GPos(4, 4), 4)
    assert board.is_possible(GPos(5, 4), 5)
    assert board.is_possible(GPos(4, 5), 5)


@pytest.mark.parametrize("value", [0, 10, -1, 1.5, "3"])
def test_out_of_range_values_are_rejected(value: int) -> None:
    board = SudokuBoard()
    pos = GPos(0, 0)
    with pytest.raises(OutOfRangeError):
        board.is_possible(pos, value)
    with pytest.raises(OutOfRangeError):
        board.set_possible(pos, value, True)
    with pytest.raises(OutOfRangeError):
        board.force_value(pos, value, True)


def test_positions_outside_the_grid_are_rejected() -> None:
    with pytest.raises(OutOfRangeError):
        GPos(9, 0)
    with pytest.raises(OutOfRangeError):
        GPos(0, -1)
    with pytest.raises(OutOfRangeError):
        GPos.from_index(81)


def test_position_helpers() -> None:
    pos = GPos(7, 4)
    assert pos.index == 43
    assert pos.chunk == 2 + 3 * 1
    assert GPos.from_index(43) == pos
    assert ALL_POSITIONS[0] == GPos(0, 0)
    assert ALL_POSITIONS[9] == GPos(0, 1)


def test_forcing_sets_only_value_even_when_cleared() -> None:
    board = SudokuBoard()
    pos = GPos(2, 2)
    board.set_possible(pos, 6, False)
    board.force_value(pos, 6, True)
    assert board.only_value(pos) == 6
    assert board.candidates(pos) == [6]


def test_non_forcing_keeps_a_live_value() -> None:
    board = SudokuBoard()
    pos = GPos(2, 2)
    board.force_value(pos, 6, False)
    assert board.only_value(pos) == 6
    assert board.cell_info(pos) == (6, 1)


def test_non_forcing_on_a_dead_value_empties_the_cell() -> None:
    board = SudokuBoard()
    pos = GPos(2, 2)
    board.set_possible(pos, 6, False)
    board.force_value(pos, 6, False)
    assert board.candidate_count(pos) == 0
    assert board.only_value(pos) is None
    assert board.has_contradiction()


def test_solved_board_queries() -> None:
    board = board_from_clues(parse_puzzle(SOLVED_GRID))
    assert board.is_solved()
    assert not board.has_contradiction()
    assert board.to_string() == SOLVED_GRID
    assert board.to_grid()[3] == [2, 1, 4, 3, 6, 5, 8, 9, 7]


def test_snapshot_restore_is_exact() -> None:
    board = board_from_clues(parse_puzzle(SOLVED_GRID[:40] + "0" * 41))
    saved = board.snapshot()
    digest = board.state_hash()

    board.force_value(GPos(8, 8), 1, True)
    board.set_possible(GPos(0, 8), 3, False)
    assert board.snapshot() != saved

    board.restore(saved)
    assert board.snapshot() == saved
    assert board.state_hash() == digest
    assert SudokuBoard.from_snapshot(saved) == board


def test_copy_is_independent() -> None:
    board = SudokuBoard()
    clone = board.copy()
    clone.force_value(GPos(0, 0), 1, True)
    assert board.candidate_count(GPos(0, 0)) == 9
    assert clone != board


def test_restore_rejects_foreign_state() -> None:
    with pytest.raises(OutOfRangeError):
        SudokuBoard().restore(1 << FLAG_COUNT)


def test_mrv_picks_fewest_candidates_first_in_row_major_order() -> None:
    board = SudokuBoard()
    board.force_value(GPos(0, 0), 1, True)
    _narrow(board, GPos(5, 2), {1, 2, 3})
    _narrow(board, GPos(1, 4), {4, 5, 6})
    _narrow(board, GPos(7, 7), {8, 9})
    _narrow(board, GPos(2, 7), {1, 9})
    _narrow(board, GPos(0, 8), {2, 3})

    for _ in range(3):
        assert board.find_mrv_cell() == (GPos(2, 7), 2)


def test_mrv_reports_an_empty_cell_immediately() -> None:
    board = SudokuBoard()
    _narrow(board, GPos(6, 3), set())
    assert board.find_mrv_cell() == (GPos(6, 3), 0)


def test_mrv_on_a_solved_board_is_an_invariant_violation() -> None:
    board = board_from_clues(parse_puzzle(SOLVED_GRID))
    with pytest.raises(SolverInvariantError):
        board.find_mrv_cell()
