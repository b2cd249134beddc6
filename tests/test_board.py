from __future__ import annotations

import pytest

from engine.board import (
    EMPTY,
    BoardFormatError,
    count_clues,
    format_grid,
    from_string,
    inspect_board,
    is_solved_grid,
    is_supported_size,
    new_board,
    subgrid_size,
    to_string,
)

SOLVED_9 = (
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


def test_subgrid_sizes() -> None:
    assert subgrid_size(4) == 2
    assert subgrid_size(9) == 3
    assert subgrid_size(16) == 4
    assert subgrid_size(10) == 0
    assert subgrid_size(0) == 0


def test_supported_sizes_only() -> None:
    assert all(is_supported_size(n) for n in (4, 9, 16))
    assert not is_supported_size(25)
    assert not is_supported_size(True)
    assert not is_supported_size("9")


def test_from_string_uses_zero_indexed_values() -> None:
    board = from_string(SOLVED_9)
    assert len(board) == 9
    assert board[0][:3] == [0, 1, 2]
    assert board[8][8] == 1
    assert to_string(board) == SOLVED_9


def test_from_string_reads_empty_cells_and_hex() -> None:
    board = from_string("1.3." "0..." "...." "...4")
    assert board[0] == [0, EMPTY, 2, EMPTY]
    assert board[1][0] == EMPTY
    assert board[3][3] == 3

    hex_board = from_string("0F" + "." * 254)
    assert hex_board[0][:3] == [0, 15, EMPTY]
    assert to_string(hex_board).startswith("0F.")


@pytest.mark.parametrize(
    "text",
    ["123", "12345" + "." * 11, "1.3x" + "." * 12, "." * 25],
)
def test_from_string_rejects_bad_input(text: str) -> None:
    with pytest.raises(BoardFormatError):
        from_string(text)


def test_is_solved_grid() -> None:
    board = from_string(SOLVED_9)
    assert is_solved_grid(board)
    board[0][0], board[0][1] = board[0][1], board[0][0]
    assert not is_solved_grid(board)
    assert not is_solved_grid(new_board(4))


def test_count_clues() -> None:
    board = new_board(4)
    assert count_clues(board) == 0
    board[1][2] = 3
    assert count_clues(board) == 1


def test_inspect_board_accepts_well_formed() -> None:
    assert inspect_board(from_string(SOLVED_9), 9) == []
    assert inspect_board(new_board(16)) == []


def test_inspect_board_reports_shape_problems() -> None:
    board = new_board(9)
    board[3] = board[3][:5]
    board[4][2] = 42
    issues = inspect_board(board[:8], 9)
    codes = {issue.code for issue in issues}
    assert codes == {"board.rows", "board.row.length", "board.cell.value"}
    assert any(issue.path == "$[3]" for issue in issues)
    assert any(issue.path == "$[4][2]" and issue.severity == "WARN" for issue in issues)


def test_inspect_board_rejects_non_lists() -> None:
    issues = inspect_board("not a board")
    assert [issue.code for issue in issues] == ["board.type"]


def test_format_grid_draws_subgrid_borders() -> None:
    board = from_string("1..." ".2.." "..3." "...4")
    text = format_grid(board)
    lines = text.splitlines()
    assert lines[0] == "+-----+-----+"
    assert lines[1] == "| 1 . | . . |"
    assert lines[3] == "+-----+-----+"
    assert lines[-1] == "+-----+-----+"
    assert len(lines) == 7
