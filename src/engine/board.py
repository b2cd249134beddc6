"""Board model: the grid shape, the EMPTY sentinel and text helpers."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

_LOGGER = logging.getLogger(__name__)

EMPTY = -1
SUPPORTED_SIZES = (4, 9, 16)
HEX_CHARS = "0123456789ABCDEF"

SEVERITY_ERROR = "ERROR"
SEVERITY_WARN = "WARN"

Board = List[List[int]]


class BoardFormatError(ValueError):
    """Raised when a text board cannot be parsed."""


@dataclass(frozen=True)
class BoardIssue:
    """Single shape problem found in a board argument."""

    code: str
    msg: str
    path: str
    severity: str


def is_supported_size(grid_size: object) -> bool:
    return isinstance(grid_size, int) and not isinstance(grid_size, bool) and grid_size in SUPPORTED_SIZES


def subgrid_size(grid_size: int) -> int:
    """Return the side of a subgrid, or 0 when ``grid_size`` is not a perfect square."""

    if grid_size <= 0:
        return 0
    root = math.isqrt(grid_size)
    return root if root * root == grid_size else 0


def new_board(grid_size: int, fill: int = EMPTY) -> Board:
    return [[fill] * grid_size for _ in range(grid_size)]


def copy_board(board: Sequence[Sequence[int]]) -> Board:
    return [list(row) for row in board]


def cell_at(board: Sequence[Sequence[int]], row: int, col: int) -> Optional[int]:
    """Return the cell value, or ``None`` if the row or cell is missing."""

    if row < 0 or col < 0 or row >= len(board):
        return None
    line = board[row]
    if not isinstance(line, (list, tuple)) or col >= len(line):
        return None
    return line[col]


def inspect_board(board: object, grid_size: Optional[int] = None) -> List[BoardIssue]:
    """Describe every way ``board`` deviates from a square grid of ``grid_size``.

    An empty list means the board is well formed. ``grid_size`` defaults to the
    number of rows.
    """

    issues: List[BoardIssue] = []
    if not isinstance(board, (list, tuple)):
        issues.append(BoardIssue("board.type", "board must be a list of rows", "$", SEVERITY_ERROR))
        return issues

    size = len(board) if grid_size is None else grid_size
    if not is_supported_size(size):
        issues.append(
            BoardIssue("board.size", f"grid size {size!r} is not one of {SUPPORTED_SIZES}", "$", SEVERITY_ERROR)
        )
    if len(board) != size:
        issues.append(
            BoardIssue("board.rows", f"expected {size} rows, found {len(board)}", "$", SEVERITY_ERROR)
        )

    for r, line in enumerate(board):
        path = f"$[{r}]"
        if not isinstance(line, (list, tuple)):
            issues.append(BoardIssue("board.row.type", "row must be a list of cells", path, SEVERITY_ERROR))
            continue
        if len(line) != size:
            issues.append(
                BoardIssue("board.row.length", f"expected {size} cells, found {len(line)}", path, SEVERITY_ERROR)
            )
        for c, value in enumerate(line):
            if value == EMPTY:
                continue
            if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value < size:
                issues.append(
                    BoardIssue("board.cell.value", f"value {value!r} is out of range", f"{path}[{c}]", SEVERITY_WARN)
                )
    return issues


def log_issues(issues: Sequence[BoardIssue], context: str) -> None:
    for issue in issues:
        _LOGGER.warning("%s: %s at %s (%s)", context, issue.msg, issue.path, issue.code)


def count_clues(board: Sequence[Sequence[int]]) -> int:
    return sum(1 for line in board for value in line if value != EMPTY)


def is_solved_grid(board: Sequence[Sequence[int]]) -> bool:
    """True when every row, column and subgrid holds each value exactly once."""

    size = len(board)
    box = subgrid_size(size)
    if not box or any(len(line) != size for line in board):
        return False
    expected = set(range(size))
    for i in range(size):
        if set(board[i]) != expected:
            return False
        if {board[r][i] for r in range(size)} != expected:
            return False
    for br in range(0, size, box):
        for bc in range(0, size, box):
            block = {board[r][c] for r in range(br, br + box) for c in range(bc, bc + box)}
            if block != expected:
                return False
    return True


def _glyph(value: int, grid_size: int) -> str:
    if value == EMPTY:
        return "."
    if grid_size == 16:
        return HEX_CHARS[value]
    return str(value + 1)


def to_string(board: Sequence[Sequence[int]]) -> str:
    """Row-major glyph string with ``.`` for empty cells."""

    size = len(board)
    return "".join(_glyph(value, size) for line in board for value in line)


def from_string(text: str, grid_size: Optional[int] = None) -> Board:
    """Parse a row-major glyph string; ``grid_size`` is inferred from the length if omitted.

    ``.`` marks an empty cell, and so does ``0`` for sizes other than 16.
    """

    s = "".join(text.split())
    if grid_size is None:
        grid_size = math.isqrt(len(s))
    if not is_supported_size(grid_size):
        raise BoardFormatError(f"unsupported grid size {grid_size} (expected one of {SUPPORTED_SIZES})")
    if len(s) != grid_size * grid_size:
        raise BoardFormatError(f"expected {grid_size * grid_size} cells, got {len(s)}")

    board = new_board(grid_size)
    for k, ch in enumerate(s.upper()):
        r, c = divmod(k, grid_size)
        if ch == "." or (ch == "0" and grid_size != 16):
            continue
        if grid_size == 16:
            value = HEX_CHARS.find(ch)
        else:
            value = int(ch) - 1 if ch.isdigit() else -1
        if not 0 <= value < grid_size:
            raise BoardFormatError(f"invalid symbol {ch!r} at row {r + 1}, column {c + 1}")
        board[r][c] = value
    return board


def format_grid(board: Sequence[Sequence[int]]) -> str:
    """Render ``board`` as boxed text, one subgrid per bordered block."""

    size = len(board)
    box = subgrid_size(size) or size or 1
    segment = "-" * (box * 2 + 1)
    border = "+" + "+".join([segment] * max(1, size // box)) + "+"
    lines = []
    for r in range(size):
        if r % box == 0:
            lines.append(border)
        cells = []
        for c in range(size):
            if c % box == 0:
                cells.append("|")
            cells.append(_glyph(board[r][c], size))
        lines.append(" ".join(cells) + " |")
    lines.append(border)
    return "\n".join(lines)


__all__ = [
    "Board",
    "BoardFormatError",
    "BoardIssue",
    "EMPTY",
    "HEX_CHARS",
    "SUPPORTED_SIZES",
    "cell_at",
    "copy_board",
    "count_clues",
    "format_grid",
    "from_string",
    "inspect_board",
    "is_solved_grid",
    "is_supported_size",
    "log_issues",
    "new_board",
    "subgrid_size",
    "to_string",
]
