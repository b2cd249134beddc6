"""Peer-conflict queries over a board.

A cell's peers are the other cells of its row, column and subgrid. Missing
rows or cells contribute no constraint; these queries never raise on a
malformed board.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Set

from .board import EMPTY, cell_at, subgrid_size

_LOGGER = logging.getLogger(__name__)


def _resolve_size(board: Sequence[Sequence[int]], grid_size: Optional[int]) -> int:
    return len(board) if grid_size is None else grid_size


def invalid_values_for_cell(
    board: Sequence[Sequence[int]],
    row: int,
    col: int,
    grid_size: Optional[int] = None,
) -> Set[int]:
    """Return the values already taken by a peer of ``(row, col)``."""

    size = _resolve_size(board, grid_size)
    if len(board) != size:
        _LOGGER.warning("board has %d rows, expected %d; missing peers are ignored", len(board), size)

    taken: Set[int] = set()

    def _collect(r: int, c: int) -> None:
        value = cell_at(board, r, c)
        if value is not None and value != EMPTY:
            taken.add(value)

    for i in range(size):
        if i != col:
            _collect(row, i)
        if i != row:
            _collect(i, col)

    box = subgrid_size(size)
    if box:
        start_row = (row // box) * box
        start_col = (col // box) * box
        for r in range(start_row, start_row + box):
            for c in range(start_col, start_col + box):
                if r == row or c == col:
                    continue  # already covered by the row/column scan
                _collect(r, c)
    else:
        _LOGGER.warning("grid size %d has no square subgrid; only rows and columns are checked", size)
    return taken


def valid_values_for_cell(
    board: Sequence[Sequence[int]],
    row: int,
    col: int,
    grid_size: Optional[int] = None,
) -> List[int]:
    """Return the values in ``[0, N-1]`` with no peer conflict, ascending.

    If the board is not ``grid_size`` rows tall or the cell itself is missing,
    the full range is returned so interactive filtering keeps working.
    """

    size = _resolve_size(board, grid_size)
    full = list(range(max(0, size)))
    if len(board) != size or cell_at(board, row, col) is None:
        _LOGGER.warning(
            "cell (%d, %d) is not addressable on a %d-row board of expected size %d; treating it as unconstrained",
            row,
            col,
            len(board),
            size,
        )
        return full

    taken = invalid_values_for_cell(board, row, col, size)
    return [value for value in full if value not in taken]


def is_valid_placement(
    board: Sequence[Sequence[int]],
    row: int,
    col: int,
    value: int,
    grid_size: Optional[int] = None,
) -> bool:
    """True if ``value`` at ``(row, col)`` clashes with no peer."""

    return value not in invalid_values_for_cell(board, row, col, grid_size)


__all__ = ["invalid_values_for_cell", "is_valid_placement", "valid_values_for_cell"]
