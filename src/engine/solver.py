"""Randomized backtracking solver and a solution counter.

Row, column and subgrid occupancy is tracked as bitmasks (value ``v`` is bit
``1 << v``) so candidate checks stay cheap on 16x16 boards.
"""

from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence, Tuple, Union

from .board import EMPTY, Board, subgrid_size

_LOGGER = logging.getLogger(__name__)

RandomSource = Union[random.Random, int, str, None]


def as_rng(source: RandomSource) -> random.Random:
    """Return ``source`` if it already is a generator, else a generator seeded with it."""

    if isinstance(source, random.Random):
        return source
    return random.Random(source)


class _Masks:
    def __init__(self, size: int, box: int) -> None:
        self.box = box
        self.rows = [0] * size
        self.cols = [0] * size
        self.boxes = [0] * size

    def bidx(self, r: int, c: int) -> int:
        return (r // self.box) * self.box + c // self.box

    def used(self, r: int, c: int) -> int:
        return self.rows[r] | self.cols[c] | self.boxes[self.bidx(r, c)]

    def place(self, r: int, c: int, value: int) -> None:
        bit = 1 << value
        self.rows[r] |= bit
        self.cols[c] |= bit
        self.boxes[self.bidx(r, c)] |= bit

    def unplace(self, r: int, c: int, value: int) -> None:
        bit = 1 << value
        self.rows[r] &= ~bit
        self.cols[c] &= ~bit
        self.boxes[self.bidx(r, c)] &= ~bit


def _prepare(board: Sequence[Sequence[int]]) -> Optional[Tuple[_Masks, List[Tuple[int, int]]]]:
    """Build occupancy masks and the row-major list of empty cells.

    Returns ``None`` for malformed boards and for givens that already clash.
    """

    size = len(board)
    box = subgrid_size(size)
    if not box or any(len(line) != size for line in board):
        _LOGGER.warning("cannot solve a board of shape %dx%s", size, [len(line) for line in board][:1])
        return None

    masks = _Masks(size, box)
    empties: List[Tuple[int, int]] = []
    for r in range(size):
        for c in range(size):
            value = board[r][c]
            if value == EMPTY:
                empties.append((r, c))
                continue
            if not 0 <= value < size:
                _LOGGER.warning("value %r at (%d, %d) is out of range", value, r, c)
                return None
            if masks.used(r, c) & (1 << value):
                _LOGGER.debug("givens clash at (%d, %d)", r, c)
                return None
            masks.place(r, c, value)
    return masks, empties


def solve(board: Board, rng: RandomSource = None, *, node_limit: Optional[int] = None) -> bool:
    """Fill ``board`` in place with a complete valid assignment.

    Cells are taken in row-major order and each one tries a fresh random
    permutation of ``[0, N-1]``. Returns ``False`` (leaving the board as it
    was) when no assignment exists or when more than ``node_limit`` cells
    have been visited.
    """

    prepared = _prepare(board)
    if prepared is None:
        return False
    masks, empties = prepared
    size = len(board)
    generator = as_rng(rng)
    values = list(range(size))
    nodes = 0

    def _search(i: int) -> bool:
        nonlocal nodes
        if i == len(empties):
            return True
        if node_limit and nodes >= node_limit:
            return False
        nodes += 1

        r, c = empties[i]
        order = values[:]
        generator.shuffle(order)
        for value in order:
            if masks.used(r, c) & (1 << value):
                continue
            board[r][c] = value
            masks.place(r, c, value)
            if _search(i + 1):
                return True
            masks.unplace(r, c, value)
            board[r][c] = EMPTY
        return False

    solved = _search(0)
    if not solved and node_limit and nodes >= node_limit:
        _LOGGER.debug("solver gave up after %d nodes on a %dx%d board", nodes, size, size)
    return solved


def count_solutions(board: Sequence[Sequence[int]], limit: int = 2) -> int:
    """Count completions of ``board``, stopping once ``limit`` is reached.

    The caller's board is not modified. Cells are chosen by fewest
    remaining candidates.
    """

    prepared = _prepare(board)
    if prepared is None:
        return 0
    masks, empties = prepared
    size = len(board)
    full = (1 << size) - 1
    open_cells = set(empties)
    found = 0

    def _pick() -> Tuple[Tuple[int, int], int]:
        best: Tuple[int, int] = next(iter(open_cells))
        best_mask = full & ~masks.used(*best)
        best_count = best_mask.bit_count()
        for cell in open_cells:
            mask = full & ~masks.used(*cell)
            count = mask.bit_count()
            if count < best_count:
                best, best_mask, best_count = cell, mask, count
                if count <= 1:
                    break
        return best, best_mask

    def _search() -> None:
        nonlocal found
        if found >= limit:
            return
        if not open_cells:
            found += 1
            return
        (r, c), mask = _pick()
        if not mask:
            return
        open_cells.remove((r, c))
        for value in range(size):
            if not mask & (1 << value):
                continue
            masks.place(r, c, value)
            _search()
            masks.unplace(r, c, value)
            if found >= limit:
                break
        open_cells.add((r, c))

    _search()
    return found


def has_unique_solution(board: Sequence[Sequence[int]]) -> bool:
    return count_solutions(board, limit=2) == 1


__all__ = ["RandomSource", "as_rng", "count_solutions", "has_unique_solution", "solve"]
