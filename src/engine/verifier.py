"""Compare a user board with the solution."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from .board import EMPTY, cell_at

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckResult:
    """Outcome of :func:`check`; the two flags are independent."""

    is_complete: bool
    is_correct: bool

    @property
    def is_win(self) -> bool:
        return self.is_complete and self.is_correct


def _row_width(board: Sequence[Sequence[int]], row: int) -> int:
    if row >= len(board):
        return 0
    line = board[row]
    if not isinstance(line, (list, tuple)):
        _LOGGER.warning("row %d is not a list of cells; treating it as empty", row)
        return 0
    return len(line)


def check(user_board: Sequence[Sequence[int]], solution_board: Sequence[Sequence[int]]) -> CheckResult:
    """Report whether ``user_board`` is filled in and whether its filled cells match.

    Cells missing from ``user_board`` count as empty; filled cells without a
    counterpart in ``solution_board`` count as wrong.
    """

    size = len(solution_board)
    if len(user_board) != size:
        _LOGGER.warning("user board has %d rows, solution has %d", len(user_board), size)

    is_complete = True
    is_correct = True
    for r in range(max(size, len(user_board))):
        width = max(_row_width(solution_board, r), _row_width(user_board, r))
        for c in range(width):
            value = cell_at(user_board, r, c)
            if value is None or value == EMPTY:
                is_complete = False
                continue
            if value != cell_at(solution_board, r, c):
                is_correct = False
    return CheckResult(is_complete=is_complete, is_correct=is_correct)


__all__ = ["CheckResult", "check"]
