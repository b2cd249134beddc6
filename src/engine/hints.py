"""Rank empty cells by how few values remain for them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .board import EMPTY
from .constraints import valid_values_for_cell

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class HintCandidate:
    row: int
    col: int
    possibility_count: int

    def to_dict(self) -> dict:
        return {"row": self.row, "col": self.col, "possibility_count": self.possibility_count}


def rank_hint_candidates(
    user_board: Sequence[Sequence[int]], grid_size: Optional[int] = None
) -> List[HintCandidate]:
    """Every empty cell with at least one legal value, most constrained first.

    Cells with the same count keep their row-major order. Dead cells (no legal
    value) are left out since nothing can be played there.
    """

    size = len(user_board) if grid_size is None else grid_size
    candidates: List[HintCandidate] = []
    for r, line in enumerate(user_board[:size]):
        if not isinstance(line, (list, tuple)):
            _LOGGER.warning("row %d is missing; no hints taken from it", r)
            continue
        for c, value in enumerate(line[:size]):
            if value != EMPTY:
                continue
            count = len(valid_values_for_cell(user_board, r, c, size))
            if count:
                candidates.append(HintCandidate(r, c, count))
    candidates.sort(key=lambda hint: hint.possibility_count)
    return candidates


def top_hints(user_board: Sequence[Sequence[int]], grid_size: Optional[int] = None, count: int = 3) -> List[HintCandidate]:
    return rank_hint_candidates(user_board, grid_size)[: max(0, count)]


__all__ = ["HintCandidate", "rank_hint_candidates", "top_hints"]
