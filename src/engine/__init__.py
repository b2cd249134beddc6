"""Variable-size Sudoku engine (4x4, 9x9, 16x16)."""

from __future__ import annotations

from .board import EMPTY, SUPPORTED_SIZES, BoardFormatError, BoardIssue, inspect_board
from .constraints import invalid_values_for_cell, valid_values_for_cell
from .generator import Difficulty, Puzzle, generate
from .glyphs import display_value, internal_value_from_key
from .hints import HintCandidate, rank_hint_candidates, top_hints
from .solver import count_solutions, has_unique_solution, solve
from .verifier import CheckResult, check

__all__ = [
    "BoardFormatError",
    "BoardIssue",
    "CheckResult",
    "Difficulty",
    "EMPTY",
    "HintCandidate",
    "Puzzle",
    "SUPPORTED_SIZES",
    "check",
    "count_solutions",
    "display_value",
    "generate",
    "has_unique_solution",
    "inspect_board",
    "internal_value_from_key",
    "invalid_values_for_cell",
    "rank_hint_candidates",
    "solve",
    "top_hints",
    "valid_values_for_cell",
]
