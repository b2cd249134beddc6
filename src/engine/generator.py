"""Puzzle generation: a random full solution, then clue removal to a difficulty target.

Removal does not check that the puzzle keeps a unique solution; some puzzles
are ambiguous. :func:`engine.solver.has_unique_solution` reports on that
separately.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from project_config import get_config, size_keyed

from .board import EMPTY, Board, copy_board, count_clues, is_supported_size, new_board, subgrid_size
from .solver import RandomSource, as_rng, solve

_LOGGER = logging.getLogger(__name__)

DEFAULT_GRID_SIZE = 9


class Difficulty(str, enum.Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    ULTRA = "Ultra"

    @classmethod
    def parse(cls, value: Union["Difficulty", str, None]) -> Optional["Difficulty"]:
        """Case-insensitive lookup by value or name; ``None`` when unknown."""

        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        key = value.strip().lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        return None


DifficultyLike = Union[Difficulty, str]

_DEFAULT_REMOVAL: Dict[int, Dict[str, float]] = {
    4: {"easy": 0.35, "medium": 0.5, "default": 0.6},
    9: {"easy": 0.48, "medium": 0.58, "default": 0.66},
    16: {"easy": 0.5, "default": 0.6},
}
_DEFAULT_ULTRA_CLUES: Dict[int, int] = {4: 4, 9: 17, 16: 55}
_DEFAULT_MIN_CLUES: Dict[int, int] = {4: 5, 9: 22, 16: 60}

CONFIG = get_config()
GENERATOR_CONFIG = CONFIG.get("generator", {})

FULL_SOLUTION_CONFIG = GENERATOR_CONFIG.get("full_solution", {})
SOLVER_ATTEMPTS = max(1, int(FULL_SOLUTION_CONFIG.get("attempts", 5)))
SOLVER_NODE_LIMIT = max(0, int(FULL_SOLUTION_CONFIG.get("node_limit", 250000)))
REMOVAL_ATTEMPT_FACTOR = max(1, int(GENERATOR_CONFIG.get("removal_attempt_factor", 10)))

REMOVAL_PERCENTAGES: Dict[int, Dict[str, float]] = {
    size: {**_DEFAULT_REMOVAL.get(size, {}), **{str(k).lower(): float(v) for k, v in table.items()}}
    for size, table in {**_DEFAULT_REMOVAL, **size_keyed(GENERATOR_CONFIG.get("removal"))}.items()
    if isinstance(table, dict)
}
ULTRA_CLUES: Dict[int, int] = {
    **_DEFAULT_ULTRA_CLUES,
    **{size: int(v) for size, v in size_keyed(GENERATOR_CONFIG.get("ultra_clues")).items()},
}
MIN_CLUES: Dict[int, int] = {
    **_DEFAULT_MIN_CLUES,
    **{size: int(v) for size, v in size_keyed(GENERATOR_CONFIG.get("min_clues")).items()},
}


@dataclass(frozen=True)
class Puzzle:
    """An initial (clue) board together with its solution."""

    initial: Board
    solution: Board
    grid_size: int
    difficulty: Optional[Difficulty]
    used_fallback: bool = False

    @property
    def clues(self) -> int:
        return count_clues(self.initial)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "grid_size": self.grid_size,
            "difficulty": self.difficulty.value if self.difficulty else None,
            "initial": copy_board(self.initial),
            "solution": copy_board(self.solution),
            "clues": self.clues,
            "used_fallback": self.used_fallback,
        }


def removal_percentage(grid_size: int, difficulty: DifficultyLike) -> float:
    table = REMOVAL_PERCENTAGES.get(grid_size, {})
    parsed = Difficulty.parse(difficulty)
    key = parsed.value.lower() if parsed else ""
    if key in table:
        return table[key]
    return table.get("default", 0.6)


def target_clues(grid_size: int, difficulty: DifficultyLike) -> int:
    """Number of clues to leave for ``grid_size`` at ``difficulty``.

    Ultra uses a fixed near-minimum count; every other difficulty removes a
    share of the cells and is then raised to the per-size floor.
    """

    total = grid_size * grid_size
    if Difficulty.parse(difficulty) is Difficulty.ULTRA:
        return ULTRA_CLUES.get(grid_size, max(total // 5, 1))

    target = total - math.floor(total * removal_percentage(grid_size, difficulty))
    floor = MIN_CLUES.get(grid_size, total // 4)
    return max(target, floor)


def fallback_solution(grid_size: int) -> Board:
    """Deterministic valid grid: each row is the previous one shifted by a subgrid width."""

    box = subgrid_size(grid_size) or 1
    return [[(r * box + r // box + c) % grid_size for c in range(grid_size)] for r in range(grid_size)]


def generate_solution(grid_size: int, rng: RandomSource = None) -> tuple[Board, bool]:
    """Return a complete solution and whether the fallback pattern had to be used."""

    generator = as_rng(rng)
    for attempt in range(SOLVER_ATTEMPTS):
        board = new_board(grid_size)
        if solve(board, generator, node_limit=SOLVER_NODE_LIMIT or None):
            return board, False
        _LOGGER.debug("solver attempt %d/%d failed for size %d", attempt + 1, SOLVER_ATTEMPTS, grid_size)

    _LOGGER.warning("failed to generate a random solution for size %d; using the fallback pattern", grid_size)
    return fallback_solution(grid_size), True


def remove_clues(board: Board, cells_to_remove: int, rng: RandomSource = None) -> int:
    """Clear up to ``cells_to_remove`` random cells of ``board`` in place; return how many went."""

    generator = as_rng(rng)
    size = len(board)
    total = size * size
    max_attempts = total * REMOVAL_ATTEMPT_FACTOR
    removed = 0
    attempts = 0
    while removed < cells_to_remove and attempts < max_attempts:
        r = generator.randrange(size)
        c = generator.randrange(size)
        if board[r][c] != EMPTY:
            board[r][c] = EMPTY
            removed += 1
        attempts += 1
    return removed


def generate(
    grid_size: int,
    difficulty: DifficultyLike,
    *,
    seed: Optional[Union[int, str]] = None,
    rng: RandomSource = None,
) -> Puzzle:
    """Generate a puzzle; never raises for an unsupported ``grid_size``.

    Pass either ``seed`` or an existing ``random.Random`` as ``rng``; with
    neither the system entropy source seeds a fresh generator.
    """

    parsed = Difficulty.parse(difficulty)
    if not is_supported_size(grid_size):
        _LOGGER.warning("invalid grid size %r for Sudoku; must be 4, 9 or 16", grid_size)
        empty = new_board(DEFAULT_GRID_SIZE)
        return Puzzle(
            initial=empty,
            solution=copy_board(empty),
            grid_size=DEFAULT_GRID_SIZE,
            difficulty=parsed,
            used_fallback=True,
        )
    if parsed is None:
        _LOGGER.warning("unknown difficulty %r; using the default removal share", difficulty)

    generator = as_rng(rng if rng is not None else seed)
    solution, used_fallback = generate_solution(grid_size, generator)
    initial = copy_board(solution)

    total = grid_size * grid_size
    cells_to_remove = total - target_clues(grid_size, difficulty)
    cells_to_remove = max(0, min(cells_to_remove, total - 1))
    removed = remove_clues(initial, cells_to_remove, generator)

    _LOGGER.debug(
        "generated %dx%d puzzle (%s): %d clues",
        grid_size,
        grid_size,
        parsed.value if parsed else difficulty,
        total - removed,
    )
    return Puzzle(
        initial=initial,
        solution=solution,
        grid_size=grid_size,
        difficulty=parsed,
        used_fallback=used_fallback,
    )


__all__ = [
    "Difficulty",
    "MIN_CLUES",
    "Puzzle",
    "REMOVAL_PERCENTAGES",
    "ULTRA_CLUES",
    "fallback_solution",
    "generate",
    "generate_solution",
    "remove_clues",
    "removal_percentage",
    "target_clues",
]
