"""Interactive game session over the engine.

The session owns three boards: the solution and the initial (clue) board
from the generator, and the user board that play mutates. Clue cells are
never edited; locked cells are user values pinned against edits.
"""

from __future__ import annotations

import enum
import logging
import os
from typing import Dict, List, Mapping, Optional, Set, Tuple

from engine.board import EMPTY, Board, copy_board, is_solved_grid
from engine.constraints import valid_values_for_cell
from engine.generator import Difficulty, DifficultyLike, generate
from engine.glyphs import internal_value_from_key
from engine.hints import top_hints
from engine.solver import RandomSource, as_rng
from engine.verifier import CheckResult, check
from feature_flags import GameFeatures, load_game_features
from project_config import get_section

from . import journal

_LOGGER = logging.getLogger(__name__)

Cell = Tuple[int, int]

WIN_MESSAGE = "Congratulations, You Won!"
FAIL_MESSAGE = "Board Incomplete or Incorrect."
NO_HINT_MESSAGE = "No obvious hints available or board complete!"
LOAD_ERROR_MESSAGE = "Could not create a puzzle of that size."

CLEAR_KEYS = frozenset({"Backspace", "Delete", "."})

HINT_BATCH = max(1, int(get_section("session.hint_batch", 3)))


class GameState(str, enum.Enum):
    LOADING = "Loading"
    PLAYING = "Playing"
    WON = "Won"
    FAILED = "Failed"


class GameSession:
    """One game at a time; :meth:`start` begins the next."""

    def __init__(
        self,
        grid_size: int = 9,
        difficulty: DifficultyLike = Difficulty.MEDIUM,
        *,
        seed: Optional[int | str] = None,
        rng: RandomSource = None,
        features: Optional[GameFeatures] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._rng = as_rng(rng if rng is not None else seed)
        self._features_override = features
        self._env = env
        self.grid_size = grid_size
        self.difficulty: DifficultyLike = Difficulty.parse(difficulty) or difficulty
        self.features = GameFeatures()
        self.state = GameState.LOADING
        self.message = ""
        self.initial: Board = []
        self.solution: Board = []
        self.user_board: Board = []
        self.locked_cells: Set[Cell] = set()
        self.hinted_cells: List[Cell] = []
        self.hint_uses_left = 0
        self.last_check: Optional[CheckResult] = None
        self._marks: Dict[Cell, Set[int]] = {}
        self.start()

    # ---------- lifecycle ----------

    def _difficulty_name(self) -> str:
        return self.difficulty.value if isinstance(self.difficulty, Difficulty) else str(self.difficulty)

    def start(self, grid_size: Optional[int] = None, difficulty: Optional[DifficultyLike] = None) -> None:
        """Generate a new puzzle and reset every per-game collection."""

        if grid_size is not None:
            self.grid_size = grid_size
        if difficulty is not None:
            self.difficulty = Difficulty.parse(difficulty) or difficulty

        self.state = GameState.LOADING
        if self._features_override is not None:
            self.features = self._features_override
        else:
            env = os.environ if self._env is None else self._env
            self.features = load_game_features(env, difficulty=self._difficulty_name())

        requested = self.grid_size
        puzzle = generate(requested, self.difficulty, rng=self._rng)
        self.grid_size = puzzle.grid_size
        self.initial = puzzle.initial
        self.solution = puzzle.solution
        self.user_board = copy_board(puzzle.initial)

        self.locked_cells = set()
        self.hinted_cells = []
        self.hint_uses_left = self.features.hint_uses
        self.last_check = None
        self._marks = {}
        self.message = ""
        if not is_solved_grid(self.solution):
            _LOGGER.warning("no playable board for grid size %r; staying in %s", requested, self.state.value)
            self.message = LOAD_ERROR_MESSAGE
            return
        self.state = GameState.PLAYING
        _LOGGER.debug("started %dx%d %s game with %d clues", self.grid_size, self.grid_size, self._difficulty_name(), puzzle.clues)
        journal.append_event(
            {
                "event": "game.started",
                "grid_size": self.grid_size,
                "difficulty": self._difficulty_name(),
                "clues": puzzle.clues,
            }
        )

    def check(self) -> GameState:
        """Compare the user board with the solution: Playing -> Won or Failed."""

        if self.state is not GameState.PLAYING:
            return self.state

        result = check(self.user_board, self.solution)
        self.last_check = result
        if result.is_win:
            self.state = GameState.WON
            self.message = WIN_MESSAGE
        else:
            self.state = GameState.FAILED
            self.message = FAIL_MESSAGE
        journal.append_event(
            {
                "event": "game.checked",
                "state": self.state.value,
                "is_complete": result.is_complete,
                "is_correct": result.is_correct,
            }
        )
        return self.state

    def resume(self) -> bool:
        """Return from Failed to Playing when ``resume_after_failed`` allows it."""

        if self.state is not GameState.FAILED or not self.features.resume_after_failed:
            return False
        self.state = GameState.PLAYING
        self.message = ""
        return True

    # ---------- queries ----------

    def in_range(self, row: int, col: int) -> bool:
        return 0 <= row < self.grid_size and 0 <= col < self.grid_size

    def is_clue(self, row: int, col: int) -> bool:
        return self.in_range(row, col) and bool(self.initial) and self.initial[row][col] != EMPTY

    def is_locked(self, row: int, col: int) -> bool:
        return (row, col) in self.locked_cells

    def _editable(self, row: int, col: int) -> bool:
        return (
            self.state is GameState.PLAYING
            and self.in_range(row, col)
            and not self.is_clue(row, col)
            and not self.is_locked(row, col)
        )

    def valid_values(self, row: int, col: int, *, against_clues: bool = False) -> List[int]:
        """Values with no peer conflict on the user board, or on the clue board."""

        board = self.initial if against_clues else self.user_board
        return valid_values_for_cell(board, row, col, self.grid_size)

    def next_editable_cell(self, after: Optional[Cell] = None) -> Optional[Cell]:
        """Next non-clue cell in row-major order after ``after``, wrapping around.

        An ``after`` outside the board starts the search from the top-left.
        """

        size = self.grid_size
        if not self.initial or len(self.initial) != size:
            return None
        if after is None or not self.in_range(*after):
            after = (size - 1, size - 1)
        r, c = after
        for _ in range(size * size):
            c += 1
            if c >= size:
                c = 0
                r = (r + 1) % size
            if self.initial[r][c] == EMPTY:
                return (r, c)
        return None

    # ---------- entry ----------

    def _commit(self, row: int, col: int, value: int) -> None:
        self.user_board[row][col] = value
        self.hinted_cells = []

    def set_value(self, row: int, col: int, value: int) -> bool:
        """Write ``value`` (or EMPTY) into an editable cell; ``False`` when ignored."""

        if not self._editable(row, col):
            return False
        if value != EMPTY and not 0 <= value < self.grid_size:
            return False
        if (
            self.features.candidate_filter
            and value != EMPTY
            and value not in self.valid_values(row, col, against_clues=True)
        ):
            return False
        self._commit(row, col, value)
        return True

    def enter_key(self, row: int, col: int, key: str) -> bool:
        if key in CLEAR_KEYS:
            return self.set_value(row, col, EMPTY)
        value = internal_value_from_key(key, self.grid_size)
        if value is None:
            return False
        return self.set_value(row, col, value)

    def cycle_value(self, row: int, col: int) -> Optional[int]:
        """Advance the cell to its next value and return it (``None`` when ignored).

        Without the candidate filter the order is EMPTY, 0, 1, ... N-1, EMPTY.
        With it, only EMPTY and the values compatible with the clues are
        visited.
        """

        if not self._editable(row, col):
            return None
        current = self.user_board[row][col]
        if self.features.candidate_filter:
            options = [EMPTY] + self.valid_values(row, col, against_clues=True)
            index = options.index(current) if current in options else -1
            value = options[(index + 1) % len(options)]
        elif current == self.grid_size - 1:
            value = EMPTY
        elif current == EMPTY:
            value = 0
        else:
            value = current + 1
        self._commit(row, col, value)
        return value

    # ---------- locking ----------

    def toggle_lock(self, row: int, col: int) -> bool:
        """Unlock a locked cell, or lock a filled non-clue cell. Returns the new lock state."""

        cell = (row, col)
        if not self.in_range(row, col) or self.is_clue(row, col):
            return False
        if cell in self.locked_cells:
            self.locked_cells.discard(cell)
            return False
        if self.user_board[row][col] != EMPTY:
            self.locked_cells.add(cell)
            return True
        return False

    # ---------- annotation ----------

    def marks(self, row: int, col: int) -> List[int]:
        return sorted(self._marks.get((row, col), ()))

    def toggle_mark(self, row: int, col: int, value: int) -> bool:
        """Flip pencil mark ``value`` in the cell; returns whether it is now marked."""

        if not self._editable(row, col) or not 0 <= value < self.grid_size:
            return False
        cell_marks = self._marks.setdefault((row, col), set())
        if value in cell_marks:
            cell_marks.discard(value)
            if not cell_marks:
                del self._marks[(row, col)]
            return False
        cell_marks.add(value)
        return True

    def fill_marks(self, row: int, col: int) -> List[int]:
        """Replace the cell's marks with its valid values on the user board."""

        if not self._editable(row, col):
            return self.marks(row, col)
        values = self.valid_values(row, col)
        if values:
            self._marks[(row, col)] = set(values)
        else:
            self._marks.pop((row, col), None)
        return values

    def clear_marks(self, row: int, col: int) -> bool:
        """Drop the cell's marks; with ``unlock_on_clear_marks`` this also unlocks it."""

        if self.state is not GameState.PLAYING or not self.in_range(row, col) or self.is_clue(row, col):
            return False
        changed = self._marks.pop((row, col), None) is not None
        if self.features.unlock_on_clear_marks and (row, col) in self.locked_cells:
            self.locked_cells.discard((row, col))
            changed = True
        return changed

    # ---------- hints ----------

    def request_hint(self) -> List[Cell]:
        """Surface the most constrained empty cells, spending one hint use.

        Any batch already showing is replaced. Nothing is spent when the
        ranking comes back empty.
        """

        if self.state is not GameState.PLAYING or self.hint_uses_left <= 0:
            return []
        self.hinted_cells = []
        hints = top_hints(self.user_board, self.grid_size, HINT_BATCH)
        if not hints:
            self.message = NO_HINT_MESSAGE
            return []
        self.hinted_cells = [(hint.row, hint.col) for hint in hints]
        self.hint_uses_left = max(0, self.hint_uses_left - 1)
        journal.append_event(
            {
                "event": "hint.requested",
                "cells": [list(cell) for cell in self.hinted_cells],
                "uses_left": self.hint_uses_left,
            }
        )
        return list(self.hinted_cells)

    def dismiss_hints(self) -> None:
        self.hinted_cells = []


__all__ = [
    "CLEAR_KEYS",
    "Cell",
    "FAIL_MESSAGE",
    "GameSession",
    "GameState",
    "LOAD_ERROR_MESSAGE",
    "NO_HINT_MESSAGE",
    "WIN_MESSAGE",
]
