from __future__ import annotations

import random

import pytest

from engine import generator
from engine.board import EMPTY, count_clues, is_solved_grid, new_board
from engine.generator import (
    Difficulty,
    fallback_solution,
    generate,
    remove_clues,
    removal_percentage,
    target_clues,
)


def _assert_consistent(puzzle) -> None:
    size = puzzle.grid_size
    assert len(puzzle.initial) == size
    assert all(len(row) == size for row in puzzle.initial)
    assert is_solved_grid(puzzle.solution)
    for r in range(size):
        for c in range(size):
            value = puzzle.initial[r][c]
            assert value == EMPTY or value == puzzle.solution[r][c]


def test_difficulty_parse() -> None:
    assert Difficulty.parse("easy") is Difficulty.EASY
    assert Difficulty.parse(" ULTRA ") is Difficulty.ULTRA
    assert Difficulty.parse(Difficulty.HARD) is Difficulty.HARD
    assert Difficulty.parse("Extreme") is None
    assert Difficulty.parse(None) is None


@pytest.mark.parametrize(
    ("size", "difficulty", "expected"),
    [
        (4, Difficulty.EASY, 11),
        (4, Difficulty.MEDIUM, 8),
        (4, Difficulty.HARD, 7),
        (4, Difficulty.ULTRA, 4),
        (9, Difficulty.EASY, 43),
        (9, Difficulty.MEDIUM, 35),
        (9, Difficulty.HARD, 28),
        (9, Difficulty.ULTRA, 17),
        (16, Difficulty.EASY, 128),
        (16, Difficulty.MEDIUM, 103),
        (16, Difficulty.HARD, 103),
        (16, Difficulty.ULTRA, 55),
    ],
)
def test_target_clues(size: int, difficulty: Difficulty, expected: int) -> None:
    assert target_clues(size, difficulty) == expected


def test_unknown_difficulty_uses_default_share() -> None:
    assert removal_percentage(9, "Extreme") == removal_percentage(9, Difficulty.HARD)
    assert target_clues(9, "Extreme") == 28


def test_non_ultra_targets_respect_the_floor(monkeypatch) -> None:
    monkeypatch.setitem(generator.REMOVAL_PERCENTAGES, 9, {"default": 0.95})
    assert target_clues(9, Difficulty.HARD) == generator.MIN_CLUES[9]


@pytest.mark.parametrize("size", [4, 9, 16])
def test_fallback_solution_is_valid(size: int) -> None:
    assert is_solved_grid(fallback_solution(size))


def test_remove_clues_clears_cells() -> None:
    board = fallback_solution(9)
    removed = remove_clues(board, 30, random.Random(2))
    assert removed == 30
    assert count_clues(board) == 51


@pytest.mark.parametrize("difficulty", list(Difficulty))
@pytest.mark.parametrize("size", [4, 9, 16])
def test_generate_every_size_and_difficulty(size: int, difficulty: Difficulty) -> None:
    puzzle = generate(size, difficulty, seed=11)
    _assert_consistent(puzzle)
    assert puzzle.clues == target_clues(size, difficulty)
    assert puzzle.difficulty is difficulty
    if difficulty is not Difficulty.ULTRA:
        assert puzzle.clues >= generator.MIN_CLUES[size]
    if size != 16:
        assert not puzzle.used_fallback


def test_4x4_easy_blocks_and_clue_floor() -> None:
    for seed in range(20):
        puzzle = generate(4, Difficulty.EASY, seed=seed)
        solution = puzzle.solution
        for i in range(4):
            assert sorted(solution[i]) == [0, 1, 2, 3]
            assert sorted(row[i] for row in solution) == [0, 1, 2, 3]
        for br in (0, 2):
            for bc in (0, 2):
                block = [solution[r][c] for r in range(br, br + 2) for c in range(bc, bc + 2)]
                assert sorted(block) == [0, 1, 2, 3]
        assert puzzle.clues >= 5


def test_generate_4x4() -> None:
    puzzle = generate(4, "medium", seed=3)
    _assert_consistent(puzzle)
    assert puzzle.clues == 8


def test_generate_is_reproducible() -> None:
    first = generate(9, Difficulty.HARD, seed="abc")
    second = generate(9, Difficulty.HARD, seed="abc")
    assert first.initial == second.initial
    assert first.solution == second.solution
    assert generate(9, Difficulty.HARD, seed="abd").solution != first.solution


def test_generate_invalid_size_returns_empty_default(caplog) -> None:
    puzzle = generate(7, Difficulty.EASY, seed=1)
    assert puzzle.grid_size == 9
    assert puzzle.initial == new_board(9)
    assert puzzle.solution == new_board(9)
    assert puzzle.used_fallback
    assert "invalid grid size" in caplog.text


def test_generate_falls_back_when_the_solver_fails(monkeypatch) -> None:
    monkeypatch.setattr(generator, "solve", lambda *args, **kwargs: False)
    puzzle = generate(9, Difficulty.MEDIUM, seed=5)
    assert puzzle.used_fallback
    assert puzzle.solution == fallback_solution(9)
    _assert_consistent(puzzle)
    assert puzzle.clues == 35


def test_puzzle_to_dict() -> None:
    puzzle = generate(4, Difficulty.EASY, seed=9)
    payload = puzzle.to_dict()
    assert payload["grid_size"] == 4
    assert payload["difficulty"] == "Easy"
    assert payload["clues"] == 11
    assert payload["initial"] == puzzle.initial
    assert payload["initial"] is not puzzle.initial
