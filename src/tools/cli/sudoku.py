"""Command line front end: generate, inspect, print and play puzzles."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from typing import Iterable, List, Optional, TextIO

from engine.board import SUPPORTED_SIZES, BoardFormatError, format_grid, from_string, to_string
from engine.generator import Difficulty, Puzzle, generate
from engine.glyphs import display_value, internal_value_from_key
from engine.hints import top_hints
from engine.solver import has_unique_solution
from engine.verifier import check
from printer.pdf import export_pack, resolve_output_path
from session import journal
from session.game import GameSession, GameState

_DIFFICULTY_CHOICES = [d.value for d in Difficulty]


def _difficulty(value: str) -> Difficulty:
    parsed = Difficulty.parse(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"invalid difficulty {value!r} (choose from {', '.join(_DIFFICULTY_CHOICES)})")
    return parsed


def _parse_board(text: str, size: Optional[int] = None) -> List[List[int]]:
    try:
        return from_string(text, size)
    except BoardFormatError as exc:
        raise SystemExit(f"error: {exc}") from exc


def _puzzle_payload(puzzle: Puzzle, *, unique: Optional[bool]) -> dict:
    payload = puzzle.to_dict()
    payload["initial_string"] = to_string(puzzle.initial)
    payload["solution_string"] = to_string(puzzle.solution)
    if unique is not None:
        payload["unique"] = unique
    return payload


def cmd_generate(args: argparse.Namespace) -> int:
    if args.journal:
        journal.configure(args.journal)
    seed = args.seed if args.seed is not None else int(time.time())
    puzzle = generate(args.size, args.difficulty, seed=seed)
    unique = has_unique_solution(puzzle.initial) if args.check_unique else None
    journal.append_event(
        {
            "event": "puzzle.generated",
            "seed": seed,
            "grid_size": puzzle.grid_size,
            "difficulty": args.difficulty.value,
            "clues": puzzle.clues,
            "initial": to_string(puzzle.initial),
        }
    )

    if args.json:
        payload = _puzzle_payload(puzzle, unique=unique)
        payload["seed"] = seed
        print(json.dumps(payload, indent=2, sort_keys=True))
        return 0

    print(f"{puzzle.grid_size}x{puzzle.grid_size} {args.difficulty.value}, seed {seed}, {puzzle.clues} clues")
    print(format_grid(puzzle.initial))
    print(to_string(puzzle.initial))
    if args.solution:
        print("\nSolution:")
        print(format_grid(puzzle.solution))
    if unique is not None:
        print(f"Unique solution: {'yes' if unique else 'no'}")
    return 0


def cmd_hints(args: argparse.Namespace) -> int:
    board = _parse_board(args.board, args.size)
    size = len(board)
    hints = top_hints(board, size, args.count)
    if args.json:
        print(json.dumps([hint.to_dict() for hint in hints], indent=2))
        return 0
    if not hints:
        print("No hints: the board is full or every empty cell is dead.")
        return 0
    for hint in hints:
        print(f"r{hint.row + 1}c{hint.col + 1}: {hint.possibility_count} option(s)")
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    board = _parse_board(args.board)
    solution = _parse_board(args.solution, len(board))
    result = check(board, solution)
    print(
        json.dumps(
            {"is_complete": result.is_complete, "is_correct": result.is_correct, "is_win": result.is_win},
            sort_keys=True,
        )
    )
    return 0 if result.is_win else 1


def cmd_pdf(args: argparse.Namespace) -> int:
    base_seed = args.seed if args.seed is not None else int(time.time())
    out_path = resolve_output_path(args.out, args.size)
    puzzles = []
    for i in range(max(1, args.count)):
        puzzles.append(generate(args.size, args.difficulty, seed=base_seed + i))
    export_pack(puzzles, out_path, solutions=args.solutions)
    print(f"Saved {len(puzzles)} puzzle(s) to {out_path}")
    return 0


# ---------- play ----------

_PLAY_HELP = """commands (rows and columns start at 1):
  set R C KEY    enter a value (KEY as typed, '.' clears)
  cycle R C      step the cell to its next value
  lock R C       lock or unlock a filled cell
  mark R C KEY   toggle a pencil mark
  fill R C       mark every value the cell can still take
  clear R C      remove the cell's pencil marks
  next [R C]     next editable cell
  hint           show the most constrained cells
  check          check the board
  resume         keep playing after a failed check (when enabled)
  new [SIZE] [DIFFICULTY]
  show | help | quit"""


def _render(session: GameSession) -> str:
    size = session.grid_size
    lines = [format_grid(session.user_board)]
    status = f"state={session.state.value} hints_left={session.hint_uses_left}"
    if session.locked_cells:
        status += " locked=" + ",".join(f"r{r + 1}c{c + 1}" for r, c in sorted(session.locked_cells))
    if session.hinted_cells:
        status += " hinted=" + ",".join(f"r{r + 1}c{c + 1}" for r, c in session.hinted_cells)
    lines.append(status)
    if session.message:
        lines.append(session.message)
    for r in range(size):
        for c in range(size):
            marks = session.marks(r, c)
            if marks:
                glyphs = "".join(display_value(v, size) for v in marks)
                lines.append(f"  marks r{r + 1}c{c + 1}: {glyphs}")
    return "\n".join(lines)


def _coords(parts: List[str]) -> tuple[int, int]:
    return int(parts[0]) - 1, int(parts[1]) - 1


def play_loop(session: GameSession, lines: Iterable[str], out: TextIO) -> int:
    """Drive ``session`` from text commands; returns the number of commands handled."""

    handled = 0
    print(_render(session), file=out)
    for raw in lines:
        parts = raw.strip().split()
        if not parts:
            continue
        command, rest = parts[0].lower(), parts[1:]
        handled += 1
        try:
            if command in {"quit", "exit"}:
                break
            elif command == "help":
                print(_PLAY_HELP, file=out)
                continue
            elif command == "show":
                pass
            elif command == "set":
                row, col = _coords(rest)
                if not session.enter_key(row, col, rest[2]):
                    print("ignored", file=out)
            elif command == "cycle":
                row, col = _coords(rest)
                if session.cycle_value(row, col) is None:
                    print("ignored", file=out)
            elif command == "lock":
                row, col = _coords(rest)
                print("locked" if session.toggle_lock(row, col) else "unlocked", file=out)
            elif command == "mark":
                row, col = _coords(rest)
                value = internal_value_from_key(rest[2], session.grid_size)
                if value is None:
                    print("ignored", file=out)
                else:
                    session.toggle_mark(row, col, value)
            elif command == "fill":
                row, col = _coords(rest)
                session.fill_marks(row, col)
            elif command == "clear":
                row, col = _coords(rest)
                session.clear_marks(row, col)
            elif command == "next":
                after = _coords(rest) if len(rest) >= 2 else None
                cell = session.next_editable_cell(after)
                print("none" if cell is None else f"r{cell[0] + 1}c{cell[1] + 1}", file=out)
                continue
            elif command == "hint":
                session.request_hint()
            elif command == "check":
                session.check()
            elif command == "resume":
                if not session.resume():
                    print("cannot resume", file=out)
            elif command == "new":
                size = int(rest[0]) if rest else None
                difficulty = _difficulty(rest[1]) if len(rest) > 1 else None
                session.start(size, difficulty)
            else:
                print(f"unknown command {command!r}; try 'help'", file=out)
                continue
        except (IndexError, ValueError, argparse.ArgumentTypeError) as exc:
            print(f"bad arguments for {command!r}: {exc}", file=out)
            continue
        print(_render(session), file=out)
        if session.state is GameState.WON:
            break
    return handled


def cmd_play(args: argparse.Namespace) -> int:
    if args.journal:
        journal.configure(args.journal)
    session = GameSession(args.size, args.difficulty, seed=args.seed)
    print(_PLAY_HELP)
    play_loop(session, sys.stdin, sys.stdout)
    return 0 if session.state is GameState.WON else 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Variable-size Sudoku: generate, inspect, print and play")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    def _add_game_options(p: argparse.ArgumentParser) -> None:
        p.add_argument("--size", type=int, choices=SUPPORTED_SIZES, default=9)
        p.add_argument("--difficulty", type=_difficulty, default=Difficulty.MEDIUM, help=", ".join(_DIFFICULTY_CHOICES))
        p.add_argument("--seed", type=int, default=None, help="Seed for reproducible puzzles")

    gen = sub.add_parser("generate", help="Generate one puzzle")
    _add_game_options(gen)
    gen.add_argument("--solution", action="store_true", help="Also print the solution")
    gen.add_argument("--check-unique", action="store_true", help="Report whether the puzzle has exactly one solution")
    gen.add_argument("--json", action="store_true", help="Print a JSON document instead of text")
    gen.add_argument("--journal", default=None, help="Directory for the JSONL event journal")
    gen.set_defaults(func=cmd_generate)

    hints = sub.add_parser("hints", help="Rank the empty cells of a board")
    hints.add_argument("board", help="Row-major board string, '.' for empty cells")
    hints.add_argument("--size", type=int, choices=SUPPORTED_SIZES, default=None)
    hints.add_argument("--count", type=int, default=3)
    hints.add_argument("--json", action="store_true")
    hints.set_defaults(func=cmd_hints)

    chk = sub.add_parser("check", help="Compare a board with its solution")
    chk.add_argument("board")
    chk.add_argument("solution")
    chk.set_defaults(func=cmd_check)

    pdf = sub.add_parser("pdf", help="Write a printable PDF pack")
    _add_game_options(pdf)
    pdf.add_argument("--count", type=int, default=4)
    pdf.add_argument("--out", default=None, help="Output PDF path (timestamped by default)")
    pdf.add_argument("--solutions", action="store_true", help="Print solutions instead of puzzles")
    pdf.set_defaults(func=cmd_pdf)

    play = sub.add_parser("play", help="Play in the terminal")
    _add_game_options(play)
    play.add_argument("--journal", default=None, help="Directory for the JSONL event journal")
    play.set_defaults(func=cmd_play)

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
