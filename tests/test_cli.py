from __future__ import annotations

import io
import json

import matplotlib

matplotlib.use("Agg")

from engine.board import from_string
from engine.generator import Difficulty
from feature_flags import GameFeatures
from session import journal
from session.game import WIN_MESSAGE, GameSession, GameState
from tools.cli.sudoku import main, play_loop

SOLUTION = "1234341221434321"


def _session() -> GameSession:
    session = GameSession(4, Difficulty.EASY, seed=1, features=GameFeatures(hint_uses=1))
    initial = ".234" "3.12" "21.3" "432."
    session.initial = from_string(initial)
    session.solution = from_string(SOLUTION)
    session.user_board = from_string(initial)
    return session


def teardown_function():
    journal.disable()


def test_generate_json(capsys) -> None:
    assert main(["generate", "--size", "4", "--difficulty", "easy", "--seed", "3", "--json", "--check-unique"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["grid_size"] == 4
    assert payload["difficulty"] == "Easy"
    assert payload["clues"] == 11
    assert payload["seed"] == 3
    assert isinstance(payload["unique"], bool)
    assert len(payload["initial_string"]) == 16


def test_generate_text_writes_journal(tmp_path, capsys) -> None:
    assert main(["generate", "--size", "9", "--seed", "4", "--solution", "--journal", str(tmp_path)]) == 0
    out = capsys.readouterr().out
    assert "9x9 Medium, seed 4, 35 clues" in out
    assert "Solution:" in out
    event = json.loads(journal.current_log_path().read_text(encoding="utf-8").splitlines()[0])
    assert event["event"] == "puzzle.generated"
    assert event["seed"] == 4


def test_hints_command(capsys) -> None:
    board = ".234" "3.12" "21.3" "4321"
    assert main(["hints", board, "--json", "--count", "2"]) == 0
    hints = json.loads(capsys.readouterr().out)
    assert hints == [
        {"row": 0, "col": 0, "possibility_count": 1},
        {"row": 1, "col": 1, "possibility_count": 1},
    ]


def test_check_command_exit_codes(capsys) -> None:
    assert main(["check", SOLUTION, SOLUTION]) == 0
    assert json.loads(capsys.readouterr().out)["is_win"] is True
    assert main(["check", "." + SOLUTION[1:], SOLUTION]) == 1
    result = json.loads(capsys.readouterr().out)
    assert result == {"is_complete": False, "is_correct": True, "is_win": False}


def test_pdf_command(tmp_path, capsys) -> None:
    out = tmp_path / "pack.pdf"
    assert main(["pdf", "--size", "4", "--count", "2", "--seed", "1", "--out", str(out)]) == 0
    assert out.read_bytes().startswith(b"%PDF")
    assert "Saved 2 puzzle(s)" in capsys.readouterr().out


def test_play_loop_to_a_win() -> None:
    session = _session()
    out = io.StringIO()
    commands = ["hint", "set 1 1 1", "set 2 2 4", "mark 3 3 4", "set 3 3 4", "set 4 4 1", "check", "quit"]
    handled = play_loop(session, commands, out)
    assert handled == 7
    assert session.state is GameState.WON
    assert WIN_MESSAGE in out.getvalue()
    assert "hinted=r1c1,r2c2,r3c3" in out.getvalue()


def test_play_loop_reports_bad_input() -> None:
    session = _session()
    out = io.StringIO()
    play_loop(session, ["set 1 2 3", "set x", "bogus", "", "next", "quit"], out)
    text = out.getvalue()
    assert "ignored" in text
    assert "bad arguments for 'set'" in text
    assert "unknown command 'bogus'" in text
    assert "r1c1" in text
    assert session.state is GameState.PLAYING


def test_play_loop_handles_zero_coordinates_and_bad_sizes() -> None:
    session = _session()
    out = io.StringIO()
    play_loop(session, ["next 0 0", "new 5", "set 1 1 1", "quit"], out)
    text = out.getvalue()
    assert "r1c1" in text
    assert "state=Loading" in text
    assert "ignored" in text
    assert session.state is GameState.LOADING
