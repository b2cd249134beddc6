from __future__ import annotations

import json

from session import journal


def teardown_function():
    journal.disable()


def test_disabled_journal_writes_nothing(tmp_path) -> None:
    journal.disable()
    assert journal.append_event({"event": "game.started"}) is None
    assert list(tmp_path.iterdir()) == []


def test_events_are_appended_as_jsonl(tmp_path) -> None:
    journal.configure(tmp_path)
    first = journal.append_event({"event": "game.started", "grid_size": 9})
    second = journal.append_event({"event": "game.checked", "state": "Won"})
    assert first == second == journal.current_log_path()
    assert first.parent.parent == tmp_path
    assert first.name == "games_00.jsonl"

    lines = first.read_text(encoding="utf-8").splitlines()
    events = [json.loads(line) for line in lines]
    assert [event["event"] for event in events] == ["game.started", "game.checked"]
    assert all("ts" in event for event in events)


def test_files_rotate_by_size(tmp_path) -> None:
    journal.configure(tmp_path, max_bytes=10)
    first = journal.append_event({"event": "a"})
    second = journal.append_event({"event": "b"})
    assert first.name == "games_00.jsonl"
    assert second.name == "games_01.jsonl"


def test_reconfigure_skips_full_files(tmp_path) -> None:
    journal.configure(tmp_path, max_bytes=10)
    journal.append_event({"event": "a"})
    journal.append_event({"event": "b"})
    journal.configure(tmp_path, max_bytes=10)
    third = journal.append_event({"event": "c", "ts": "fixed"})
    assert third.name == "games_02.jsonl"
    assert json.loads(third.read_text(encoding="utf-8"))["ts"] == "fixed"
