"""JSONL game-event journal.

Events go to ``<base_dir>/<YYYYMMDD>/games_NN.jsonl``; a file that reaches
``max_bytes`` is left alone and the next number is used. Nothing is written
until :func:`configure` has been called.
"""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

__all__ = ["append_event", "configure", "current_log_path", "disable"]

_DEFAULT_MAX_BYTES = 10 * 1024 * 1024
_LOCK = threading.Lock()

_state: Dict[str, Any] = {"base_dir": None, "max_bytes": _DEFAULT_MAX_BYTES, "path": None}


def configure(base_dir: str | Path, *, max_bytes: int | None = None) -> None:
    with _LOCK:
        _state.update(base_dir=Path(base_dir), max_bytes=max_bytes or _DEFAULT_MAX_BYTES, path=None)


def disable() -> None:
    with _LOCK:
        _state.update(base_dir=None, path=None)


def _has_room(path: Path) -> bool:
    return not path.exists() or path.stat().st_size < _state["max_bytes"]


def _active_file(now: datetime) -> Path:
    day_dir = _state["base_dir"] / now.strftime("%Y%m%d")
    day_dir.mkdir(parents=True, exist_ok=True)

    path = _state["path"]
    if path is not None and path.parent == day_dir and _has_room(path):
        return path

    index = 0
    path = day_dir / f"games_{index:02d}.jsonl"
    while not _has_room(path):
        index += 1
        path = day_dir / f"games_{index:02d}.jsonl"
    _state["path"] = path
    return path


def append_event(event: Dict[str, Any]) -> Path | None:
    """Write ``event`` as one JSON line; returns the file, or ``None`` while disabled."""

    with _LOCK:
        if _state["base_dir"] is None:
            return None
        now = datetime.now(timezone.utc)
        record = {"ts": now.isoformat(timespec="milliseconds"), **event}
        path = _active_file(now)
        with path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, sort_keys=True, ensure_ascii=False) + "\n")
    return path


def current_log_path() -> Path | None:
    return _state["path"]
