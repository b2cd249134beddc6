"""Gameplay feature toggles read from ``config/features.toml``."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - fallback for older Python
    import tomli as tomllib  # type: ignore[import-untyped]

__all__ = ["GameFeatures", "get_game_feature", "load_game_features", "reload"]

_FEATURES_FILENAME = "config/features.toml"

_BOOL_FLAGS = ("candidate_filter", "unlock_on_clear_marks", "resume_after_failed")


@dataclass(frozen=True)
class GameFeatures:
    """Resolved toggles for a single game session."""

    candidate_filter: bool = False
    unlock_on_clear_marks: bool = True
    resume_after_failed: bool = False
    hint_uses: int = 1


def _features_path() -> Path:
    return Path(__file__).resolve().parents[1] / _FEATURES_FILENAME


@lru_cache(maxsize=1)
def _load_features() -> dict[str, Any]:
    path = _features_path()
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        return tomllib.load(handle)


def reload() -> None:
    """Clear the cached feature configuration."""

    _load_features.cache_clear()


def _coerce_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalised = value.strip().lower()
        if normalised in {"1", "true", "yes", "on"}:
            return True
        if normalised in {"0", "false", "no", "off"}:
            return False
    return None


def _coerce_uses(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        uses = int(str(value).strip()) if isinstance(value, str) else int(value)
    except (TypeError, ValueError):
        return None
    return max(0, uses)


def get_game_feature(difficulty: str | None = None) -> dict[str, Any]:
    """Return the merged ``[game]`` block for the given difficulty."""

    features = _load_features()
    entry = features.get("game")
    merged: dict[str, Any] = {}
    if isinstance(entry, dict):
        for key, value in entry.items():
            if key == "by_difficulty":
                continue
            merged[key] = value

        if difficulty:
            by_difficulty = entry.get("by_difficulty")
            if isinstance(by_difficulty, dict):
                block = by_difficulty.get(str(difficulty).lower())
                if isinstance(block, dict):
                    merged.update(block)
    return merged


def load_game_features(
    env: Mapping[str, str] | None = None, *, difficulty: str | None = None
) -> GameFeatures:
    """Resolve :class:`GameFeatures` from TOML, then ``SUDOKU_*`` and ``CLI_SUDOKU_*`` overrides."""

    block = get_game_feature(difficulty)
    defaults = GameFeatures()
    values: dict[str, Any] = {}
    for name in _BOOL_FLAGS:
        coerced = _coerce_bool(block.get(name))
        values[name] = getattr(defaults, name) if coerced is None else coerced
    uses = _coerce_uses(block.get("hint_uses"))
    values["hint_uses"] = defaults.hint_uses if uses is None else uses

    if env:
        for name in _BOOL_FLAGS:
            for key in (f"CLI_SUDOKU_{name.upper()}", f"SUDOKU_{name.upper()}"):
                override = _coerce_bool(env.get(key))
                if override is not None:
                    values[name] = override
                    break
        for key in ("CLI_SUDOKU_HINT_USES", "SUDOKU_HINT_USES"):
            override_uses = _coerce_uses(env.get(key)) if key in env else None
            if override_uses is not None:
                values["hint_uses"] = override_uses
                break

    return GameFeatures(**values)
