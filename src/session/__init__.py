"""Game session layer: state machine, locking, pencil marks and hints."""

from __future__ import annotations

from .game import GameSession, GameState

__all__ = ["GameSession", "GameState"]
