"""Internal value <-> display glyph and keyboard key mapping.

Internal values are 0-indexed. Sizes 4 and 9 show ``value + 1``; size 16
shows a hex digit, so ``0`` is a real value there.
"""

from __future__ import annotations

from typing import Optional

from .board import EMPTY, HEX_CHARS


def display_value(internal: int, grid_size: int) -> str:
    if internal == EMPTY:
        return ""
    if 0 <= internal < grid_size:
        if grid_size == 16:
            return HEX_CHARS[internal]
        return str(internal + 1)
    return "?"


def internal_value_from_key(key: str, grid_size: int) -> Optional[int]:
    """Map a single key press to an internal value, or ``None`` if it enters no value."""

    if not isinstance(key, str) or len(key) != 1:
        return None
    upper = key.upper()
    value = -1
    if grid_size == 16:
        if upper in HEX_CHARS:
            value = HEX_CHARS.index(upper)
    elif "1" <= upper <= "9":
        value = int(upper) - 1

    if 0 <= value < grid_size:
        return value
    return None


__all__ = ["display_value", "internal_value_from_key"]
