"""Printable puzzle packs."""

from __future__ import annotations

from .pdf import export_pack

__all__ = ["export_pack"]
