from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest

from engine.generator import Difficulty, generate
from printer import pdf
from printer.pdf import export_pack, resolve_output_path


def _puzzles(count: int, size: int = 4):
    return [generate(size, Difficulty.EASY, seed=i) for i in range(count)]


def test_export_pack_writes_a_pdf(tmp_path) -> None:
    out = export_pack(_puzzles(5), tmp_path / "packs" / "easy.pdf", rows=1, cols=2)
    assert out == tmp_path / "packs" / "easy.pdf"
    assert out.read_bytes().startswith(b"%PDF")


def test_export_pack_solutions(tmp_path) -> None:
    out = export_pack(_puzzles(1, size=9), tmp_path / "solutions.pdf", solutions=True)
    assert out.stat().st_size > 0


def test_export_pack_rejects_empty_input(tmp_path) -> None:
    with pytest.raises(ValueError):
        export_pack([], tmp_path / "empty.pdf")


def test_export_pack_rejects_oversized_margins(tmp_path) -> None:
    with pytest.raises(ValueError):
        export_pack(_puzzles(1), tmp_path / "tight.pdf", margin_cm=20.0)


def test_default_output_name() -> None:
    path = resolve_output_path(None, 16)
    assert path.name.startswith("sudoku_pack_16x16_")
    assert path.suffix == ".pdf"
    assert resolve_output_path("x.pdf", 9).name == "x.pdf"


def test_figures_are_closed_when_drawing_fails(tmp_path, monkeypatch) -> None:
    def _fail(*args, **kwargs):
        raise RuntimeError("draw failed")

    plt.close("all")
    monkeypatch.setattr(pdf, "draw_grid", _fail)
    with pytest.raises(RuntimeError):
        export_pack(_puzzles(1), tmp_path / "broken.pdf")
    assert plt.get_fignums() == []
