"""Render generated puzzles into a landscape PDF pack with matplotlib."""

from __future__ import annotations

import datetime as _dt
import math
from pathlib import Path
from typing import Optional, Sequence

from engine.board import subgrid_size
from engine.generator import Puzzle
from engine.glyphs import display_value
from project_config import get_config

CONFIG = get_config()
PDF_CONFIG = CONFIG.get("pdf", {})
LAYOUT_CONFIG = PDF_CONFIG.get("layout", {})
PAGE_CONFIG = PDF_CONFIG.get("page", {})
RENDER_CONFIG = PDF_CONFIG.get("rendering", {})
OUTPUT_CONFIG = PDF_CONFIG.get("output", {})

LAYOUT_ROWS = max(1, int(LAYOUT_CONFIG.get("rows", 2)))
LAYOUT_COLS = max(1, int(LAYOUT_CONFIG.get("cols", 2)))
PAGE_WIDTH_CM = float(PAGE_CONFIG.get("width_cm", 29.7))
PAGE_HEIGHT_CM = float(PAGE_CONFIG.get("height_cm", 21.0))
DEFAULT_MARGIN_CM = float(PAGE_CONFIG.get("margin_cm", 2.5))
DEFAULT_GAP_CM = float(PAGE_CONFIG.get("gap_cm", 1.5))
FOOTER_OFFSET_CM = float(PAGE_CONFIG.get("footer_offset_cm", 1.0))
FONT_SCALE = float(RENDER_CONFIG.get("font_scale_factor", 0.65))
OUTPUT_PREFIX = str(OUTPUT_CONFIG.get("filename_prefix", "sudoku_pack"))

INCH_PER_CM = 0.3937007874


def resolve_output_path(out: Optional[str | Path], grid_size: int) -> Path:
    if out:
        return Path(out)
    timestamp = _dt.datetime.now().strftime("%Y%m%d_%H%M%S")
    return Path(f"{OUTPUT_PREFIX}_{grid_size}x{grid_size}_{timestamp}.pdf")


def draw_grid(ax, board: Sequence[Sequence[int]], position: Sequence[float], size_in: float) -> None:
    """Draw ``board`` into ``ax`` placed at the figure-relative ``position``."""

    size = len(board)
    box = subgrid_size(size) or 1
    ax.set_position(list(position))
    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1)
    ax.axis("off")
    for idx in range(size + 1):
        linewidth = 3.0 if idx % box == 0 else 1.0
        ax.axvline(idx / size, color="k", linewidth=linewidth)
        ax.axhline(idx / size, color="k", linewidth=linewidth)

    font_size = max(1, int(FONT_SCALE * size_in * 72 / size))
    for r in range(size):
        for c in range(size):
            glyph = display_value(board[r][c], size)
            if glyph:
                ax.text((c + 0.5) / size, 1 - (r + 0.5) / size, glyph, ha="center", va="center", fontsize=font_size)


def export_pack(
    puzzles: Sequence[Puzzle],
    out_path: str | Path,
    *,
    rows: int = LAYOUT_ROWS,
    cols: int = LAYOUT_COLS,
    margin_cm: float = DEFAULT_MARGIN_CM,
    gap_cm: float = DEFAULT_GAP_CM,
    solutions: bool = False,
) -> Path:
    """Write ``puzzles`` to ``out_path``, ``rows * cols`` per page.

    With ``solutions`` the solution boards are printed instead of the clues.
    Returns the output path.
    """

    import matplotlib.pyplot as plt
    from matplotlib.backends.backend_pdf import PdfPages

    if not puzzles:
        raise ValueError("at least one puzzle is required")

    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    page_w_in = PAGE_WIDTH_CM * INCH_PER_CM
    page_h_in = PAGE_HEIGHT_CM * INCH_PER_CM
    margin_in = margin_cm * INCH_PER_CM
    gap_in = gap_cm * INCH_PER_CM

    avail_w = page_w_in - 2 * margin_in - gap_in * (cols - 1)
    avail_h = page_h_in - 2 * margin_in - gap_in * (rows - 1)
    cell_in = min(avail_w / cols, avail_h / rows)
    if cell_in <= 0:
        raise ValueError("margins and gaps leave no room for the puzzles")

    per_page = rows * cols
    pages = math.ceil(len(puzzles) / per_page)
    footer_y = (FOOTER_OFFSET_CM * INCH_PER_CM) / page_h_in

    with PdfPages(out) as pdf:
        for page in range(pages):
            fig = plt.figure(figsize=(page_w_in, page_h_in))
            try:
                chunk = puzzles[page * per_page:(page + 1) * per_page]
                for idx, puzzle in enumerate(chunk):
                    row, col = divmod(idx, cols)
                    left = margin_in + col * (cell_in + gap_in)
                    bottom = page_h_in - margin_in - (row + 1) * cell_in - row * gap_in
                    ax = fig.add_axes([0, 0, 1, 1], frameon=False)
                    position = (left / page_w_in, bottom / page_h_in, cell_in / page_w_in, cell_in / page_h_in)
                    draw_grid(ax, puzzle.solution if solutions else puzzle.initial, position, cell_in)

                labels = ", ".join(
                    f"{p.grid_size}x{p.grid_size} {p.difficulty.value if p.difficulty else '?'} ({p.clues} clues)"
                    for p in chunk
                )
                title = "Solutions" if solutions else "Puzzles"
                fig.text(0.5, footer_y, f"{title} page {page + 1}/{pages}: {labels}", ha="center", va="bottom", fontsize=8)
                pdf.savefig(fig)
            finally:
                plt.close(fig)
    return out


__all__ = ["draw_grid", "export_pack", "resolve_output_path"]
