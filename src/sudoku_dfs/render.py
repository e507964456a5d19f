"""Draw a board to PDF or PNG with matplotlib."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from project_config import get_section  # noqa: E402

from .board import SIZE, GPos, SudokuBoard  # noqa: E402

CLUE_COLOR = "0.45"
SOLVED_COLOR = "k"
CONTRADICTION_COLOR = "tab:red"


def draw_board(ax, board: SudokuBoard, clues: Optional[Sequence[bool]] = None, *, font_scale: float = 0.6) -> None:
    """Draw ``board`` into ``ax`` using unit coordinates."""

    ax.tick_params(axis="both", which="both", bottom=False, top=False, left=False, right=False,
                   labelbottom=False, labelleft=False)
    for idx in range(SIZE + 1):
        linewidth = 1.0 if idx % 3 else 2.5
        ax.axvline(idx / SIZE, color="k", linewidth=linewidth)
        ax.axhline(idx / SIZE, color="k", linewidth=linewidth)
    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1)
    ax.set_aspect("equal")
    ax.axis("off")

    width_in = ax.figure.get_figwidth() * ax.get_position().width
    font_size = max(1, int(font_scale * width_in * 72 / SIZE))
    for y in range(SIZE):
        for x in range(SIZE):
            pos = GPos(x, y)
            value, count = board.cell_info(pos)
            cx = (x + 0.5) / SIZE
            cy = 1 - (y + 0.5) / SIZE
            if count == 0:
                ax.text(cx, cy, "!", ha="center", va="center", fontsize=font_size, color=CONTRADICTION_COLOR)
            elif value:
                color = CLUE_COLOR if clues is not None and clues[pos.index] else SOLVED_COLOR
                ax.text(cx, cy, str(value), ha="center", va="center", fontsize=font_size, color=color)


def save_board_figure(
    board: SudokuBoard,
    out_path: str | Path,
    *,
    clues: Optional[Sequence[bool]] = None,
    title: Optional[str] = None,
) -> Path:
    """Render ``board`` to ``out_path``; the suffix picks the format."""

    size_in = float(get_section("render.figure_size_in", 6.0))
    font_scale = float(get_section("render.font_scale", 0.6))

    path = Path(out_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig = plt.figure(figsize=(size_in, size_in))
    try:
        ax = fig.add_axes([0.05, 0.05, 0.9, 0.9], frameon=False)
        draw_board(ax, board, clues, font_scale=font_scale)
        if title:
            fig.text(0.5, 0.97, title, ha="center", va="top", fontsize=10)
        fig.savefig(path)
    finally:
        plt.close(fig)
    return path


__all__ = ["draw_board", "save_board_figure"]
