"""Single-entry visualization helper for vault maps."""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import matplotlib.pyplot as plt

from .EdgeExplorer import walk_route
from .KeySearch import SearchResult
from .Objects import CellKind, Grid, Position

CELL_COLORS: Dict[CellKind, str] = {
    CellKind.WALL: "black",
    CellKind.FLOOR: "white",
    CellKind.DOOR: "#a65628",
    CellKind.KEY: "#ffff33",
    CellKind.START: "#4daf4a",
}


def _center(grid: Grid, pos: Position) -> Tuple[float, float]:
    x, y = pos
    return x + 0.5, grid.height - 1 - y + 0.5


def _draw_cells(ax, grid: Grid) -> None:
    font_kwargs = dict(color="black", fontsize=8, ha="center", va="center", fontweight="bold")
    for (x, y), cell in grid.cells():
        ax.add_patch(
            plt.Rectangle(
                (x, grid.height - 1 - y), 1, 1,
                facecolor=CELL_COLORS[cell.kind], edgecolor="lightgray",
            )
        )
        if cell.letter is not None or cell.is_kind(CellKind.START):
            cx, cy = _center(grid, (x, y))
            ax.text(cx, cy, cell.to_char(), **font_kwargs)


def _draw_walk(ax, grid: Grid, walk: List[Position]) -> None:
    if len(walk) < 2:
        return
    xs, ys = zip(*(_center(grid, pos) for pos in walk))
    ax.plot(xs, ys, "-", color="#e41a1c", linewidth=2, alpha=0.7)


def visualize(grid: Grid, result: Optional[SearchResult] = None,
              show: bool = True, save_path: str | None = None) -> None:
    """Render a vault map and, optionally, the walk that collects every key.

    Args:
        grid: parsed vault map.
        result: search result whose route is expanded into grid steps.
        show: display via matplotlib.
        save_path: optional filepath to save PNG.
    """
    fig, ax = plt.subplots(figsize=(max(1, grid.width) / 2, max(1, grid.height) / 2))
    _draw_cells(ax, grid)
    if result is not None:
        _draw_walk(ax, grid, walk_route(grid, result.route))
        ax.set_title(f"{result.steps} steps")

    ax.set_xlim(0, grid.width)
    ax.set_ylim(0, grid.height)
    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_aspect("equal")

    if save_path:
        plt.savefig(save_path, bbox_inches="tight", dpi=150)
    if show:
        plt.show()
    else:
        plt.close(fig)
