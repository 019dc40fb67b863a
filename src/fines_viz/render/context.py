from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from matplotlib.axes import Axes
from matplotlib.figure import Figure, SubFigure

from fines_viz.render.hover import HoverIndex


@dataclass
class RenderContext:
    """Handle threaded through every redraw of one chart surface."""

    figure: Figure
    surface: Figure | SubFigure
    axes: list[Axes] = field(default_factory=list)
    hover: HoverIndex = field(default_factory=HoverIndex)
    annotation: Any | None = None

    def clear(self) -> None:
        self.surface.clear()
        self.axes = []
        self.hover = HoverIndex()
        self.annotation = None

    def add_axes(self, rows: int = 1, columns: int = 1) -> list[Axes]:
        grid = self.surface.subplots(rows, columns, squeeze=False)
        self.axes = [axes for row in grid for axes in row]
        return self.axes

    def redraw(self) -> None:
        canvas = self.figure.canvas
        if canvas is not None:
            canvas.draw_idle()


def create_render_context(
    width: float = 9.0,
    height: float = 5.0,
    dpi: int = 100,
    *,
    figure: Figure | None = None,
    surface: Figure | SubFigure | None = None,
) -> RenderContext:
    """Build a context on a fresh off-screen figure unless one is supplied."""
    if figure is None:
        figure = Figure(figsize=(width, height), dpi=dpi)
    return RenderContext(figure=figure, surface=surface if surface is not None else figure)


def save_figure(context: RenderContext, path: Path, fmt: str | None = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    fmt = fmt or path.suffix.lstrip(".") or "svg"
    context.figure.savefig(path, format=fmt, bbox_inches="tight")
    return path
