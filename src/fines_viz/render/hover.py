"""Hover hit-testing in data coordinates.

Each drawer registers a hit tester for the axes it drew on.  A tester maps
a pointer position, already converted to data coordinates, to the
``Tooltip`` for the record under it, so the lookup can be exercised
without a window or real mouse events.
"""

from __future__ import annotations

import bisect
import math
from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence

from matplotlib.path import Path as MplPath


def format_value(value: float, percent: bool = False) -> str:
    if percent:
        return f"{value:.1%}"
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.1f}"


@dataclass(frozen=True)
class Tooltip:
    category: str
    time: str
    value: float
    percent: bool = False

    @property
    def text(self) -> str:
        return f"{self.category}\n{self.time}: {format_value(self.value, self.percent)}"


class HitTester(Protocol):
    def hit(self, x: float, y: float) -> Tooltip | None: ...


def nearest_index(positions: Sequence[float], x: float) -> int | None:
    """Index of the time position nearest to *x*; *positions* must be ascending."""
    if not positions or x is None or math.isnan(x):
        return None
    right = bisect.bisect_left(positions, x)
    if right <= 0:
        return 0
    if right >= len(positions):
        return len(positions) - 1
    left = right - 1
    return left if x - positions[left] <= positions[right] - x else right


@dataclass(frozen=True)
class SeriesPoints:
    key: str
    label: str
    values: tuple[float, ...]


@dataclass(frozen=True)
class LineHover:
    positions: tuple[float, ...]
    time_labels: tuple[str, ...]
    series: tuple[SeriesPoints, ...]
    percent: bool = False

    def hit(self, x: float, y: float) -> Tooltip | None:
        index = nearest_index(self.positions, x)
        if index is None or not self.series:
            return None
        closest = min(self.series, key=lambda item: abs(item.values[index] - y))
        return Tooltip(closest.label, self.time_labels[index], closest.values[index], self.percent)


@dataclass(frozen=True)
class BandHover:
    positions: tuple[float, ...]
    time_labels: tuple[str, ...]
    bands: tuple[tuple[SeriesPoints, tuple[float, ...], tuple[float, ...]], ...]
    percent: bool = False

    def hit(self, x: float, y: float) -> Tooltip | None:
        index = nearest_index(self.positions, x)
        if index is None:
            return None
        for points, lower, upper in self.bands:
            if lower[index] <= y <= upper[index] and upper[index] > lower[index]:
                return Tooltip(
                    points.label, self.time_labels[index], points.values[index], self.percent
                )
        return None


@dataclass(frozen=True)
class RectHover:
    rects: tuple[tuple[float, float, float, float, Tooltip], ...]

    def hit(self, x: float, y: float) -> Tooltip | None:
        for x0, y0, x1, y1, tooltip in self.rects:
            if min(x0, x1) <= x <= max(x0, x1) and min(y0, y1) <= y <= max(y0, y1):
                return tooltip
        return None


@dataclass(frozen=True)
class WedgeHover:
    center: tuple[float, float]
    radius: float
    wedges: tuple[tuple[float, float, Tooltip], ...]

    def hit(self, x: float, y: float) -> Tooltip | None:
        dx, dy = x - self.center[0], y - self.center[1]
        if math.hypot(dx, dy) > self.radius:
            return None
        angle = math.degrees(math.atan2(dy, dx)) % 360.0
        for theta1, theta2, tooltip in self.wedges:
            start, end = theta1 % 360.0, theta2 % 360.0
            if theta2 - theta1 >= 360.0:
                return tooltip
            inside = start <= angle <= end if start <= end else angle >= start or angle <= end
            if inside and theta2 > theta1:
                return tooltip
        return None


@dataclass(frozen=True)
class CellHover:
    row_labels: tuple[str, ...]
    column_labels: tuple[str, ...]
    values: tuple[tuple[float, ...], ...]

    def hit(self, x: float, y: float) -> Tooltip | None:
        column, row = int(round(x)), int(round(y))
        if not (0 <= row < len(self.row_labels) and 0 <= column < len(self.column_labels)):
            return None
        return Tooltip(self.row_labels[row], self.column_labels[column], self.values[row][column])


@dataclass(frozen=True)
class RegionHover:
    regions: tuple[tuple[str, MplPath, Tooltip], ...]

    def hit(self, x: float, y: float) -> Tooltip | None:
        for _, path, tooltip in self.regions:
            if path.contains_point((x, y)):
                return tooltip
        return None

    def region_at(self, x: float, y: float) -> str | None:
        for code, path, _ in self.regions:
            if path.contains_point((x, y)):
                return code
        return None


@dataclass
class HoverIndex:
    testers: dict[int, tuple[Any, HitTester]] = field(default_factory=dict)

    def register(self, axes: Any, tester: HitTester) -> None:
        self.testers[id(axes)] = (axes, tester)

    def tester_for(self, axes: Any) -> HitTester | None:
        entry = self.testers.get(id(axes))
        return entry[1] if entry is not None and entry[0] is axes else None

    def lookup(self, axes: Any, x: float | None, y: float | None) -> Tooltip | None:
        tester = self.tester_for(axes)
        if tester is None or x is None or y is None:
            return None
        return tester.hit(x, y)


def _hide(context: Any) -> None:
    if context.annotation is not None and context.annotation.get_visible():
        context.annotation.set_visible(False)
        context.redraw()


def connect_hover(context: Any) -> list[int]:
    """Show a tooltip annotation while the pointer is over a record; clear it on leave."""
    canvas = context.figure.canvas

    def on_motion(event: Any) -> None:
        tooltip = context.hover.lookup(event.inaxes, event.xdata, event.ydata)
        if tooltip is None:
            _hide(context)
            return
        annotation = context.annotation
        if annotation is None or annotation.axes is not event.inaxes:
            if annotation is not None:
                annotation.remove()
            annotation = event.inaxes.annotate(
                "",
                xy=(0, 0),
                xytext=(12, 12),
                textcoords="offset points",
                bbox={"boxstyle": "round", "fc": "white", "ec": "#888888", "alpha": 0.95},
                fontsize=9,
            )
            context.annotation = annotation
        annotation.xy = (event.xdata, event.ydata)
        annotation.set_text(tooltip.text)
        annotation.set_visible(True)
        context.redraw()

    def on_leave(event: Any) -> None:
        _hide(context)

    return [
        canvas.mpl_connect("motion_notify_event", on_motion),
        canvas.mpl_connect("axes_leave_event", on_leave),
        canvas.mpl_connect("figure_leave_event", on_leave),
    ]
