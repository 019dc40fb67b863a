from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping, Sequence

import numpy as np
from matplotlib import colormaps
from matplotlib.axes import Axes
from matplotlib.cm import ScalarMappable
from matplotlib.colors import Normalize
from matplotlib.patches import Polygon as PolygonPatch
from matplotlib.path import Path as MplPath
from matplotlib.ticker import FuncFormatter, PercentFormatter

from fines_viz.categories import MISSING_REGION_COLOR, NO_DATA_COLOR
from fines_viz.io.boundaries import Region
from fines_viz.render.hover import (
    BandHover,
    CellHover,
    LineHover,
    RectHover,
    RegionHover,
    SeriesPoints,
    Tooltip,
    WedgeHover,
)
from fines_viz.scales import Domain

DIMMED_ALPHA = 0.25


@dataclass(frozen=True)
class Series:
    key: str
    label: str
    color: str
    values: tuple[float, ...]

    def points(self) -> SeriesPoints:
        return SeriesPoints(self.key, self.label, self.values)


def _alpha(key: str, highlight: str | None) -> float:
    return 1.0 if highlight is None or key == highlight else DIMMED_ALPHA


def _thousands(value: float, _position: int) -> str:
    return f"{value:,.0f}"


def _format_value_axis(axes: Axes, percent: bool) -> None:
    if percent:
        axes.yaxis.set_major_formatter(PercentFormatter(xmax=1.0))
    else:
        axes.yaxis.set_major_formatter(FuncFormatter(_thousands))


def _pickable_legend(axes: Axes, keys: Sequence[str]) -> None:
    legend = axes.legend(loc="upper left", frameon=False, fontsize=9)
    for text, key in zip(legend.get_texts(), keys):
        text.set_picker(True)
        text.set_gid(key)


def _time_axis(axes: Axes, positions: Sequence[float], labels: Sequence[str], label: str) -> None:
    axes.set_xticks(list(positions), list(labels))
    if positions:
        axes.set_xlim(positions[0] - 0.5, positions[-1] + 0.5)
    axes.set_xlabel(label)
    axes.grid(axis="y", color="#e6e6e6")


def draw_lines(
    axes: Axes,
    positions: Sequence[float],
    time_labels: Sequence[str],
    series: Sequence[Series],
    y_domain: Domain,
    *,
    highlight: str | None = None,
    percent: bool = False,
    time_label: str = "Year",
    value_label: str = "Fines",
) -> LineHover:
    for item in series:
        emphasised = highlight is not None and item.key == highlight
        axes.plot(
            positions,
            item.values,
            marker="o",
            markersize=4,
            linewidth=3.0 if emphasised else 2.0,
            color=item.color,
            alpha=_alpha(item.key, highlight),
            label=item.label,
        )
    _time_axis(axes, positions, time_labels, time_label)
    axes.set_ylim(*y_domain)
    axes.set_ylabel(value_label)
    _format_value_axis(axes, percent)
    if series:
        _pickable_legend(axes, [item.key for item in series])
    return LineHover(
        positions=tuple(positions),
        time_labels=tuple(time_labels),
        series=tuple(item.points() for item in series),
        percent=percent,
    )


def draw_stacked(
    axes: Axes,
    positions: Sequence[float],
    time_labels: Sequence[str],
    bands: Sequence[tuple[Series, Sequence[float], Sequence[float]]],
    y_domain: Domain,
    *,
    highlight: str | None = None,
    percent: bool = False,
    time_label: str = "Year",
    value_label: str = "Fines",
) -> BandHover:
    for item, lower, upper in bands:
        axes.fill_between(
            positions,
            lower,
            upper,
            color=item.color,
            alpha=0.85 * _alpha(item.key, highlight),
            label=item.label,
            linewidth=0,
        )
    _time_axis(axes, positions, time_labels, time_label)
    axes.set_ylim(*y_domain)
    axes.set_ylabel(value_label)
    _format_value_axis(axes, percent)
    if bands:
        _pickable_legend(axes, [item.key for item, _, _ in bands])
    return BandHover(
        positions=tuple(positions),
        time_labels=tuple(time_labels),
        bands=tuple((item.points(), tuple(lower), tuple(upper)) for item, lower, upper in bands),
        percent=percent,
    )


def draw_bars(
    axes: Axes,
    series: Sequence[Series],
    y_domain: Domain,
    *,
    time_text: str,
    highlight: str | None = None,
    category_label: str = "Category",
    value_label: str = "Fines",
) -> RectHover:
    """One bar per series, using the first value of each."""
    positions = list(range(len(series)))
    values = [item.values[0] if item.values else 0.0 for item in series]
    container = axes.bar(
        positions,
        values,
        color=[item.color for item in series],
        width=0.7,
    )
    rects = []
    for patch, item, value in zip(container.patches, series, values):
        patch.set_alpha(_alpha(item.key, highlight))
        patch.set_picker(True)
        patch.set_gid(item.key)
        x0, y0 = patch.get_x(), patch.get_y()
        x1, y1 = x0 + patch.get_width(), y0 + patch.get_height()
        rects.append((x0, y0, x1, y1, Tooltip(item.label, time_text, value)))
    axes.set_xticks(positions, [item.label for item in series])
    axes.set_ylim(*y_domain)
    axes.set_xlabel(category_label)
    axes.set_ylabel(value_label)
    axes.grid(axis="y", color="#e6e6e6")
    _format_value_axis(axes, percent=False)
    return RectHover(rects=tuple(rects))


def draw_pie(
    axes: Axes,
    series: Sequence[Series],
    *,
    time_text: str,
    highlight: str | None = None,
) -> WedgeHover:
    values = [max(0.0, item.values[0] if item.values else 0.0) for item in series]
    total = sum(values)
    axes.set_aspect("equal")
    if total <= 0:
        axes.text(0.5, 0.5, "No data", ha="center", va="center", transform=axes.transAxes)
        axes.set_axis_off()
        return WedgeHover(center=(0.0, 0.0), radius=1.0, wedges=())
    wedges, _texts, _autotexts = axes.pie(
        values,
        labels=[item.label for item in series],
        colors=[item.color for item in series],
        explode=[0.08 if item.key == highlight else 0.0 for item in series],
        startangle=90,
        counterclock=False,
        autopct=lambda share: f"{share:.1f}%" if share >= 3 else "",
        wedgeprops={"edgecolor": "white", "linewidth": 1},
    )
    hits = []
    for wedge, item, value in zip(wedges, series, values):
        wedge.set_picker(True)
        wedge.set_gid(item.key)
        wedge.set_alpha(_alpha(item.key, highlight))
        hits.append((wedge.theta1, wedge.theta2, Tooltip(item.label, time_text, value)))
    return WedgeHover(
        center=(0.0, 0.0),
        radius=max(float(wedge.r) for wedge in wedges),
        wedges=tuple(hits),
    )


def draw_heatmap(
    axes: Axes,
    row_labels: Sequence[str],
    column_labels: Sequence[str],
    matrix: np.ndarray,
    color_domain: Domain,
    *,
    colorbar_label: str = "Fines",
) -> CellHover:
    """Intensity grid; zero cells are masked and drawn in the no-data colour."""
    values = np.asarray(matrix, dtype=float).reshape(len(row_labels), len(column_labels))
    if values.size == 0:
        axes.text(0.5, 0.5, "No data", ha="center", va="center", transform=axes.transAxes)
        axes.set_axis_off()
        return CellHover(row_labels=(), column_labels=(), values=())
    masked = np.ma.masked_where(values == 0, values)
    cmap = colormaps["Reds"].copy()
    cmap.set_bad(NO_DATA_COLOR)
    image = axes.imshow(
        masked,
        aspect="auto",
        cmap=cmap,
        norm=Normalize(vmin=color_domain[0], vmax=color_domain[1]),
        interpolation="nearest",
    )
    axes.figure.colorbar(image, ax=axes, label=colorbar_label)
    axes.set_xticks(range(len(column_labels)), list(column_labels), rotation=45, ha="right")
    axes.set_yticks(range(len(row_labels)), list(row_labels))
    return CellHover(
        row_labels=tuple(row_labels),
        column_labels=tuple(column_labels),
        values=tuple(tuple(float(value) for value in row) for row in values),
    )


def mercator(longitude: float, latitude: float) -> tuple[float, float]:
    return longitude, math.degrees(math.log(math.tan(math.pi / 4 + math.radians(latitude) / 2)))


def draw_choropleth(
    axes: Axes,
    regions: Sequence[Region],
    values: Mapping[str, float],
    color_domain: Domain,
    *,
    time_text: str,
    highlight: str | None = None,
    colorbar_label: str = "Fines",
) -> RegionHover:
    """Fill one patch per region; zero-valued regions use the no-data colour."""
    cmap = colormaps["Blues"]
    norm = Normalize(vmin=color_domain[0], vmax=color_domain[1])
    hits = []
    for region in regions:
        value = values.get(region.code)
        if value is None:
            fill = MISSING_REGION_COLOR
        elif value == 0:
            fill = NO_DATA_COLOR
        else:
            fill = cmap(norm(value))
        emphasised = highlight is not None and region.code == highlight
        tooltip = Tooltip(region.name, time_text, float(value or 0.0))
        largest: list[tuple[float, float]] = []
        for ring in region.rings:
            projected = [mercator(lon, lat) for lon, lat in ring]
            patch = PolygonPatch(
                projected,
                closed=True,
                facecolor=fill,
                edgecolor="#333333" if emphasised else "white",
                linewidth=2.0 if emphasised else 0.8,
                alpha=_alpha(region.code, highlight) if highlight else 0.9,
                picker=True,
                gid=region.code,
            )
            axes.add_patch(patch)
            hits.append((region.code, MplPath(projected), tooltip))
            if len(projected) > len(largest):
                largest = projected
        if largest:
            cx = float(np.mean([point[0] for point in largest]))
            cy = float(np.mean([point[1] for point in largest]))
            axes.text(cx, cy, region.code, ha="center", va="center", fontsize=8, fontweight="bold")
    axes.set_aspect("equal")
    axes.autoscale_view()
    axes.set_axis_off()
    mappable = ScalarMappable(norm=norm, cmap=cmap)
    axes.figure.colorbar(mappable, ax=axes, label=colorbar_label, shrink=0.7)
    return RegionHover(regions=tuple(hits))
