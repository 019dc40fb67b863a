from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

import pandas as pd

from fines_viz.categories import DEFAULT_COLOR
from fines_viz.io.read import RawTable
from fines_viz.parsing.coerce import CoercionStats
from fines_viz.render.charts import Series, draw_lines, draw_stacked
from fines_viz.render.context import RenderContext
from fines_viz.scales import ScaleSpec, percent_domain, time_extent, value_domain
from fines_viz.state import PERCENT, ViewState, initial_state
from fines_viz.transform.shapes import (
    CATEGORY,
    TIME,
    VALUE,
    densify,
    normalize_percent,
    series_groups,
    stack_cumulative,
)


@dataclass(frozen=True)
class ChartFrame:
    """Derived data and scales for one render pass."""

    view: str
    chart: str
    data: pd.DataFrame
    scales: ScaleSpec
    title: str


class View:
    """One parameterized visualization over a long ``(time, category, value)`` frame."""

    name: str
    title: str
    charts: tuple[str, ...] = ("line",)
    percent_supported: bool = False
    headroom: float = 1.1
    time_label: str = "Year"
    category_label: str = "Category"
    value_label: str = "Fines"
    labels: Mapping[str, str] = {}
    colors: Mapping[str, str] = {}
    presets: Mapping[str, tuple[str, ...]] = {}

    def parse(self, table: RawTable, stats: CoercionStats | None = None) -> pd.DataFrame:
        raise NotImplementedError

    def category_keys(self, data: pd.DataFrame) -> tuple[str, ...]:
        raise NotImplementedError

    def time_keys(self, data: pd.DataFrame) -> tuple[Any, ...]:
        return time_extent(data[TIME].tolist())

    def default_time_slice(self, data: pd.DataFrame) -> Any | None:
        return None

    def initial_state(self, data: pd.DataFrame) -> ViewState:
        return initial_state(
            self.category_keys(data),
            chart=self.charts[0],
            time_slice=self.default_time_slice(data),
        )

    def supports(self, mode: str) -> bool:
        if mode in ("absolute", PERCENT):
            return mode == "absolute" or self.percent_supported
        return mode in self.charts

    def tick_label(self, value: Any) -> str:
        return str(value)

    def label(self, key: str) -> str:
        return self.labels.get(key, key)

    def color(self, key: str) -> str:
        return self.colors.get(key, DEFAULT_COLOR)

    def preset_names(self) -> tuple[str, ...]:
        return ("all", *self.presets) if self.presets else ()

    def preset(self, name: str, data: pd.DataFrame) -> tuple[str, ...]:
        """Categories selected by a named filter button."""
        if name == "all":
            return self.category_keys(data)
        if name not in self.presets:
            raise ValueError(f"View {self.name} has no preset {name!r}")
        return self.presets[name]

    def derive(self, data: pd.DataFrame, state: ViewState) -> ChartFrame:
        raise NotImplementedError

    def draw(self, context: RenderContext, frame: ChartFrame, state: ViewState) -> None:
        raise NotImplementedError


class SeriesView(View):
    """Time-series view drawn as lines or as stacked bands."""

    def category_keys(self, data: pd.DataFrame) -> tuple[str, ...]:
        return tuple(self.labels)

    def dense(self, data: pd.DataFrame, state: ViewState) -> pd.DataFrame:
        dense = densify(data, times=self.time_keys(data), categories=state.categories)
        if state.percent:
            dense = normalize_percent(dense)
        return dense

    def derive(self, data: pd.DataFrame, state: ViewState) -> ChartFrame:
        times = self.time_keys(data)
        dense = self.dense(data, state)
        visible = set(state.visible())
        if state.chart == "stacked":
            masked = dense.copy()
            masked.loc[~masked[CATEGORY].isin(visible), VALUE] = 0.0
            frame = stack_cumulative(masked, keys=state.categories)
            peaks = frame["upper"]
        else:
            frame = dense[dense[CATEGORY].isin(visible)].reset_index(drop=True)
            peaks = frame[VALUE]
        y = percent_domain() if state.percent else value_domain(peaks, self.headroom)
        return ChartFrame(
            view=self.name,
            chart=state.chart,
            data=frame,
            scales=ScaleSpec(x=tuple(times), y=y),
            title=self.title,
        )

    def series(self, frame: ChartFrame, keys: Sequence[str]) -> list[Series]:
        groups = series_groups(frame.data, keys=keys, time_order=frame.scales.x)
        return [
            Series(
                key=key,
                label=self.label(key),
                color=self.color(key),
                values=tuple(float(value) for value in groups[key][VALUE]),
            )
            for key in keys
        ]

    def draw(self, context: RenderContext, frame: ChartFrame, state: ViewState) -> None:
        (axes,) = context.add_axes()
        times = frame.scales.x
        positions = [float(index) for index in range(len(times))]
        time_labels = [self.tick_label(value) for value in times]
        if frame.chart == "stacked":
            bands = []
            for key in state.categories:
                rows = frame.data[frame.data[CATEGORY] == key]
                values = (rows["upper"] - rows["lower"]).tolist()
                item = Series(key, self.label(key), self.color(key), tuple(values))
                bands.append((item, rows["lower"].tolist(), rows["upper"].tolist()))
            hover = draw_stacked(
                axes,
                positions,
                time_labels,
                bands,
                frame.scales.y,
                highlight=state.highlight,
                percent=state.percent,
                time_label=self.time_label,
                value_label=self.value_label,
            )
        else:
            hover = draw_lines(
                axes,
                positions,
                time_labels,
                self.series(frame, state.visible()),
                frame.scales.y,
                highlight=state.highlight,
                percent=state.percent,
                time_label=self.time_label,
                value_label=self.value_label,
            )
        axes.set_title(frame.title)
        context.hover.register(axes, hover)
