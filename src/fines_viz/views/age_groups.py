from __future__ import annotations

from typing import Any

import pandas as pd

from fines_viz.categories import AGE_GROUP_COLORS, AGE_GROUPS, UNKNOWN
from fines_viz.io.read import RawTable
from fines_viz.parsing.coerce import CoercionStats
from fines_viz.parsing.records import parse_age_rows
from fines_viz.render.charts import Series, draw_bars, draw_pie
from fines_viz.render.context import RenderContext
from fines_viz.scales import ScaleSpec, value_domain
from fines_viz.state import ViewState
from fines_viz.transform.shapes import (
    CATEGORY,
    TIME,
    VALUE,
    aggregate_across_time,
    densify,
)
from fines_viz.views.base import ChartFrame, View

ALL_YEARS = "All years"


class AgeGroupsView(View):
    """Single-year bars per age group, or a pie over every year.

    The pie ignores both the category filters and the
    selected year.
    """

    name = "age_groups"
    title = "Speeding fines by age group"
    charts = ("bar", "pie")
    headroom = 1.05
    category_label = "Age group"
    colors = AGE_GROUP_COLORS

    def __init__(self, default_year: int = 2023) -> None:
        self.default_year = default_year

    def parse(self, table: RawTable, stats: CoercionStats | None = None) -> pd.DataFrame:
        parsed = parse_age_rows(
            table.rows, default_year=self.default_year, columns=table.columns, stats=stats
        )
        return parsed.rename(columns={"year": TIME, "age_group": CATEGORY})

    def category_keys(self, data: pd.DataFrame) -> tuple[str, ...]:
        observed = set(data[CATEGORY])
        keys = tuple(group for group in (*AGE_GROUPS, UNKNOWN) if group in observed)
        return keys or AGE_GROUPS

    def default_time_slice(self, data: pd.DataFrame) -> Any | None:
        times = self.time_keys(data)
        return times[0] if times else self.default_year

    def derive(self, data: pd.DataFrame, state: ViewState) -> ChartFrame:
        if state.chart == "pie":
            totals = aggregate_across_time(data, categories=state.categories)
            return ChartFrame(
                view=self.name,
                chart=state.chart,
                data=totals,
                scales=ScaleSpec(x=state.categories),
                title=f"{self.title} ({ALL_YEARS.lower()})",
            )
        year = state.time_slice if state.time_slice is not None else self.default_time_slice(data)
        visible = state.visible()
        at_year = densify(data[data[TIME] == year], times=[year], categories=visible)
        return ChartFrame(
            view=self.name,
            chart=state.chart,
            data=at_year,
            scales=ScaleSpec(x=tuple(visible), y=value_domain(at_year[VALUE], self.headroom)),
            title=f"{self.title} ({year})",
        )

    def draw(self, context: RenderContext, frame: ChartFrame, state: ViewState) -> None:
        (axes,) = context.add_axes()
        series = [
            Series(key, self.label(key), self.color(key), (float(value),))
            for key, value in zip(frame.data[CATEGORY], frame.data[VALUE])
        ]
        if frame.chart == "pie":
            hover = draw_pie(axes, series, time_text=ALL_YEARS, highlight=state.highlight)
        else:
            year = frame.data[TIME].iloc[0] if len(frame.data) else state.time_slice
            hover = draw_bars(
                axes,
                series,
                frame.scales.y,
                time_text=self.tick_label(year),
                highlight=state.highlight,
                category_label=self.category_label,
                value_label=self.value_label,
            )
        axes.set_title(frame.title)
        context.hover.register(axes, hover)
