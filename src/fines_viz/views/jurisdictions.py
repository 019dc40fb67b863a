from __future__ import annotations

from typing import Any, Sequence

import pandas as pd

from fines_viz.categories import JURISDICTION_COLORS, JURISDICTIONS
from fines_viz.io.boundaries import Region, fallback_boundaries, regions_from_features
from fines_viz.io.read import RawTable
from fines_viz.parsing.coerce import CoercionStats
from fines_viz.parsing.records import parse_jurisdiction_rows
from fines_viz.render.charts import draw_choropleth
from fines_viz.render.context import RenderContext
from fines_viz.scales import ScaleSpec, color_domain
from fines_viz.state import ViewState
from fines_viz.transform.shapes import CATEGORY, TIME, VALUE, densify, top_categories
from fines_viz.views.base import ChartFrame, SeriesView

TOP_PRESETS = {"top3": 3, "top5": 5}


class JurisdictionsView(SeriesView):
    """Fines per jurisdiction as lines, or as a map for one year.

    The map always shows every jurisdiction; only the highlight and the
    selected year change it.
    """

    name = "jurisdictions"
    title = "Speeding fines by jurisdiction"
    charts = ("line", "choropleth")
    headroom = 1.1
    category_label = "Jurisdiction"
    labels = {code: code for code in JURISDICTIONS}
    colors = JURISDICTION_COLORS

    def __init__(self, regions: Sequence[Region] | None = None) -> None:
        self.regions = list(regions) if regions else regions_from_features(fallback_boundaries())

    def parse(self, table: RawTable, stats: CoercionStats | None = None) -> pd.DataFrame:
        parsed = parse_jurisdiction_rows(table.rows, columns=table.columns, stats=stats)
        return parsed.rename(columns={"year": TIME, "jurisdiction": CATEGORY})

    def category_keys(self, data: pd.DataFrame) -> tuple[str, ...]:
        return JURISDICTIONS

    def default_time_slice(self, data: pd.DataFrame) -> Any | None:
        times = self.time_keys(data)
        return times[-1] if times else None

    def preset_names(self) -> tuple[str, ...]:
        return ("all", *TOP_PRESETS)

    def preset(self, name: str, data: pd.DataFrame) -> tuple[str, ...]:
        if name in TOP_PRESETS:
            latest = self.default_time_slice(data)
            return tuple(top_categories(data, time_value=latest, n=TOP_PRESETS[name]))
        return super().preset(name, data)

    def derive(self, data: pd.DataFrame, state: ViewState) -> ChartFrame:
        if state.chart != "choropleth":
            return super().derive(data, state)
        year = state.time_slice if state.time_slice is not None else self.default_time_slice(data)
        times = [] if year is None else [year]
        at_year = densify(data[data[TIME] == year], times=times, categories=JURISDICTIONS)
        return ChartFrame(
            view=self.name,
            chart=state.chart,
            data=at_year,
            scales=ScaleSpec(x=tuple(times), color=color_domain(at_year[VALUE])),
            title=f"{self.title} ({year})" if year is not None else self.title,
        )

    def draw(self, context: RenderContext, frame: ChartFrame, state: ViewState) -> None:
        if frame.chart != "choropleth":
            super().draw(context, frame, state)
            return
        (axes,) = context.add_axes()
        values = dict(zip(frame.data[CATEGORY], frame.data[VALUE].astype(float)))
        hover = draw_choropleth(
            axes,
            self.regions,
            values,
            frame.scales.color,
            time_text=self.tick_label(frame.scales.x[0]) if frame.scales.x else "",
            highlight=state.highlight,
        )
        axes.set_title(frame.title)
        context.hover.register(axes, hover)
