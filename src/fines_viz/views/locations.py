from __future__ import annotations

import pandas as pd

from fines_viz.io.read import RawTable
from fines_viz.parsing.coerce import CoercionStats
from fines_viz.parsing.records import parse_location_rows
from fines_viz.render.charts import draw_heatmap
from fines_viz.render.context import RenderContext
from fines_viz.scales import ScaleSpec, color_domain
from fines_viz.state import ViewState
from fines_viz.transform.shapes import CATEGORY, TIME, VALUE, densify
from fines_viz.views.base import ChartFrame, View


class LocationsView(View):
    """Location type by year intensity grid; locations are whatever the data contains."""

    name = "locations"
    title = "Speeding fines by location type and year"
    charts = ("heatmap",)
    category_label = "Location"

    def parse(self, table: RawTable, stats: CoercionStats | None = None) -> pd.DataFrame:
        parsed = parse_location_rows(table.rows, columns=table.columns, stats=stats)
        return parsed.rename(columns={"year": TIME, "location": CATEGORY})

    def category_keys(self, data: pd.DataFrame) -> tuple[str, ...]:
        return tuple(dict.fromkeys(str(key) for key in data[CATEGORY]))

    def derive(self, data: pd.DataFrame, state: ViewState) -> ChartFrame:
        times = self.time_keys(data)
        grid = densify(data, times=times, categories=state.visible())
        return ChartFrame(
            view=self.name,
            chart=state.chart,
            data=grid,
            scales=ScaleSpec(x=tuple(times), color=color_domain(grid[VALUE])),
            title=self.title,
        )

    def draw(self, context: RenderContext, frame: ChartFrame, state: ViewState) -> None:
        (axes,) = context.add_axes()
        rows = state.visible()
        matrix = (
            frame.data.pivot(index=CATEGORY, columns=TIME, values=VALUE)
            .reindex(index=rows, columns=list(frame.scales.x))
            .fillna(0.0)
            .to_numpy(dtype=float)
        )
        hover = draw_heatmap(
            axes,
            rows,
            [self.tick_label(value) for value in frame.scales.x],
            matrix,
            frame.scales.color,
        )
        axes.set_title(frame.title)
        context.hover.register(axes, hover)
