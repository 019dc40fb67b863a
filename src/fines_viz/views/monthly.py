from __future__ import annotations

from typing import Any

import pandas as pd

from fines_viz.categories import MONTHS, UNKNOWN
from fines_viz.io.read import RawTable
from fines_viz.parsing.coerce import CoercionStats
from fines_viz.parsing.records import parse_monthly_measures
from fines_viz.transform.shapes import TIME, wide_to_long
from fines_viz.views.base import SeriesView

MEASURES = ("Others", "Camera_Issued", "Police_Issued", "Unknown")


class MonthlyView(SeriesView):
    """Monthly seasonality; ``Others`` is parsed but not charted."""

    name = "monthly"
    title = "Monthly speeding fines by detection method"
    headroom = 1.15
    time_label = "Month"
    category_label = "Detection method"
    labels = {
        "Camera_Issued": "Camera Issued",
        "Police_Issued": "Police Issued",
        "Unknown": "Unknown",
    }
    colors = {
        "Camera_Issued": "#43b02a",
        "Police_Issued": "#f7b500",
        "Unknown": "#e94f37",
    }
    presets = {
        "camera": ("Camera_Issued",),
        "police": ("Police_Issued",),
    }

    def parse(self, table: RawTable, stats: CoercionStats | None = None) -> pd.DataFrame:
        wide = parse_monthly_measures(table.rows, MEASURES, columns=table.columns, stats=stats)
        return wide_to_long(wide, id_column="month", value_columns=MEASURES)

    def time_keys(self, data: pd.DataFrame) -> tuple[Any, ...]:
        observed = set(data[TIME])
        return tuple(month for month in (*MONTHS, UNKNOWN) if month in observed)

    def tick_label(self, value: Any) -> str:
        return str(value)[:3]
