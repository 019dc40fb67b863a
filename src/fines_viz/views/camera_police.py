from __future__ import annotations

import pandas as pd

from fines_viz.io.read import RawTable
from fines_viz.parsing.coerce import CoercionStats
from fines_viz.parsing.records import parse_yearly_measures
from fines_viz.transform.shapes import wide_to_long
from fines_viz.views.base import SeriesView

MEASURES = ("Camera_Issued", "Police_Issued")


class CameraPoliceView(SeriesView):
    """Camera versus police share; the only view with a percent mode."""

    name = "camera_police"
    title = "Camera vs police issued fines"
    charts = ("line", "stacked")
    percent_supported = True
    headroom = 1.05
    category_label = "Detection method"
    labels = {"Camera_Issued": "Camera", "Police_Issued": "Police"}
    colors = {"Camera_Issued": "#4C8CF5", "Police_Issued": "#E35B5B"}
    presets = {
        "camera": ("Camera_Issued",),
        "police": ("Police_Issued",),
    }

    def parse(self, table: RawTable, stats: CoercionStats | None = None) -> pd.DataFrame:
        wide = parse_yearly_measures(table.rows, MEASURES, columns=table.columns, stats=stats)
        return wide_to_long(wide, id_column="year", value_columns=MEASURES)
