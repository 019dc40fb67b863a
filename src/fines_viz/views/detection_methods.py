from __future__ import annotations

import pandas as pd

from fines_viz.categories import DETECTION_METHODS, METHOD_COLORS, METHOD_LABELS
from fines_viz.io.read import RawTable
from fines_viz.parsing.coerce import CoercionStats
from fines_viz.parsing.records import parse_yearly_measures
from fines_viz.transform.shapes import wide_to_long
from fines_viz.views.base import SeriesView


class DetectionMethodsView(SeriesView):
    name = "detection_methods"
    title = "National speeding fines by detection method"
    headroom = 1.1
    category_label = "Detection method"
    labels = METHOD_LABELS
    colors = METHOD_COLORS
    presets = {
        "camera": ("Camera_Issued",),
        "police": ("Police_Issued",),
    }

    def parse(self, table: RawTable, stats: CoercionStats | None = None) -> pd.DataFrame:
        wide = parse_yearly_measures(
            table.rows, DETECTION_METHODS, columns=table.columns, stats=stats
        )
        return wide_to_long(wide, id_column="year", value_columns=DETECTION_METHODS)
