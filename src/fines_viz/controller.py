from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

import pandas as pd

from fines_viz.io.read import read_raw_table
from fines_viz.parsing.coerce import CoercionStats, coerce_year
from fines_viz.render.context import RenderContext
from fines_viz.state import (
    Event,
    SelectAll,
    SelectOnly,
    SetHighlight,
    SetMode,
    SetTimeSlice,
    ToggleCategory,
    ViewState,
    reduce,
)
from fines_viz.views.base import ChartFrame, View

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Control:
    """A UI control: its kind plus the ``data-*`` attributes it carries."""

    kind: str
    data: Mapping[str, str] = field(default_factory=dict)

    def attribute(self, name: str) -> str:
        try:
            return str(self.data[name])
        except KeyError as exc:
            raise ValueError(f"{self.kind} control is missing data-{name}") from exc


def event_for_control(control: Control, view: View, data: pd.DataFrame) -> Event:
    if control.kind == "preset":
        name = control.attribute("method")
        if name == "all":
            return SelectAll()
        return SelectOnly(view.preset(name, data))
    if control.kind in ("checkbox", "legend"):
        return ToggleCategory(control.attribute("category"))
    if control.kind == "view":
        return SetMode(control.attribute("view"))
    if control.kind == "scale":
        return SetMode(control.attribute("mode"))
    if control.kind == "year":
        return SetTimeSlice(coerce_year(control.attribute("year")))
    if control.kind == "region":
        return SetHighlight(control.attribute("region"))
    raise ValueError(f"Unknown control kind: {control.kind}")


def load_view(
    view: View,
    path: Path,
    stats: CoercionStats | None = None,
) -> pd.DataFrame:
    """Read and parse the one source table a view is drawn from."""
    table = read_raw_table(path)
    data = view.parse(table, stats)
    LOGGER.info("Loaded %s: %d rows -> %d records", view.name, len(table), len(data))
    return data


class ViewController:
    """Owns the view state of one loaded view and redraws after every event."""

    def __init__(
        self,
        view: View,
        data: pd.DataFrame,
        context: RenderContext | None = None,
    ) -> None:
        self.view = view
        self.data = data
        self.context = context
        self.state: ViewState = view.initial_state(data)
        self.frame: ChartFrame | None = None

    def dispatch(self, event: Event) -> ChartFrame:
        if isinstance(event, SetMode) and not self.view.supports(event.mode):
            raise ValueError(f"View {self.view.name} does not support mode {event.mode!r}")
        self.state = reduce(self.state, event)
        LOGGER.debug("%s -> %s", type(event).__name__, self.state)
        return self.render()

    def handle(self, control: Control) -> ChartFrame:
        return self.dispatch(event_for_control(control, self.view, self.data))

    def render(self) -> ChartFrame:
        frame = self.view.derive(self.data, self.state)
        if self.context is not None:
            self.context.clear()
            self.view.draw(self.context, frame, self.state)
            self.context.redraw()
        self.frame = frame
        return frame
