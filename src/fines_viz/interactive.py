from __future__ import annotations

import logging
from typing import Any

import matplotlib.pyplot as plt
from matplotlib.text import Text
from matplotlib.widgets import Button, CheckButtons, RadioButtons

from fines_viz.controller import Control, ViewController
from fines_viz.io.prefs import PreferenceStore
from fines_viz.render.context import create_render_context
from fines_viz.render.hover import connect_hover
from fines_viz.state import ABSOLUTE, PERCENT

LOGGER = logging.getLogger(__name__)

OPEN_SIDEBAR_WIDTH = 0.26
CLOSED_SIDEBAR_WIDTH = 0.06


class InteractiveWindow:
    """A figure with a collapsible widget sidebar next to the chart surface.

    Any state change, sidebar toggle or window resize rebuilds the sidebar
    and redraws the chart from scratch.
    """

    def __init__(self, controller: ViewController, prefs: PreferenceStore, figure: Any) -> None:
        self.controller = controller
        self.prefs = prefs
        self.figure = figure
        self.sidebar_closed = prefs.sidebar_closed()
        self.widgets: list[Any] = []
        self.context = create_render_context(figure=figure)
        controller.context = self.context

    @property
    def view(self):
        return self.controller.view

    def connect(self) -> None:
        canvas = self.figure.canvas
        connect_hover(self.context)
        canvas.mpl_connect("pick_event", self.on_pick)
        canvas.mpl_connect("resize_event", lambda _event: self.layout())

    def layout(self) -> None:
        self.figure.clear()
        self.widgets = []
        width = CLOSED_SIDEBAR_WIDTH if self.sidebar_closed else OPEN_SIDEBAR_WIDTH
        sidebar, chart = self.figure.subfigures(1, 2, width_ratios=[width, 1.0 - width])
        self.context.surface = chart
        self._build_sidebar(sidebar)
        self.controller.render()

    def apply(self, control: Control) -> None:
        try:
            self.controller.handle(control)
        except ValueError:
            LOGGER.exception("Ignoring control %s", control)
            return
        self.layout()

    def toggle_sidebar(self, _event: Any = None) -> None:
        self.sidebar_closed = self.prefs.toggle_sidebar()
        self.layout()

    def on_pick(self, event: Any) -> None:
        key = event.artist.get_gid()
        if not key:
            return
        if isinstance(event.artist, Text):
            self.apply(Control("legend", {"category": key}))
        else:
            self.apply(Control("region", {"region": key}))

    def _button(self, sidebar: Any, rect: list[float], label: str, callback: Any) -> None:
        button = Button(sidebar.add_axes(rect), label)
        button.on_clicked(callback)
        self.widgets.append(button)

    def _build_sidebar(self, sidebar: Any) -> None:
        label = "»" if self.sidebar_closed else "« Hide"
        self._button(sidebar, [0.05, 0.93, 0.9, 0.05], label, self.toggle_sidebar)
        if self.sidebar_closed:
            return

        state = self.controller.state
        top = 0.9
        keys = list(state.categories)
        if keys and state.chart not in ("pie", "choropleth"):
            height = min(0.04 * len(keys) + 0.02, 0.35)
            axes = sidebar.add_axes([0.05, top - height, 0.9, height])
            axes.set_title("Categories", fontsize=9, loc="left")
            labels = [self.view.label(key) for key in keys]
            checks = CheckButtons(axes, labels, [key in state.active_filters for key in keys])
            by_label = dict(zip(labels, keys))
            checks.on_clicked(
                lambda text: self.apply(Control("checkbox", {"category": by_label[text]}))
            )
            self.widgets.append(checks)
            top -= height + 0.05

        if len(self.view.charts) > 1:
            height = 0.04 * len(self.view.charts) + 0.02
            axes = sidebar.add_axes([0.05, top - height, 0.9, height])
            axes.set_title("Chart", fontsize=9, loc="left")
            radio = RadioButtons(
                axes, list(self.view.charts), active=self.view.charts.index(state.chart)
            )
            radio.on_clicked(lambda kind: self.apply(Control("view", {"view": kind})))
            self.widgets.append(radio)
            top -= height + 0.05

        if self.view.percent_supported:
            axes = sidebar.add_axes([0.05, top - 0.06, 0.9, 0.06])
            percent = CheckButtons(axes, ["Percent"], [state.percent])
            percent.on_clicked(
                lambda _text: self.apply(
                    Control("scale", {"mode": ABSOLUTE if state.percent else PERCENT})
                )
            )
            self.widgets.append(percent)
            top -= 0.11

        if state.time_slice is not None and state.chart in ("bar", "choropleth"):
            years = [str(value) for value in self.view.time_keys(self.controller.data)]
            if years:
                height = min(0.04 * len(years) + 0.02, 0.3)
                axes = sidebar.add_axes([0.05, top - height, 0.9, height])
                axes.set_title("Year", fontsize=9, loc="left")
                current = str(state.time_slice)
                radio = RadioButtons(
                    axes, years, active=years.index(current) if current in years else 0
                )
                radio.on_clicked(lambda year: self.apply(Control("year", {"year": year})))
                self.widgets.append(radio)
                top -= height + 0.05

        presets = self.view.preset_names()
        if presets and state.chart in ("line", "stacked", "bar"):
            width = 0.9 / len(presets)
            for index, name in enumerate(presets):
                self._button(
                    sidebar,
                    [0.05 + index * width, max(top - 0.06, 0.02), width * 0.95, 0.05],
                    name,
                    lambda _event, name=name: self.apply(Control("preset", {"method": name})),
                )


def run_interactive(
    controller: ViewController,
    prefs: PreferenceStore,
    width: float = 12.0,
    height: float = 6.0,
) -> InteractiveWindow:
    """Open a window for *controller*; blocks until it is closed."""
    figure = plt.figure(figsize=(width, height))
    window = InteractiveWindow(controller, prefs, figure)
    window.connect()
    window.layout()
    plt.show()
    return window
