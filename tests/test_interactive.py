from __future__ import annotations

import logging
from pathlib import Path
from types import SimpleNamespace

import pandas as pd
import pytest
from matplotlib.figure import Figure, SubFigure
from matplotlib.text import Text

from fines_viz.controller import Control, ViewController
from fines_viz.interactive import InteractiveWindow
from fines_viz.io.prefs import PreferenceStore
from fines_viz.io.read import RawTable
from fines_viz.views.camera_police import CameraPoliceView
from fines_viz.views.jurisdictions import JurisdictionsView


def _camera_police() -> ViewController:
    view = CameraPoliceView()
    columns = ["YEAR", "Camera_Issued", "Police_Issued"]
    table = RawTable(
        columns=columns,
        rows=[dict(zip(columns, row)) for row in (["2022", "3", "1"], ["2023", "4", "2"])],
    )
    return ViewController(view, view.parse(table))


@pytest.fixture
def window(tmp_path: Path) -> InteractiveWindow:
    window = InteractiveWindow(
        _camera_police(), PreferenceStore(tmp_path / "prefs.json"), Figure(figsize=(12, 6))
    )
    window.connect()
    window.layout()
    return window


def test_layout_puts_the_chart_in_its_own_subfigure(window: InteractiveWindow) -> None:
    assert isinstance(window.context.surface, SubFigure)
    assert len(window.context.axes) == 1
    assert window.controller.frame is not None
    assert len(window.widgets) >= 3


def test_controls_update_state_and_redraw(window: InteractiveWindow) -> None:
    window.apply(Control("checkbox", {"category": "Police_Issued"}))
    window.apply(Control("view", {"view": "stacked"}))

    assert window.controller.state.visible() == ["Camera_Issued"]
    assert window.controller.state.chart == "stacked"
    assert len(window.context.axes) == 1


def test_invalid_controls_are_logged_and_ignored(window: InteractiveWindow, caplog) -> None:
    before = window.controller.state

    with caplog.at_level(logging.ERROR, logger="fines_viz.interactive"):
        window.apply(Control("view", {"view": "choropleth"}))

    assert window.controller.state == before
    assert "Ignoring control" in caplog.text


def test_sidebar_toggle_is_remembered(window: InteractiveWindow, tmp_path: Path) -> None:
    open_widgets = len(window.widgets)

    window.toggle_sidebar()

    assert window.sidebar_closed is True
    assert len(window.widgets) == 1
    assert len(window.widgets) < open_widgets
    assert PreferenceStore(tmp_path / "prefs.json").sidebar_closed() is True

    reopened = InteractiveWindow(
        _camera_police(), PreferenceStore(tmp_path / "prefs.json"), Figure()
    )
    assert reopened.sidebar_closed is True


def test_legend_pick_toggles_the_series(window: InteractiveWindow) -> None:
    window.on_pick(SimpleNamespace(artist=Text(text="Camera", gid="Camera_Issued")))

    assert window.controller.state.visible() == ["Police_Issued"]


def test_region_pick_highlights_on_the_map(tmp_path: Path) -> None:
    view = JurisdictionsView()
    data = pd.DataFrame({"time": [2023, 2023], "category": ["NSW", "VIC"], "value": [5.0, 9.0]})
    window = InteractiveWindow(
        ViewController(view, data), PreferenceStore(tmp_path / "prefs.json"), Figure()
    )
    window.layout()
    window.apply(Control("view", {"view": "choropleth"}))

    patch = next(patch for patch in window.context.axes[0].patches if patch.get_gid() == "VIC")
    window.on_pick(SimpleNamespace(artist=patch))

    assert window.controller.state.highlight == "VIC"
