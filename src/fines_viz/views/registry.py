from __future__ import annotations

from fines_viz.config import AppConfig
from fines_viz.io.boundaries import FeatureCollection, regions_from_features
from fines_viz.views.age_groups import AgeGroupsView
from fines_viz.views.base import View
from fines_viz.views.camera_police import CameraPoliceView
from fines_viz.views.detection_methods import DetectionMethodsView
from fines_viz.views.jurisdictions import JurisdictionsView
from fines_viz.views.locations import LocationsView
from fines_viz.views.monthly import MonthlyView


def default_views(
    config: AppConfig,
    boundaries: FeatureCollection | None = None,
) -> list[View]:
    """Enabled views in page order, with configured headroom overrides applied."""
    regions = regions_from_features(boundaries) if boundaries else None
    views: list[View] = [
        DetectionMethodsView(),
        JurisdictionsView(regions=regions),
        CameraPoliceView(),
        AgeGroupsView(default_year=config.parsing.default_year),
        MonthlyView(),
        LocationsView(),
    ]
    enabled: list[View] = []
    for view in views:
        view_config = config.views.get(view.name)
        if view_config is None or not view_config.enabled:
            continue
        if view_config.headroom is not None:
            view.headroom = view_config.headroom
        enabled.append(view)
    return enabled


def get_view(
    config: AppConfig,
    name: str,
    boundaries: FeatureCollection | None = None,
) -> View:
    for view in default_views(config, boundaries):
        if view.name == name:
            return view
    raise ValueError(f"Unknown or disabled view: {name}")
