from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BOUNDARIES_URL = (
    "https://raw.githubusercontent.com/tonywr71/GeoJson-Data/master/australian-states.json"
)


class ViewConfig(BaseModel):
    csv: str
    enabled: bool = True
    headroom: float | None = Field(default=None, ge=1.0, le=1.5)


def _default_views() -> dict[str, ViewConfig]:
    return {
        "detection_methods": ViewConfig(csv="q1.csv"),
        "jurisdictions": ViewConfig(csv="q2.csv"),
        "camera_police": ViewConfig(csv="visualisation3.csv"),
        "age_groups": ViewConfig(csv="visualisation4.csv"),
        "monthly": ViewConfig(csv="v5.csv"),
        "locations": ViewConfig(csv="visualisation6.csv"),
    }


class BoundariesConfig(BaseModel):
    url: str | None = DEFAULT_BOUNDARIES_URL
    path: str | None = None
    timeout_seconds: float = Field(default=10.0, gt=0.0)


class FigureConfig(BaseModel):
    width: float = Field(default=9.0, gt=0.0)
    height: float = Field(default=5.0, gt=0.0)
    dpi: int = Field(default=100, ge=50)
    format: Literal["svg", "png"] = "svg"


class ParsingConfig(BaseModel):
    report_coercions: bool = False
    default_year: int = 2023


class SiteConfig(BaseModel):
    title: str = "Speeding Fines in Australia"


class PreferencesConfig(BaseModel):
    path: str = "~/.config/fines-viz/preferences.json"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    data_dir: str = "data"
    views: dict[str, ViewConfig] = Field(default_factory=_default_views)
    boundaries: BoundariesConfig = Field(default_factory=BoundariesConfig)
    figure: FigureConfig = Field(default_factory=FigureConfig)
    parsing: ParsingConfig = Field(default_factory=ParsingConfig)
    site: SiteConfig = Field(default_factory=SiteConfig)
    preferences: PreferencesConfig = Field(default_factory=PreferencesConfig)

    def view_csv_path(self, name: str) -> Path:
        if name not in self.views:
            raise ValueError(f"Unknown view: {name}")
        return Path(self.data_dir) / self.views[name].csv


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def _resolve_optional_path(path_value: str | None, base_dir: Path) -> str | None:
    if not path_value:
        return None
    candidate = Path(path_value).expanduser()
    if candidate.is_absolute():
        return str(candidate)
    return str((base_dir / candidate).resolve())


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    config = AppConfig.model_validate(data)
    base_dir = path.resolve().parent

    config.data_dir = _resolve_optional_path(config.data_dir, base_dir) or str(base_dir)
    config.boundaries.path = _resolve_optional_path(config.boundaries.path, base_dir)
    config.boundaries.url = os.getenv("FINES_VIZ_BOUNDARIES_URL") or config.boundaries.url
    config.preferences.path = (
        _resolve_optional_path(config.preferences.path, base_dir) or config.preferences.path
    )
    return config
