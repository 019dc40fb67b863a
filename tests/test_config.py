from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from fines_viz.config import DEFAULT_BOUNDARIES_URL, AppConfig, load_config


def test_load_config_resolves_relative_paths(tmp_path: Path) -> None:
    config_path = tmp_path / "configs" / "config.yaml"
    config_path.parent.mkdir()
    config_path.write_text(
        yaml.safe_dump(
            {
                "data_dir": "../data",
                "boundaries": {"path": "states.geojson"},
                "preferences": {"path": "prefs.json"},
            }
        ),
        encoding="utf-8",
    )

    cfg = load_config(config_path)

    assert Path(cfg.data_dir) == (tmp_path / "data").resolve()
    assert Path(cfg.boundaries.path or "") == (tmp_path / "configs" / "states.geojson").resolve()
    assert Path(cfg.preferences.path).is_absolute()
    assert cfg.view_csv_path("jurisdictions") == (tmp_path / "data").resolve() / "q2.csv"


def test_load_config_uses_env_boundaries_url(monkeypatch, tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("site:\n  title: Test\n", encoding="utf-8")
    monkeypatch.setenv("FINES_VIZ_BOUNDARIES_URL", "https://example.invalid/states.json")

    cfg = load_config(config_path)

    assert cfg.boundaries.url == "https://example.invalid/states.json"
    assert cfg.site.title == "Test"


def test_defaults_cover_every_view() -> None:
    cfg = AppConfig()

    assert list(cfg.views) == [
        "detection_methods",
        "jurisdictions",
        "camera_police",
        "age_groups",
        "monthly",
        "locations",
    ]
    assert cfg.boundaries.url == DEFAULT_BOUNDARIES_URL
    with pytest.raises(ValueError, match="Unknown view"):
        cfg.view_csv_path("nope")


def test_invalid_values_are_rejected(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("views:\n  monthly:\n    csv: v5.csv\n    headroom: 3\n", encoding="utf-8")

    with pytest.raises(ValidationError):
        load_config(config_path)

    config_path.write_text("unexpected: true\n", encoding="utf-8")
    with pytest.raises(ValidationError):
        load_config(config_path)


def test_repository_config_loads() -> None:
    cfg = load_config(Path(__file__).resolve().parents[1] / "configs" / "default.yaml")

    assert cfg.figure.format == "svg"
    assert Path(cfg.view_csv_path("monthly")).name == "v5.csv"
