from __future__ import annotations

from pathlib import Path

import yaml
from typer.testing import CliRunner

from fines_viz.cli import app

DATA_DIR = Path(__file__).resolve().parents[1] / "data"


def _config(tmp_path: Path, **views: dict) -> Path:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.safe_dump(
            {
                "data_dir": str(DATA_DIR),
                "views": {
                    "detection_methods": {"csv": "q1.csv"},
                    "jurisdictions": {"csv": "q2.csv"},
                    "camera_police": {"csv": "visualisation3.csv"},
                    "age_groups": {"csv": "visualisation4.csv"},
                    "monthly": {"csv": "v5.csv"},
                    "locations": {"csv": "visualisation6.csv"},
                    **views,
                },
                "preferences": {"path": str(tmp_path / "prefs.json")},
            }
        ),
        encoding="utf-8",
    )
    return config_path


def test_cli_help() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    for command in ("render", "inspect", "build-site", "show"):
        assert command in result.stdout


def test_render_writes_requested_chart(tmp_path: Path) -> None:
    out = tmp_path / "out" / "map.png"

    result = CliRunner().invoke(
        app,
        [
            "render",
            "jurisdictions",
            "--config",
            str(_config(tmp_path)),
            "--out",
            str(out),
            "--chart",
            "choropleth",
            "--year",
            "2022",
            "--highlight",
            "VIC",
            "--offline",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Rendered jurisdictions (choropleth)" in result.stdout
    assert out.exists()
    assert out.read_bytes().startswith(b"\x89PNG")


def test_render_percent_stacked_with_filters(tmp_path: Path) -> None:
    out = tmp_path / "camera.svg"

    result = CliRunner().invoke(
        app,
        [
            "render",
            "camera_police",
            "--config",
            str(_config(tmp_path)),
            "--out",
            str(out),
            "--chart",
            "stacked",
            "--only",
            "Camera_Issued",
            "--percent",
        ],
    )

    assert result.exit_code == 0, result.output
    assert out.exists()


def test_render_rejects_unsupported_mode(tmp_path: Path) -> None:
    result = CliRunner().invoke(
        app,
        ["render", "detection_methods", "--config", str(_config(tmp_path)), "--percent"],
    )

    assert result.exit_code == 2
    assert "percent" in result.output


def test_unknown_view_is_a_usage_error(tmp_path: Path) -> None:
    config_path = _config(tmp_path)

    result = CliRunner().invoke(app, ["inspect", "speed_cameras", "--config", str(config_path)])

    assert result.exit_code == 2
    assert "speed_cameras" in result.output


def test_inspect_prints_records_and_counts(tmp_path: Path) -> None:
    result = CliRunner().invoke(
        app,
        ["inspect", "locations", "--config", str(_config(tmp_path)), "--limit", "3"],
    )

    assert result.exit_code == 0, result.output
    assert "Major Cities of Australia" in result.stdout
    assert "records=20 numeric_coerced=0 categorical_defaulted=0 rows_skipped=0" in result.stdout


def test_missing_data_file_exits_with_error(tmp_path: Path) -> None:
    config_path = _config(tmp_path, monthly={"csv": "absent.csv"})

    result = CliRunner().invoke(app, ["inspect", "monthly", "--config", str(config_path)])

    assert result.exit_code == 1
    assert "Error loading chart data" in result.output


def test_build_site_offline(tmp_path: Path) -> None:
    out = tmp_path / "site"

    result = CliRunner().invoke(
        app,
        ["build-site", "--config", str(_config(tmp_path)), "--out", str(out), "--offline"],
    )

    assert result.exit_code == 0, result.output
    assert "Site written to" in result.stdout
    assert (out / "index.html").exists()
    assert (out / "locations.html").exists()
    assert (out / "summary" / "parse_stats.json").exists()
