from __future__ import annotations

from pathlib import Path

import typer

from fines_viz.config import DEFAULT_CONFIG_PATH, AppConfig, load_config
from fines_viz.controller import ViewController, load_view
from fines_viz.interactive import run_interactive
from fines_viz.io.boundaries import FeatureCollection, fallback_boundaries, load_boundaries
from fines_viz.io.prefs import PreferenceStore
from fines_viz.io.read import DataLoadError
from fines_viz.logging import configure_logging
from fines_viz.parsing.coerce import CoercionStats, report_coercions
from fines_viz.render.context import create_render_context, save_figure
from fines_viz.report.render import build_site as build_static_site
from fines_viz.state import PERCENT, Event, SelectOnly, SetHighlight, SetMode, SetTimeSlice
from fines_viz.views.base import View
from fines_viz.views.registry import get_view

app = typer.Typer(no_args_is_help=True, add_completion=False)

MAP_VIEWS = {"jurisdictions"}


def _load_app_config(config_path: Path) -> AppConfig:
    return load_config(config_path)


def _load_boundaries(cfg: AppConfig, offline: bool) -> FeatureCollection:
    if offline:
        return fallback_boundaries()
    return load_boundaries(
        url=cfg.boundaries.url,
        path=cfg.boundaries.path,
        timeout=cfg.boundaries.timeout_seconds,
    )


def _resolve_view(cfg: AppConfig, name: str, offline: bool) -> View:
    boundaries = _load_boundaries(cfg, offline) if name in MAP_VIEWS else None
    try:
        return get_view(cfg, name, boundaries)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="VIEW") from exc


def _load_controller(cfg: AppConfig, view: View, stats: CoercionStats) -> ViewController:
    try:
        data = load_view(view, cfg.view_csv_path(view.name), stats)
    except DataLoadError as exc:
        typer.echo(f"Error loading chart data: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    if cfg.parsing.report_coercions:
        report_coercions(view.name, stats)
    return ViewController(view, data)


@app.command()
def render(
    view: str = typer.Argument(..., help="View name, e.g. jurisdictions."),
    out: Path | None = typer.Option(None, resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    chart: str | None = typer.Option(None, help="Chart kind: line, stacked, bar, pie, ..."),
    percent: bool = typer.Option(False, "--percent", help="Normalize series to shares."),
    year: int | None = typer.Option(None, help="Year shown by map and bar charts."),
    only: list[str] = typer.Option([], "--only", help="Show only these categories."),
    highlight: str | None = typer.Option(None, help="Category to emphasise."),
    offline: bool = typer.Option(False, help="Use built-in map regions."),
) -> None:
    """Render one view to an SVG or PNG file."""
    configure_logging()
    cfg = _load_app_config(config)
    selected = _resolve_view(cfg, view, offline)
    controller = _load_controller(cfg, selected, CoercionStats())
    controller.context = create_render_context(
        cfg.figure.width, cfg.figure.height, cfg.figure.dpi
    )

    events: list[Event] = []
    if chart:
        events.append(SetMode(chart))
    if only:
        events.append(SelectOnly(tuple(only)))
    if year is not None:
        events.append(SetTimeSlice(year))
    if highlight:
        events.append(SetHighlight(highlight))
    if percent:
        events.append(SetMode(PERCENT))
    try:
        for event in events:
            controller.dispatch(event)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    if not events:
        controller.render()

    target = out or Path("out") / f"{selected.name}.{cfg.figure.format}"
    path = save_figure(controller.context, target)
    typer.echo(f"Rendered {selected.name} ({controller.state.chart}) to {path}")


@app.command()
def inspect(
    view: str = typer.Argument(...),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    limit: int = typer.Option(20, min=0, help="Number of records to print."),
) -> None:
    """Print parsed records and coercion counts for one view."""
    configure_logging()
    cfg = _load_app_config(config)
    selected = _resolve_view(cfg, view, offline=True)
    stats = CoercionStats()
    controller = _load_controller(cfg, selected, stats)
    typer.echo(controller.data.head(limit).to_string(index=False))
    typer.echo(
        f"records={len(controller.data)} "
        f"numeric_coerced={stats.numeric_coerced} "
        f"categorical_defaulted={stats.categorical_defaulted} "
        f"rows_skipped={stats.rows_skipped}"
    )


@app.command("build-site")
def build_site(
    out: Path = typer.Option(Path("site"), resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    offline: bool = typer.Option(False, help="Use built-in map regions."),
) -> None:
    """Build the static HTML site with one page per view."""
    configure_logging()
    cfg = _load_app_config(config)
    index = build_static_site(cfg, out, boundaries=_load_boundaries(cfg, offline))
    typer.echo(f"Site written to {index}")


@app.command()
def show(
    view: str = typer.Argument(...),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    offline: bool = typer.Option(False, help="Use built-in map regions."),
) -> None:
    """Open an interactive window for one view."""
    configure_logging()
    cfg = _load_app_config(config)
    selected = _resolve_view(cfg, view, offline)
    controller = _load_controller(cfg, selected, CoercionStats())
    run_interactive(
        controller,
        PreferenceStore(Path(cfg.preferences.path)),
        width=cfg.figure.width + 3.0,
        height=cfg.figure.height + 1.0,
    )


if __name__ == "__main__":
    app()
