from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from fines_viz.config import AppConfig
from fines_viz.controller import ViewController, load_view
from fines_viz.io.boundaries import FeatureCollection
from fines_viz.io.prefs import SIDEBAR_CLOSED_KEY
from fines_viz.io.read import DataLoadError
from fines_viz.io.write import write_summary, write_text
from fines_viz.parsing.coerce import CoercionStats, report_coercions
from fines_viz.paths import OutputPaths, build_output_paths
from fines_viz.render.context import create_render_context, save_figure
from fines_viz.state import PERCENT, SetMode
from fines_viz.views.base import View
from fines_viz.views.registry import default_views

LOGGER = logging.getLogger(__name__)

PAGE_TEMPLATE = "page.html.j2"


@dataclass
class PageResult:
    name: str
    title: str
    filename: str
    charts: list[dict[str, str]] = field(default_factory=list)
    error: str | None = None
    stats: dict[str, Any] = field(default_factory=dict)


def _template_env() -> Environment:
    templates_path = Path(__file__).resolve().parent / "templates"
    return Environment(
        loader=FileSystemLoader(str(templates_path)),
        autoescape=select_autoescape(enabled_extensions=("html", "xml", "j2")),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def _json_safe(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(key): _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    if hasattr(value, "item"):
        value = value.item()
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    return value


def _chart_variants(view: View) -> list[tuple[str, str, bool]]:
    variants = [(chart, chart.capitalize(), False) for chart in view.charts]
    if view.percent_supported:
        variants += [(chart, f"{chart.capitalize()} (%)", True) for chart in view.charts]
    return variants


def render_view_figures(
    view: View,
    data: Any,
    config: AppConfig,
    paths: OutputPaths,
) -> list[dict[str, str]]:
    """Draw every chart kind a view supports and save one figure per kind."""
    rendered: list[dict[str, str]] = []
    extension = config.figure.format
    for chart, label, percent in _chart_variants(view):
        context = create_render_context(
            config.figure.width, config.figure.height, config.figure.dpi
        )
        controller = ViewController(view, data, context)
        if controller.state.chart != chart:
            controller.dispatch(SetMode(chart))
        if percent:
            controller.dispatch(SetMode(PERCENT))
        else:
            controller.render()
        suffix = f"{chart}_percent" if percent else chart
        path = save_figure(context, paths.figures / f"{view.name}_{suffix}.{extension}", extension)
        context.figure.clear()
        rendered.append(
            {"kind": suffix, "label": label, "file": path.relative_to(paths.root).as_posix()}
        )
    return rendered


def build_page(
    view: View,
    config: AppConfig,
    paths: OutputPaths,
) -> PageResult:
    """Load, parse and draw one view; failures are confined to this page."""
    page = PageResult(name=view.name, title=view.title, filename=f"{view.name}.html")
    stats = CoercionStats()
    source = config.view_csv_path(view.name)
    try:
        data = load_view(view, source, stats)
    except DataLoadError as exc:
        LOGGER.warning("Skipping charts for %s: %s", view.name, exc)
        page.error = f"Error loading chart data: {exc}"
        page.stats = {"source": source.name, "error": str(exc)}
        return page

    if config.parsing.report_coercions:
        report_coercions(view.name, stats)
    page.stats = {"source": source.name, "records": int(len(data)), **stats.to_dict()}
    try:
        page.charts = render_view_figures(view, data, config, paths)
    except Exception:  # pragma: no cover
        LOGGER.exception("Failed to render figures for %s", view.name)
        page.error = "Error rendering chart."
        page.stats["error"] = "render failed"
    return page


def build_site(
    config: AppConfig,
    out_dir: Path,
    boundaries: FeatureCollection | None = None,
) -> Path:
    """Write one HTML page per enabled view plus an index; returns the index path."""
    paths = build_output_paths(out_dir)
    views = default_views(config, boundaries)
    pages = [build_page(view, config, paths) for view in views]

    env = _template_env()
    template = env.get_template(PAGE_TEMPLATE)
    generated_at = datetime.now(timezone.utc).isoformat()
    nav = [{"title": page.title, "filename": page.filename} for page in pages]
    for page in [None, *pages]:
        rendered = template.render(
            site_title=config.site.title,
            generated_at=generated_at,
            nav=nav,
            page=page,
            pages=pages,
            storage_key=SIDEBAR_CLOSED_KEY,
        )
        write_text(rendered, paths.root / (page.filename if page else "index.html"))

    write_summary(
        _json_safe({page.name: page.stats for page in pages}),
        paths.summary / "parse_stats.json",
    )
    failed = [page.name for page in pages if page.error]
    LOGGER.info("Built %d page(s) in %s (%d with errors)", len(pages), paths.root, len(failed))
    return paths.root / "index.html"
