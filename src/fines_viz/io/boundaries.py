from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import requests

from fines_viz.categories import JURISDICTION_NAMES, JURISDICTIONS

LOGGER = logging.getLogger(__name__)

FeatureCollection = dict[str, Any]

# ABS state codes used by the public Australian states GeoJSON.
NUMERIC_STATE_CODES = {
    "1": "NSW",
    "2": "VIC",
    "3": "QLD",
    "4": "SA",
    "5": "WA",
    "6": "TAS",
    "7": "NT",
    "8": "ACT",
}

FALLBACK_BOXES = {
    "NSW": (141.0, -37.5, 154.0, -28.0),
    "VIC": (141.0, -39.5, 150.0, -34.0),
    "QLD": (138.0, -29.0, 153.0, -10.0),
    "WA": (113.0, -35.0, 129.0, -14.0),
    "SA": (129.0, -38.0, 141.0, -26.0),
    "TAS": (144.5, -43.5, 148.5, -40.5),
    "NT": (129.0, -26.0, 138.0, -11.0),
    "ACT": (149.0, -35.5, 149.3, -35.2),
}


@dataclass(frozen=True)
class Region:
    code: str
    name: str
    rings: tuple[tuple[tuple[float, float], ...], ...]


def _box_ring(west: float, south: float, east: float, north: float) -> list[list[float]]:
    return [[west, south], [east, south], [east, north], [west, north], [west, south]]


def fallback_boundaries() -> FeatureCollection:
    """Approximate bounding boxes, one per jurisdiction."""
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {"STATE_NAME": JURISDICTION_NAMES[code], "STATE_CODE": code},
                "geometry": {"type": "Polygon", "coordinates": [_box_ring(*FALLBACK_BOXES[code])]},
            }
            for code in JURISDICTIONS
        ],
    }


def region_code(properties: dict[str, Any]) -> str | None:
    """Map a feature's ``STATE_CODE`` or ``STATE_NAME`` onto a jurisdiction code."""
    raw_code = str(properties.get("STATE_CODE") or "").strip()
    if raw_code.upper() in JURISDICTIONS:
        return raw_code.upper()
    if raw_code in NUMERIC_STATE_CODES:
        return NUMERIC_STATE_CODES[raw_code]
    name = " ".join(str(properties.get("STATE_NAME") or "").split()).lower()
    for code, full_name in JURISDICTION_NAMES.items():
        if name == full_name.lower():
            return code
    return None


def _outer_rings(geometry: dict[str, Any]) -> list[list[Any]]:
    kind = geometry.get("type")
    coordinates = geometry.get("coordinates") or []
    if kind == "Polygon":
        return [coordinates[0]] if coordinates else []
    if kind == "MultiPolygon":
        return [polygon[0] for polygon in coordinates if polygon]
    return []


def regions_from_features(collection: FeatureCollection) -> list[Region]:
    regions: list[Region] = []
    for feature in collection.get("features") or []:
        properties = feature.get("properties") or {}
        code = region_code(properties)
        if code is None:
            continue
        rings = tuple(
            tuple((float(point[0]), float(point[1])) for point in ring)
            for ring in _outer_rings(feature.get("geometry") or {})
            if len(ring) >= 3
        )
        if rings:
            regions.append(Region(code=code, name=JURISDICTION_NAMES[code], rings=rings))
    return regions


def _fetch(url: str | None, path: str | None, timeout: float) -> FeatureCollection:
    if path:
        with Path(path).open("r", encoding="utf-8") as handle:
            return json.load(handle)
    if not url:
        raise ValueError("No boundary source configured")
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.json()


def load_boundaries(
    url: str | None = None,
    path: str | None = None,
    timeout: float = 10.0,
) -> FeatureCollection:
    """Read region polygons, substituting the built-in boxes when the source is unusable."""
    try:
        collection = _fetch(url, path, timeout)
    except (requests.RequestException, OSError, ValueError) as exc:
        LOGGER.warning("Boundary source unavailable (%s); using built-in regions", exc)
        return fallback_boundaries()
    if not isinstance(collection, dict) or not regions_from_features(collection):
        LOGGER.warning("Boundary source has no recognised regions; using built-in regions")
        return fallback_boundaries()
    LOGGER.info("Loaded %d boundary features", len(collection.get("features") or []))
    return collection
