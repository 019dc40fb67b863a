from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Sequence

import numpy as np

Domain = tuple[float, float]


@dataclass(frozen=True)
class ScaleSpec:
    """Axis and colour domains derived for one render pass."""

    x: tuple[Any, ...]
    y: Domain | None = None
    color: Domain | None = None


def _finite(values: Iterable[float]) -> np.ndarray:
    array = np.asarray(list(values), dtype=float)
    return array[np.isfinite(array)]


def value_domain(values: Iterable[float], headroom: float) -> Domain:
    """``(0, max * headroom)``; empty or all-zero input gives ``(0, headroom)``."""
    array = _finite(values)
    peak = float(array.max()) if array.size else 0.0
    if peak <= 0:
        peak = 1.0
    return (0.0, peak * float(headroom))


def percent_domain() -> Domain:
    return (0.0, 1.0)


def color_domain(values: Iterable[float]) -> Domain:
    """Intensity domain whose low end skips zero so empty cells stay distinguishable."""
    array = _finite(values)
    nonzero = array[array != 0]
    low = float(nonzero.min()) if nonzero.size else 1.0
    high = float(array.max()) if array.size else 1.0
    if high < low:
        high = low
    return (low, high)


def time_extent(times: Sequence[Any]) -> tuple[Any, ...]:
    """Unique time keys, sorted when they are orderable and kept as given otherwise."""
    unique = list(dict.fromkeys(times))
    try:
        return tuple(sorted(unique))
    except TypeError:
        return tuple(unique)
