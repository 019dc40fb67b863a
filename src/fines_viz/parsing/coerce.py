from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

from fines_viz.categories import UNKNOWN

LOGGER = logging.getLogger(__name__)


@dataclass
class CoercionStats:
    """Counts of values that were silently replaced with a default or dropped."""

    numeric_coerced: int = 0
    categorical_defaulted: int = 0
    rows_skipped: int = 0

    @property
    def total(self) -> int:
        return self.numeric_coerced + self.categorical_defaulted + self.rows_skipped

    def to_dict(self) -> dict[str, int]:
        return {
            "numeric_coerced": self.numeric_coerced,
            "categorical_defaulted": self.categorical_defaulted,
            "rows_skipped": self.rows_skipped,
        }


def is_blank(raw: Any) -> bool:
    if raw is None:
        return True
    if isinstance(raw, float) and math.isnan(raw):
        return True
    return isinstance(raw, str) and not raw.strip()


def coerce_number(raw: Any, stats: CoercionStats | None = None) -> float:
    """Parse *raw* as a number; blank, absent or garbage input becomes 0.0."""
    if is_blank(raw):
        return 0.0
    if isinstance(raw, bool):
        return float(raw)
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip().replace(",", "")
        try:
            value = float(text)
        except ValueError:
            if stats is not None:
                stats.numeric_coerced += 1
            return 0.0
    if not math.isfinite(value):
        if stats is not None:
            stats.numeric_coerced += 1
        return 0.0
    return value


def coerce_year(raw: Any, stats: CoercionStats | None = None) -> int:
    return int(coerce_number(raw, stats))


def coerce_category(
    raw: Any,
    allowed: Sequence[str],
    *,
    aliases: Mapping[str, str] | None = None,
    fallback: str = UNKNOWN,
    stats: CoercionStats | None = None,
) -> str:
    """Match *raw* against an enumeration, falling back to the catch-all bucket."""
    text = "" if is_blank(raw) else " ".join(str(raw).split())
    lookup = {value.lower(): value for value in allowed}
    if aliases:
        lookup.update({alias.lower(): value for alias, value in aliases.items()})
    lookup.setdefault(fallback.lower(), fallback)
    matched = lookup.get(text.lower())
    if matched is not None:
        return matched
    if stats is not None:
        stats.categorical_defaulted += 1
    return fallback


def find_column(columns: Iterable[str], candidates: Iterable[str]) -> str | None:
    """Return the first column whose name matches a candidate case-insensitively."""
    by_lower: dict[str, str] = {}
    for column in columns:
        by_lower.setdefault(column.strip().lower(), column)
    for candidate in candidates:
        match = by_lower.get(candidate.lower())
        if match is not None:
            return match
    return None


def report_coercions(source: str, stats: CoercionStats) -> None:
    if stats.total:
        LOGGER.warning(
            "%s: %d numeric field(s) coerced to 0, %d categorical value(s) defaulted to %s, "
            "%d row(s) without a year skipped",
            source,
            stats.numeric_coerced,
            stats.categorical_defaulted,
            UNKNOWN,
            stats.rows_skipped,
        )
