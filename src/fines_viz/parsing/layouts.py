"""Ranked column-layout detectors for category tables.

The same measurement arrives in several shapes: one column per year
(``Fines_2023``, ``Fines_2024``), one row per year with a ``YEAR`` and a
total column, a lone total column, or just an unlabelled numeric column.
Each layout is a pure predicate over the column names plus an extraction
rule; ``LAYOUTS`` fixes the order in which they are tried.  Every extractor
returns the same long frame of ``(year, category, value)`` rows.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Sequence

import pandas as pd

from fines_viz.io.read import RawRow
from fines_viz.parsing.coerce import (
    CoercionStats,
    coerce_number,
    coerce_year,
    find_column,
    is_blank,
)

YEAR_SUBSTRING = re.compile(r"(?<!\d)(\d{4})(?!\d)")
YEAR_ALIASES = ("YEAR",)
RESERVED_NAMES = frozenset({"year"})

LONG_COLUMNS = ["year", "category", "value"]


@dataclass(frozen=True)
class LayoutContext:
    category_column: str | None
    default_year: int
    reserved: tuple[str, ...] = ()
    stats: CoercionStats | None = None


Extractor = Callable[[Sequence[RawRow], Sequence[str], LayoutContext], pd.DataFrame]


@dataclass(frozen=True)
class ColumnLayout:
    name: str
    matches: Callable[[Sequence[str], str | None], bool]
    extract: Extractor


def _lowered(columns: Sequence[str], category_column: str | None) -> list[str]:
    return [column.lower() for column in columns if column != category_column]


def year_columns(columns: Sequence[str], category_column: str | None) -> dict[str, int]:
    """Map each column carrying a 4-digit year in its name to that year."""
    found: dict[str, int] = {}
    for column in columns:
        if column == category_column:
            continue
        match = YEAR_SUBSTRING.search(column)
        if match:
            found[column] = int(match.group(1))
    return found


def total_column(columns: Sequence[str], category_column: str | None) -> str | None:
    for column in columns:
        if column != category_column and "total" in column.lower():
            return column
    return None


def has_year_columns(columns: Sequence[str], category_column: str | None = None) -> bool:
    return bool(year_columns(columns, category_column))


def has_year_and_total(columns: Sequence[str], category_column: str | None = None) -> bool:
    lowered = _lowered(columns, category_column)
    return "year" in lowered and total_column(columns, category_column) is not None


def has_total(columns: Sequence[str], category_column: str | None = None) -> bool:
    return total_column(columns, category_column) is not None


def always(columns: Sequence[str], category_column: str | None = None) -> bool:
    return True


def _category_of(row: RawRow, context: LayoutContext) -> str:
    if context.category_column is None:
        return ""
    return row.get(context.category_column, "")


def _frame(records: list[tuple[int, str, float]]) -> pd.DataFrame:
    return pd.DataFrame.from_records(records, columns=LONG_COLUMNS)


def _extract_year_columns(
    rows: Sequence[RawRow], columns: Sequence[str], context: LayoutContext
) -> pd.DataFrame:
    per_year = year_columns(columns, context.category_column)
    records = [
        (year, _category_of(row, context), coerce_number(row.get(column), context.stats))
        for row in rows
        for column, year in per_year.items()
    ]
    return _frame(records)


def _extract_year_and_total(
    rows: Sequence[RawRow], columns: Sequence[str], context: LayoutContext
) -> pd.DataFrame:
    year_column = find_column(columns, YEAR_ALIASES)
    value_column = total_column(columns, context.category_column)
    records = []
    for row in rows:
        raw_year = row.get(year_column or "")
        # A row without a year cannot be placed on the time axis.
        if is_blank(raw_year):
            if context.stats is not None:
                context.stats.rows_skipped += 1
            continue
        records.append(
            (
                coerce_year(raw_year, context.stats),
                _category_of(row, context),
                coerce_number(row.get(value_column or ""), context.stats),
            )
        )
    return _frame(records)


def _extract_total_only(
    rows: Sequence[RawRow], columns: Sequence[str], context: LayoutContext
) -> pd.DataFrame:
    value_column = total_column(columns, context.category_column)
    records = [
        (
            context.default_year,
            _category_of(row, context),
            coerce_number(row.get(value_column or ""), context.stats),
        )
        for row in rows
    ]
    return _frame(records)


def positional_column(columns: Sequence[str], reserved: Sequence[str]) -> str | None:
    """First column that is neither the category key nor a reserved name."""
    blocked = {name.lower() for name in reserved} | RESERVED_NAMES
    for column in columns:
        if column.lower() not in blocked:
            return column
    return None


def _extract_positional(
    rows: Sequence[RawRow], columns: Sequence[str], context: LayoutContext
) -> pd.DataFrame:
    reserved = list(context.reserved)
    if context.category_column:
        reserved.append(context.category_column)
    value_column = positional_column(columns, reserved)
    records = [
        (
            context.default_year,
            _category_of(row, context),
            coerce_number(row.get(value_column) if value_column else None, context.stats),
        )
        for row in rows
    ]
    return _frame(records)


LAYOUTS: tuple[ColumnLayout, ...] = (
    ColumnLayout("year_columns", has_year_columns, _extract_year_columns),
    ColumnLayout("year_and_total", has_year_and_total, _extract_year_and_total),
    ColumnLayout("total_only", has_total, _extract_total_only),
    ColumnLayout("positional", always, _extract_positional),
)


def detect_layout(columns: Sequence[str], category_column: str | None = None) -> ColumnLayout:
    for layout in LAYOUTS:
        if layout.matches(columns, category_column):
            return layout
    raise ValueError("No column layout matched")  # pragma: no cover
