from __future__ import annotations

import logging
import re
from typing import Sequence

import pandas as pd

from fines_viz.categories import (
    AGE_GROUP_ALIASES,
    AGE_GROUPS,
    JURISDICTION_NAMES,
    JURISDICTIONS,
    MONTH_ALIASES,
    MONTHS,
    UNKNOWN,
)
from fines_viz.io.read import RawRow
from fines_viz.parsing.coerce import (
    CoercionStats,
    coerce_category,
    coerce_number,
    coerce_year,
    find_column,
)
from fines_viz.parsing.layouts import YEAR_ALIASES, LayoutContext, detect_layout, positional_column
from fines_viz.transform.shapes import group_sum

LOGGER = logging.getLogger(__name__)

MONTH_ALIASES_COLUMNS = ("Month", "MONTH")
AGE_COLUMN_ALIASES = ("AGE_GROUP", "Age", "age_group", "age")
JURISDICTION_COLUMN_ALIASES = ("JURISDICTION", "STATE", "STATE_CODE")
LOCATION_COLUMN_ALIASES = ("LOCATION",)
WIDE_JURISDICTION_PATTERN = re.compile(r"^([A-Za-z]+)_TotalFines$", re.IGNORECASE)

JURISDICTION_ALIASES = {name: code for code, name in JURISDICTION_NAMES.items()}


def _columns_of(rows: Sequence[RawRow], columns: Sequence[str] | None) -> list[str]:
    if columns is not None:
        return list(columns)
    return list(rows[0].keys()) if rows else []


def _cell(row: RawRow, column: str | None) -> str | None:
    if column is None:
        return None
    return row.get(column)


def parse_yearly_measures(
    rows: Sequence[RawRow],
    measures: Sequence[str],
    *,
    columns: Sequence[str] | None = None,
    stats: CoercionStats | None = None,
) -> pd.DataFrame:
    """One record per row: ``year`` plus one numeric column per measure, ascending by year."""
    available = _columns_of(rows, columns)
    year_column = find_column(available, YEAR_ALIASES)
    measure_columns = {measure: find_column(available, [measure]) for measure in measures}
    records = [
        {
            "year": coerce_year(_cell(row, year_column), stats),
            **{
                measure: coerce_number(_cell(row, column), stats)
                for measure, column in measure_columns.items()
            },
        }
        for row in rows
    ]
    frame = pd.DataFrame.from_records(records, columns=["year", *measures])
    return frame.sort_values("year", kind="stable").reset_index(drop=True)


def parse_monthly_measures(
    rows: Sequence[RawRow],
    measures: Sequence[str],
    *,
    columns: Sequence[str] | None = None,
    stats: CoercionStats | None = None,
) -> pd.DataFrame:
    """One record per row: ``month`` plus measures, in calendar order."""
    available = _columns_of(rows, columns)
    month_column = find_column(available, MONTH_ALIASES_COLUMNS)
    measure_columns = {measure: find_column(available, [measure]) for measure in measures}
    records = [
        {
            "month": coerce_category(
                _cell(row, month_column), MONTHS, aliases=MONTH_ALIASES, stats=stats
            ),
            **{
                measure: coerce_number(_cell(row, column), stats)
                for measure, column in measure_columns.items()
            },
        }
        for row in rows
    ]
    frame = pd.DataFrame.from_records(records, columns=["month", *measures])
    order = {month: index for index, month in enumerate((*MONTHS, UNKNOWN))}
    return frame.sort_values(
        "month", key=lambda values: values.map(order), kind="stable"
    ).reset_index(drop=True)


def _wide_jurisdiction_columns(columns: Sequence[str]) -> dict[str, str]:
    found: dict[str, str] = {}
    for column in columns:
        match = WIDE_JURISDICTION_PATTERN.match(column.strip())
        if match and match.group(1).upper() in JURISDICTIONS:
            found.setdefault(match.group(1).upper(), column)
    return found


def parse_jurisdiction_rows(
    rows: Sequence[RawRow],
    *,
    columns: Sequence[str] | None = None,
    stats: CoercionStats | None = None,
) -> pd.DataFrame:
    """Long ``(year, jurisdiction, value)`` records from wide or long jurisdiction tables."""
    available = _columns_of(rows, columns)
    year_column = find_column(available, YEAR_ALIASES)
    wide = _wide_jurisdiction_columns(available)

    records: list[tuple[int, str, float]] = []
    if wide:
        ordered = [(code, wide[code]) for code in JURISDICTIONS if code in wide]
        for row in rows:
            year = coerce_year(_cell(row, year_column), stats)
            for code, column in ordered:
                records.append((year, code, coerce_number(row.get(column), stats)))
    else:
        category_column = find_column(available, JURISDICTION_COLUMN_ALIASES)
        value_column = next(
            (column for column in available if "total" in column.lower()),
            positional_column(available, [*JURISDICTION_COLUMN_ALIASES, *YEAR_ALIASES]),
        )
        LOGGER.debug("Jurisdiction table in long layout (value column: %s)", value_column)
        for row in rows:
            code = coerce_category(
                _cell(row, category_column),
                JURISDICTIONS,
                aliases=JURISDICTION_ALIASES,
                stats=stats,
            )
            records.append(
                (
                    coerce_year(_cell(row, year_column), stats),
                    code,
                    coerce_number(_cell(row, value_column), stats),
                )
            )

    frame = pd.DataFrame.from_records(records, columns=["year", "jurisdiction", "value"])
    return group_sum(frame, keys=["year", "jurisdiction"], value="value")


def parse_age_rows(
    rows: Sequence[RawRow],
    *,
    default_year: int,
    columns: Sequence[str] | None = None,
    stats: CoercionStats | None = None,
) -> pd.DataFrame:
    """Long ``(year, age_group, value)`` records, whichever column layout the table uses."""
    available = _columns_of(rows, columns)
    category_column = find_column(available, AGE_COLUMN_ALIASES)
    layout = detect_layout(available, category_column)
    LOGGER.debug("Age table matched layout %s", layout.name)
    context = LayoutContext(
        category_column=category_column,
        default_year=default_year,
        reserved=AGE_COLUMN_ALIASES,
        stats=stats,
    )
    extracted = layout.extract(rows, available, context)
    extracted["category"] = [
        coerce_category(value, AGE_GROUPS, aliases=AGE_GROUP_ALIASES, stats=stats)
        for value in extracted["category"]
    ]
    frame = extracted.rename(columns={"category": "age_group"})
    return group_sum(frame, keys=["year", "age_group"], value="value")


def parse_location_rows(
    rows: Sequence[RawRow],
    *,
    columns: Sequence[str] | None = None,
    stats: CoercionStats | None = None,
) -> pd.DataFrame:
    """Long ``(year, location, value)`` records; every observed location is kept."""
    available = _columns_of(rows, columns)
    year_column = find_column(available, YEAR_ALIASES)
    location_column = find_column(available, LOCATION_COLUMN_ALIASES)
    value_column = positional_column(available, [*LOCATION_COLUMN_ALIASES, *YEAR_ALIASES])
    records = []
    for row in rows:
        location = " ".join(str(_cell(row, location_column) or "").split()) or UNKNOWN
        records.append(
            (
                coerce_year(_cell(row, year_column), stats),
                location,
                coerce_number(_cell(row, value_column), stats),
            )
        )
    frame = pd.DataFrame.from_records(records, columns=["year", "location", "value"])
    return group_sum(frame, keys=["year", "location"], value="value")
