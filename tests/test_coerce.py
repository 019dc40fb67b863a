from __future__ import annotations

import logging

import pytest

from fines_viz.categories import AGE_GROUP_ALIASES, AGE_GROUPS, JURISDICTIONS, UNKNOWN
from fines_viz.parsing.coerce import (
    CoercionStats,
    coerce_category,
    coerce_number,
    coerce_year,
    find_column,
    report_coercions,
)


@pytest.mark.parametrize("raw", ["", "   ", None, "abc", "n/a", "nan", "inf", "-inf"])
def test_coerce_number_defaults_to_zero(raw) -> None:
    assert coerce_number(raw) == 0.0


def test_coerce_number_accepts_thousands_separators_and_negatives() -> None:
    assert coerce_number("1,234") == 1234.0
    assert coerce_number(" 42 ") == 42.0
    assert coerce_number("-5") == -5.0
    assert coerce_number(12) == 12.0


def test_coerce_number_counts_garbage_but_not_blanks() -> None:
    stats = CoercionStats()

    coerce_number("", stats)
    coerce_number(None, stats)
    coerce_number("abc", stats)
    coerce_number("inf", stats)

    assert stats.numeric_coerced == 2
    assert stats.total == 2


def test_coerce_year_truncates_numeric_input() -> None:
    assert coerce_year("2023") == 2023
    assert coerce_year("2023.0") == 2023
    assert coerce_year(2024) == 2024
    assert coerce_year("year") == 0


def test_coerce_category_matches_case_and_whitespace_insensitively() -> None:
    assert coerce_category(" nsw ", JURISDICTIONS) == "NSW"
    assert coerce_category("65+", AGE_GROUPS, aliases=AGE_GROUP_ALIASES) == "65 and over"
    assert coerce_category("65  AND  over", AGE_GROUPS) == "65 and over"


def test_coerce_category_falls_back_to_catch_all() -> None:
    stats = CoercionStats()

    assert coerce_category("Atlantis", JURISDICTIONS, stats=stats) == UNKNOWN
    assert coerce_category("", JURISDICTIONS, stats=stats) == UNKNOWN
    assert coerce_category("unknown", JURISDICTIONS, stats=stats) == UNKNOWN

    assert stats.categorical_defaulted == 2
    assert stats.to_dict() == {"numeric_coerced": 0, "categorical_defaulted": 2, "rows_skipped": 0}


def test_find_column_is_case_insensitive() -> None:
    assert find_column(["Year", "NSW_TotalFines"], ["YEAR"]) == "Year"
    assert find_column(["Month"], ["YEAR"]) is None


def test_report_coercions_logs_only_when_something_was_coerced(caplog) -> None:
    caplog.set_level(logging.WARNING)

    report_coercions("monthly", CoercionStats())
    assert not caplog.records

    report_coercions("monthly", CoercionStats(numeric_coerced=3))
    assert "monthly: 3 numeric field(s) coerced to 0" in caplog.text
