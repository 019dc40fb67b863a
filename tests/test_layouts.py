from __future__ import annotations

import pytest

from fines_viz.parsing.layouts import (
    LayoutContext,
    detect_layout,
    positional_column,
    year_columns,
)


@pytest.mark.parametrize(
    ("columns", "expected"),
    [
        (["AGE_GROUP", "Fines_2023", "Fines_2024"], "year_columns"),
        (["YEAR", "AGE_GROUP", "Total_2023"], "year_columns"),
        (["YEAR", "AGE_GROUP", "Total"], "year_and_total"),
        (["year", "AGE_GROUP", "TOTAL_FINES"], "year_and_total"),
        (["AGE_GROUP", "Total_Fines"], "total_only"),
        (["AGE_GROUP", "Count"], "positional"),
        (["AGE_GROUP"], "positional"),
    ],
)
def test_detect_layout_follows_priority_order(columns: list[str], expected: str) -> None:
    assert detect_layout(columns, "AGE_GROUP").name == expected


def test_year_columns_requires_exactly_four_digits() -> None:
    found = year_columns(["AGE_GROUP", "Fines_2023", "20245", "2024"], "AGE_GROUP")

    assert found == {"Fines_2023": 2023, "2024": 2024}


def test_positional_column_skips_category_and_reserved_names() -> None:
    assert positional_column(["AGE_GROUP", "YEAR", "Count"], ["AGE_GROUP"]) == "Count"
    assert positional_column(["AGE_GROUP"], ["AGE_GROUP"]) is None


def test_year_columns_layout_emits_one_record_per_year_column() -> None:
    columns = ["AGE_GROUP", "Fines_2023", "Fines_2024"]
    rows = [{"AGE_GROUP": "17-25", "Fines_2023": "10", "Fines_2024": ""}]
    layout = detect_layout(columns, "AGE_GROUP")

    frame = layout.extract(rows, columns, LayoutContext("AGE_GROUP", default_year=2023))

    assert frame.to_dict("records") == [
        {"year": 2023, "category": "17-25", "value": 10.0},
        {"year": 2024, "category": "17-25", "value": 0.0},
    ]


def test_total_only_layout_uses_the_default_year() -> None:
    columns = ["AGE_GROUP", "Total_Fines"]
    rows = [{"AGE_GROUP": "40-64", "Total_Fines": "7"}]
    layout = detect_layout(columns, "AGE_GROUP")

    frame = layout.extract(rows, columns, LayoutContext("AGE_GROUP", default_year=2021))

    assert frame.to_dict("records") == [{"year": 2021, "category": "40-64", "value": 7.0}]
