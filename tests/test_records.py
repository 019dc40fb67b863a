from __future__ import annotations

from fines_viz.parsing.coerce import CoercionStats
from fines_viz.parsing.records import (
    parse_age_rows,
    parse_jurisdiction_rows,
    parse_location_rows,
    parse_monthly_measures,
    parse_yearly_measures,
)


def test_wide_jurisdiction_rows_produce_one_record_per_present_column() -> None:
    rows = [{"YEAR": 2023, "NSW_TotalFines": "100", "VIC_TotalFines": ""}]

    frame = parse_jurisdiction_rows(rows)

    assert frame.to_dict("records") == [
        {"year": 2023, "jurisdiction": "NSW", "value": 100.0},
        {"year": 2023, "jurisdiction": "VIC", "value": 0.0},
    ]


def test_long_jurisdiction_rows_accept_names_and_sum_duplicates() -> None:
    rows = [
        {"YEAR": "2023", "STATE": "Queensland", "Total": "5"},
        {"YEAR": "2023", "STATE": "qld", "Total": "7"},
        {"YEAR": "2023", "STATE": "Atlantis", "Total": "1"},
    ]
    stats = CoercionStats()

    frame = parse_jurisdiction_rows(rows, stats=stats)

    assert frame.to_dict("records") == [
        {"year": 2023, "jurisdiction": "QLD", "value": 12.0},
        {"year": 2023, "jurisdiction": "Unknown", "value": 1.0},
    ]
    assert stats.categorical_defaulted == 1


def test_age_rows_with_year_and_total_are_grouped_and_summed() -> None:
    rows = [
        {"YEAR": "2023", "AGE_GROUP": "0-16", "Total": "10"},
        {"YEAR": "2023", "AGE_GROUP": "0-16", "Total": "5"},
    ]

    frame = parse_age_rows(rows, default_year=2023)

    assert frame.to_dict("records") == [{"year": 2023, "age_group": "0-16", "value": 15.0}]


def test_age_rows_with_a_blank_year_are_skipped_and_counted() -> None:
    rows = [
        {"YEAR": "2024", "AGE_GROUP": "0-16", "Total": "2"},
        {"YEAR": " ", "AGE_GROUP": "0-16", "Total": "8"},
    ]
    stats = CoercionStats()

    frame = parse_age_rows(rows, default_year=2023, stats=stats)

    assert frame.to_dict("records") == [{"year": 2024, "age_group": "0-16", "value": 2.0}]
    assert stats.rows_skipped == 1
    assert stats.numeric_coerced == 0


def test_age_rows_without_year_use_the_default_year() -> None:
    total_only = parse_age_rows([{"AGE_GROUP": "65+", "Total_Fines": "3"}], default_year=2024)
    positional = parse_age_rows([{"Age": "17-25", "Count": "4"}], default_year=2024)

    assert total_only.to_dict("records") == [
        {"year": 2024, "age_group": "65 and over", "value": 3.0}
    ]
    assert positional.to_dict("records") == [{"year": 2024, "age_group": "17-25", "value": 4.0}]


def test_age_rows_with_year_columns() -> None:
    rows = [
        {"AGE_GROUP": "26-39", "Fines_2023": "8", "Fines_2024": "9"},
        {"AGE_GROUP": "", "Fines_2023": "1", "Fines_2024": "x"},
    ]

    frame = parse_age_rows(rows, default_year=2023)

    assert frame.to_dict("records") == [
        {"year": 2023, "age_group": "26-39", "value": 8.0},
        {"year": 2024, "age_group": "26-39", "value": 9.0},
        {"year": 2023, "age_group": "Unknown", "value": 1.0},
        {"year": 2024, "age_group": "Unknown", "value": 0.0},
    ]


def test_yearly_measures_coerce_garbage_and_sort_by_year() -> None:
    rows = [
        {"YEAR": "2024", "Camera_Issued": "n/a", "Police_Issued": "7"},
        {"YEAR": "2022", "Camera_Issued": "1,000", "Police_Issued": ""},
    ]
    stats = CoercionStats()

    frame = parse_yearly_measures(rows, ("Camera_Issued", "Police_Issued"), stats=stats)

    assert frame["year"].tolist() == [2022, 2024]
    assert frame["Camera_Issued"].tolist() == [1000.0, 0.0]
    assert frame["Police_Issued"].tolist() == [0.0, 7.0]
    assert stats.numeric_coerced == 1


def test_yearly_measures_missing_column_reads_as_zero() -> None:
    rows = [{"YEAR": "2023", "Camera_Issued": "4"}]

    frame = parse_yearly_measures(rows, ("Camera_Issued", "Others"))

    assert frame.to_dict("records") == [{"year": 2023, "Camera_Issued": 4.0, "Others": 0.0}]


def test_monthly_measures_are_in_calendar_order_with_unknown_last() -> None:
    rows = [
        {"Month": "Smarch", "Camera_Issued": "1"},
        {"Month": "Mar", "Camera_Issued": "3"},
        {"Month": "january", "Camera_Issued": "2"},
    ]

    frame = parse_monthly_measures(rows, ("Camera_Issued",))

    assert frame["month"].tolist() == ["January", "March", "Unknown"]
    assert frame["Camera_Issued"].tolist() == [2.0, 3.0, 1.0]


def test_location_rows_keep_any_observed_location() -> None:
    rows = [
        {"YEAR": "2023", "LOCATION": " Remote  Australia ", "FINES": "5"},
        {"YEAR": "2023", "LOCATION": "", "FINES": "2"},
        {"YEAR": "2023", "LOCATION": "Remote Australia", "FINES": "1"},
    ]

    frame = parse_location_rows(rows)

    assert frame.to_dict("records") == [
        {"year": 2023, "location": "Remote Australia", "value": 6.0},
        {"year": 2023, "location": "Unknown", "value": 2.0},
    ]
