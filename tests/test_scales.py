from __future__ import annotations

import pytest

from fines_viz.scales import color_domain, percent_domain, time_extent, value_domain


def test_value_domain_applies_headroom_to_the_peak() -> None:
    low, high = value_domain([10.0, 40.0, 25.0], 1.1)

    assert low == 0.0
    assert high == pytest.approx(44.0)


@pytest.mark.parametrize("values", [[], [0.0, 0.0], [float("nan")]])
def test_value_domain_never_collapses(values: list[float]) -> None:
    assert value_domain(values, 1.1) == pytest.approx((0.0, 1.1))


def test_percent_domain_is_unit_interval() -> None:
    assert percent_domain() == (0.0, 1.0)


def test_color_domain_skips_zero_at_the_low_end() -> None:
    assert color_domain([0.0, 0.0, 50.0, 200.0]) == (50.0, 200.0)


def test_color_domain_of_all_zero_values_is_valid() -> None:
    low, high = color_domain([0.0, 0.0])

    assert low == 1.0
    assert high >= low


def test_time_extent_sorts_and_deduplicates() -> None:
    assert time_extent([2024, 2022, 2024, 2023]) == (2022, 2023, 2024)


def test_time_extent_keeps_order_of_unorderable_keys() -> None:
    assert time_extent(["May", 3, "May"]) == ("May", 3)
