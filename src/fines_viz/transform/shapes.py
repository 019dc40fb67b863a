from __future__ import annotations

from typing import Any, Sequence

import numpy as np
import pandas as pd

TIME = "time"
CATEGORY = "category"
VALUE = "value"


def wide_to_long(
    frame: pd.DataFrame,
    *,
    id_column: str,
    value_columns: Sequence[str],
    time: str = TIME,
    category: str = CATEGORY,
    value: str = VALUE,
) -> pd.DataFrame:
    """Explode one row with N measure columns into N ``(time, category, value)`` rows."""
    present = [column for column in value_columns if column in frame.columns]
    long = frame.melt(
        id_vars=[id_column],
        value_vars=present,
        var_name=category,
        value_name=value,
    ).rename(columns={id_column: time})
    order = {column: index for index, column in enumerate(present)}
    long["_order"] = long[category].map(order)
    long["_row"] = long.groupby(category).cumcount()
    long = long.sort_values(["_row", "_order"], kind="stable").drop(columns=["_order", "_row"])
    long[value] = pd.to_numeric(long[value], errors="coerce").fillna(0.0).astype(float)
    return long.reset_index(drop=True)[[time, category, value]]


def group_sum(frame: pd.DataFrame, keys: Sequence[str], value: str = VALUE) -> pd.DataFrame:
    """Sum *value* per unique key combination, keeping first-seen key order."""
    if frame.empty:
        return frame[[*keys, value]].copy().reset_index(drop=True)
    grouped = frame.groupby(list(keys), sort=False, dropna=False)[value].sum().reset_index()
    grouped[value] = grouped[value].astype(float)
    return grouped


def densify(
    frame: pd.DataFrame,
    *,
    times: Sequence[Any],
    categories: Sequence[Any],
    time: str = TIME,
    category: str = CATEGORY,
    value: str = VALUE,
) -> pd.DataFrame:
    """Every ``(time, category)`` combination exactly once, 0 where the input has none."""
    summed = group_sum(frame, keys=[time, category], value=value)
    full_index = pd.MultiIndex.from_product([list(times), list(categories)], names=[time, category])
    dense = summed.set_index([time, category])[value].reindex(full_index, fill_value=0.0)
    return dense.astype(float).reset_index()


def normalize_percent(
    frame: pd.DataFrame,
    *,
    time: str = TIME,
    value: str = VALUE,
) -> pd.DataFrame:
    """Each value as a fraction of its time key's sum; a zero sum gives 0 for every member."""
    normalized = frame.copy()
    totals = normalized.groupby(time, sort=False)[value].transform("sum")
    ratio = np.divide(
        normalized[value].to_numpy(dtype=float),
        totals.to_numpy(dtype=float),
        out=np.zeros(len(normalized), dtype=float),
        where=totals.to_numpy(dtype=float) != 0,
    )
    normalized[value] = ratio
    return normalized


def stack_cumulative(
    frame: pd.DataFrame,
    *,
    keys: Sequence[str],
    time: str = TIME,
    category: str = CATEGORY,
    value: str = VALUE,
) -> pd.DataFrame:
    """Lower/upper band edges per time key (first-seen order), stacked in *keys* order."""
    pivot = (
        frame.pivot_table(index=time, columns=category, values=value, aggfunc="sum", sort=False)
        .reindex(columns=list(keys))
        .fillna(0.0)
    )
    upper = pivot.cumsum(axis=1)
    lower = upper - pivot
    bands = pd.DataFrame(
        {
            time: np.repeat(pivot.index.to_numpy(), len(keys)),
            category: np.tile(np.array(list(keys), dtype=object), len(pivot.index)),
            "lower": lower.to_numpy(dtype=float).ravel(),
            "upper": upper.to_numpy(dtype=float).ravel(),
        }
    )
    return bands


def series_groups(
    frame: pd.DataFrame,
    *,
    keys: Sequence[str],
    time: str = TIME,
    category: str = CATEGORY,
    value: str = VALUE,
    time_order: Sequence[Any] | None = None,
) -> dict[str, pd.DataFrame]:
    """Per-category frames with unique time keys, sorted ascending by time."""
    summed = group_sum(frame, keys=[category, time], value=value)
    groups: dict[str, pd.DataFrame] = {}
    for key in keys:
        subset = summed[summed[category] == key][[time, value]]
        if time_order is not None:
            rank = {item: index for index, item in enumerate(time_order)}
            subset = subset.sort_values(time, key=lambda values: values.map(rank), kind="stable")
        else:
            subset = subset.sort_values(time, kind="stable")
        groups[key] = subset.reset_index(drop=True)
    return groups


def aggregate_across_time(
    frame: pd.DataFrame,
    *,
    categories: Sequence[str],
    category: str = CATEGORY,
    value: str = VALUE,
) -> pd.DataFrame:
    totals = frame.groupby(category, sort=False)[value].sum()
    return pd.DataFrame(
        {
            category: list(categories),
            value: [float(totals.get(key, 0.0)) for key in categories],
        }
    )


def top_categories(
    frame: pd.DataFrame,
    *,
    time_value: Any,
    n: int,
    time: str = TIME,
    category: str = CATEGORY,
    value: str = VALUE,
) -> list[str]:
    """The *n* categories with the largest value at *time_value*."""
    at_time = frame[frame[time] == time_value]
    ranked = group_sum(at_time, keys=[category], value=value).sort_values(
        value, ascending=False, kind="stable"
    )
    return [str(key) for key in ranked[category].head(max(0, int(n)))]
