from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

import pandas as pd

RawRow = Mapping[str, str]


class DataLoadError(RuntimeError):
    """Raised when a source table cannot be read at all."""


@dataclass(frozen=True)
class RawTable:
    columns: list[str]
    rows: list[dict[str, str]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)


def raw_table_from_frame(frame: pd.DataFrame) -> RawTable:
    columns = [str(column).strip() for column in frame.columns]
    values = frame.astype(object).where(frame.notna(), "")
    rows = [
        {column: str(value) for column, value in zip(columns, record)}
        for record in values.itertuples(index=False, name=None)
    ]
    return RawTable(columns=columns, rows=rows)


def read_raw_table(path: Path) -> RawTable:
    """Read a delimited file as untyped string rows."""
    try:
        # utf-8-sig strips BOM-prefixed headers commonly found in exported CSV files.
        frame = pd.read_csv(
            path,
            dtype=str,
            keep_default_na=False,
            encoding="utf-8-sig",
            skip_blank_lines=True,
            # Fields past the header are dropped instead of shifting the row into the index.
            engine="python",
            index_col=False,
        )
    except FileNotFoundError as exc:
        raise DataLoadError(f"Data file not found: {path}") from exc
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError, OSError) as exc:
        raise DataLoadError(f"Could not read {path}: {exc}") from exc
    return raw_table_from_frame(frame)
