from __future__ import annotations

import json
from collections.abc import Hashable, Mapping
from pathlib import Path
from typing import Any

import pandas as pd

from fars_insights.features.snapshot import (
    CORRELATION_TABLES,
    FREQUENCY_TABLES,
    AggregateSnapshot,
)


def frequency_frame(table: Mapping[Hashable, int], dimension: str) -> pd.DataFrame:
    return pd.DataFrame(
        list(table.items()),
        columns=[dimension, "count"],
    ).astype({"count": "int64"})


def correlation_frame(
    table: Mapping[Hashable, Mapping[Hashable, int]],
    primary: str,
    secondary: str,
) -> pd.DataFrame:
    rows = [
        (primary_key, secondary_key, count)
        for primary_key, inner in table.items()
        for secondary_key, count in inner.items()
    ]
    return pd.DataFrame(rows, columns=[primary, secondary, "count"]).astype({"count": "int64"})


def snapshot_tables(snapshot: AggregateSnapshot) -> dict[str, pd.DataFrame]:
    tables: dict[str, pd.DataFrame] = {}
    for name, dimension in FREQUENCY_TABLES.items():
        tables[name] = frequency_frame(getattr(snapshot, name), dimension)
    for name, (primary, secondary) in CORRELATION_TABLES.items():
        tables[name] = correlation_frame(getattr(snapshot, name), primary, secondary)
    tables["skipped_fields"] = frequency_frame(snapshot.skipped_fields, "field")
    return tables


def write_table(df: pd.DataFrame, path: Path, fmt: str = "parquet") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "parquet":
        # Mixed label types (e.g. int years next to strings) do not serialize to parquet.
        df.astype({column: str for column in df.columns if df[column].dtype == object}).to_parquet(
            path, index=False
        )
        return path
    if fmt == "csv":
        df.to_csv(path, index=False)
        return path
    raise ValueError(f"Unsupported table format: {fmt}")


def write_summary(data: dict[str, Any], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, sort_keys=True, default=str), encoding="utf-8")
    return path
