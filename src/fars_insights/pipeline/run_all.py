from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from fars_insights.config import AppConfig
from fars_insights.features.aggregates import aggregate
from fars_insights.features.snapshot import AggregateSnapshot
from fars_insights.io.read import load_records
from fars_insights.io.write import snapshot_tables, write_summary, write_table
from fars_insights.paths import build_output_paths
from fars_insights.report.overview import quick_stats
from fars_insights.report.scorecard import city_scorecard
from fars_insights.report.timeline import location_timeline, trend_analysis

LOGGER = logging.getLogger(__name__)


def build_snapshot(source: str | None, config: AppConfig) -> AggregateSnapshot:
    records = load_records(source=source, config=config)
    return aggregate(records, places=config.places)


def build_summary(snapshot: AggregateSnapshot, config: AppConfig) -> dict[str, object]:
    scorecard = city_scorecard(
        snapshot,
        min_crashes=config.views.min_city_crashes,
        limit=config.views.scorecard_limit,
    )
    trend = trend_analysis(
        location_timeline(snapshot, "all"),
        threshold_pct=config.views.trend_threshold_pct,
    )
    return {
        **quick_stats(snapshot),
        "trend": {"trend": trend.trend, "percentage": trend.percentage},
        "eligible_cities": scorecard.eligible_cities,
        "skipped_fields": dict(snapshot.skipped_fields),
    }


def write_snapshot_tables(
    snapshot: AggregateSnapshot, out_dir: Path, config: AppConfig
) -> dict[str, pd.DataFrame]:
    paths = build_output_paths(out_dir)
    tables = snapshot_tables(snapshot)
    extension = "parquet" if config.outputs.tables_format == "parquet" else "csv"
    for name, table in tables.items():
        write_table(table, paths.tables / f"{name}.{extension}", fmt=config.outputs.tables_format)
    return tables


def run_all(source: str | None, out_dir: Path, config: AppConfig) -> Path:
    snapshot = build_snapshot(source=source, config=config)
    tables = write_snapshot_tables(snapshot, out_dir=out_dir, config=config)
    LOGGER.info("Wrote %d aggregate tables to %s", len(tables), out_dir)
    paths = build_output_paths(out_dir)
    return write_summary(build_summary(snapshot, config), paths.summary / "summary.json")
