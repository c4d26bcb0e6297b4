from __future__ import annotations

from enum import Enum
from pathlib import Path

import typer

from fars_insights.config import DEFAULT_CONFIG_PATH, AppConfig, load_config
from fars_insights.features.snapshot import FREQUENCY_TABLES
from fars_insights.io.read import LoadError, load_records, records_frame
from fars_insights.io.write import write_table
from fars_insights.logging import configure_logging
from fars_insights.pipeline.run_all import build_snapshot, run_all
from fars_insights.ranking import bottom_n, format_percentage, table_total, top_n
from fars_insights.report.explorer import filter_records
from fars_insights.report.scorecard import city_scorecard
from fars_insights.report.timeline import location_timeline, trend_analysis

app = typer.Typer(no_args_is_help=True, add_completion=False)

DIMENSIONS = sorted(set(FREQUENCY_TABLES.values()))


class RankOrder(str, Enum):
    top = "top"
    bottom = "bottom"


def _load_app_config(config_path: Path) -> AppConfig:
    return load_config(config_path)


def _require_source(source: str | None, cfg: AppConfig) -> str:
    effective = source or cfg.input.source
    if not effective:
        raise typer.BadParameter(
            "Missing --source. Pass a GeoJSON path or URL, "
            "or set input.source / FARS_INSIGHTS_SOURCE."
        )
    return effective


def _fail_load(exc: LoadError) -> None:
    typer.echo(f"Loading failed: {exc}", err=True)
    raise typer.Exit(code=1)


@app.command()
def summarize(
    source: str | None = typer.Option(None, help="GeoJSON path or URL of crash features."),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
) -> None:
    """Aggregate crash records and write every table plus a JSON summary."""
    configure_logging()
    cfg = _load_app_config(config)
    effective_source = _require_source(source, cfg)
    try:
        summary_path = run_all(source=effective_source, out_dir=out, config=cfg)
    except LoadError as exc:
        _fail_load(exc)
    typer.echo(f"Summary written to: {summary_path}")


@app.command()
def top(
    dimension: str = typer.Argument(..., help=f"One of: {', '.join(DIMENSIONS)}"),
    source: str | None = typer.Option(None, help="GeoJSON path or URL of crash features."),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    n: int | None = typer.Option(None, min=1, help="Entries to show. Defaults to views.top_n."),
    order: RankOrder = typer.Option(RankOrder.top),
) -> None:
    """Print the most (or least) frequent labels of one dimension."""
    configure_logging()
    if dimension not in DIMENSIONS:
        raise typer.BadParameter(f"Unknown dimension '{dimension}'. Choose from {DIMENSIONS}")
    cfg = _load_app_config(config)
    effective_source = _require_source(source, cfg)
    try:
        snapshot = build_snapshot(source=effective_source, config=cfg)
    except LoadError as exc:
        _fail_load(exc)

    table = snapshot.frequency(dimension)
    limit = n or cfg.views.top_n
    entries = top_n(table, limit) if order is RankOrder.top else bottom_n(table, limit)
    total = table_total(table)
    for label, count in entries:
        typer.echo(f"{label}\t{count}\t{format_percentage(count, total)}")


@app.command()
def scorecard(
    source: str | None = typer.Option(None, help="GeoJSON path or URL of crash features."),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    limit: int = typer.Option(12, min=1),
) -> None:
    """Print the safest and riskiest cities above the minimum crash threshold."""
    configure_logging()
    cfg = _load_app_config(config)
    effective_source = _require_source(source, cfg)
    try:
        snapshot = build_snapshot(source=effective_source, config=cfg)
    except LoadError as exc:
        _fail_load(exc)

    card = city_scorecard(
        snapshot,
        min_crashes=cfg.views.min_city_crashes,
        limit=min(limit, cfg.views.scorecard_limit),
    )
    typer.echo(f"Cities with at least {cfg.views.min_city_crashes} crashes: {card.eligible_cities}")
    typer.echo("Safest:")
    for city, count in card.safest:
        typer.echo(f"- {city}: {count}")
    typer.echo("Riskiest:")
    for city, count in card.riskiest:
        typer.echo(f"- {city}: {count}")


@app.command()
def timeline(
    source: str | None = typer.Option(None, help="GeoJSON path or URL of crash features."),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    state: str | None = typer.Option(None),
    city: str | None = typer.Option(None),
) -> None:
    """Print yearly counts for all records, one state, or one city."""
    configure_logging()
    if state and city:
        raise typer.BadParameter("Use either --state or --city, not both")
    cfg = _load_app_config(config)
    effective_source = _require_source(source, cfg)
    try:
        snapshot = build_snapshot(source=effective_source, config=cfg)
    except LoadError as exc:
        _fail_load(exc)

    if state:
        series = location_timeline(snapshot, "state", state)
    elif city:
        series = location_timeline(snapshot, "city", city)
    else:
        series = location_timeline(snapshot, "all")
    for year, count in series:
        typer.echo(f"{year}\t{count}")
    trend = trend_analysis(series, threshold_pct=cfg.views.trend_threshold_pct)
    typer.echo(f"Trend: {trend.trend} ({trend.percentage:.1f}%)")


@app.command()
def explore(
    source: str | None = typer.Option(None, help="GeoJSON path or URL of crash features."),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    year: int | None = typer.Option(None),
    state: str | None = typer.Option(None),
    weather: str | None = typer.Option(None),
    search: str | None = typer.Option(None),
    out: Path | None = typer.Option(None, resolve_path=True, help="Write matches as CSV."),
) -> None:
    """Filter raw records by year, state, weather, and a search term."""
    configure_logging()
    cfg = _load_app_config(config)
    effective_source = _require_source(source, cfg)
    try:
        records = load_records(source=effective_source, config=cfg)
    except LoadError as exc:
        _fail_load(exc)

    matches = filter_records(records, year=year, state=state, weather=weather, search=search)
    typer.echo(f"Matched {len(matches)} of {len(records)} records")
    if out is not None:
        write_table(records_frame(matches), out, fmt="csv")
        typer.echo(f"Matches written to: {out}")


if __name__ == "__main__":
    app()
