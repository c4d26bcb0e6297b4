from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from typing import Literal

from fars_insights.features.snapshot import AggregateSnapshot
from fars_insights.ordering import MONTHS

LocationKind = Literal["all", "state", "city"]
Trend = Literal["increasing", "decreasing", "stable"]

DEFAULT_TIMELINE_MIN_CITY_CRASHES = 10
DEFAULT_TREND_THRESHOLD_PCT = 5.0


@dataclass(frozen=True)
class TrendSummary:
    trend: Trend
    percentage: float


def snapshot_years(snapshot: AggregateSnapshot) -> list[Hashable]:
    return sorted(snapshot.by_year)


def location_options(
    snapshot: AggregateSnapshot,
    kind: LocationKind,
    min_city_crashes: int = DEFAULT_TIMELINE_MIN_CITY_CRASHES,
) -> list[str]:
    if kind == "all":
        return []
    if kind == "state":
        return sorted(str(state) for state in snapshot.by_state)
    if kind == "city":
        return sorted(
            str(city) for city, count in snapshot.by_city.items() if count >= min_city_crashes
        )
    raise ValueError(f"Unknown location kind: {kind}")


def location_timeline(
    snapshot: AggregateSnapshot,
    kind: LocationKind = "all",
    location: str | None = None,
) -> list[tuple[Hashable, int]]:
    """Per-year counts for all records, one state, or one city.

    Every year present in the snapshot is listed; a location without records in
    a year reports 0 for it.
    """
    years = snapshot_years(snapshot)
    if kind == "all":
        return [(year, int(snapshot.by_year.get(year, 0))) for year in years]
    if kind == "state":
        per_year = snapshot.year_by_state.get(location, {})
    elif kind == "city":
        per_year = snapshot.year_by_city.get(location, {})
    else:
        raise ValueError(f"Unknown location kind: {kind}")
    return [(year, int(per_year.get(year, 0))) for year in years]


def monthly_timeline(snapshot: AggregateSnapshot) -> list[dict[str, object]]:
    """One row per calendar month with the count recorded in each year."""
    years = snapshot_years(snapshot)
    rows: list[dict[str, object]] = []
    for month in MONTHS:
        row: dict[str, object] = {"month": month}
        for year in years:
            row[str(year)] = int(snapshot.month_by_year.get(year, {}).get(month, 0))
        rows.append(row)
    return rows


def trend_analysis(
    timeline: list[tuple[Hashable, int]],
    threshold_pct: float = DEFAULT_TREND_THRESHOLD_PCT,
) -> TrendSummary:
    """Compare the first and last year of a timeline."""
    if len(timeline) < 2:
        return TrendSummary(trend="stable", percentage=0.0)

    first = timeline[0][1]
    last = timeline[-1][1]
    if first == 0:
        return TrendSummary(trend="increasing", percentage=100.0)

    change = (last - first) / first * 100
    trend: Trend = "stable"
    if change > threshold_pct:
        trend = "increasing"
    elif change < -threshold_pct:
        trend = "decreasing"
    return TrendSummary(trend=trend, percentage=round(abs(change), 1))
