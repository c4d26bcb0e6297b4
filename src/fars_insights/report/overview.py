from __future__ import annotations

from collections.abc import Hashable, Mapping, Sequence
from typing import Any

from fars_insights.config import DEFAULT_EXCLUDED_LABELS
from fars_insights.features.snapshot import AggregateSnapshot
from fars_insights.ordering import (
    age_bucket_rank,
    day_of_week_rank,
    hour_rank,
    month_rank,
    sort_by_rank,
)
from fars_insights.ranking import FrequencyEntry, sort_by_value, top_n


def _leader(table: Mapping[Hashable, int]) -> dict[str, Any] | None:
    leaders = top_n(table, 1)
    if not leaders:
        return None
    label, count = leaders[0]
    return {"label": label, "count": count}


def _peak(series: list[FrequencyEntry]) -> dict[str, Any] | None:
    if not series:
        return None
    label, count = max(series, key=lambda entry: entry[1])
    return {"label": label, "count": count}


def rural_urban_ratio(snapshot: AggregateSnapshot) -> str:
    """Percentage held by the larger of the two leading rural/urban labels."""
    ranked = sort_by_value(snapshot.by_rural_urban)
    if len(ranked) < 2:
        return "N/A"
    (lead_label, lead_count), (_, runner_up) = ranked[0], ranked[1]
    return f"{round(lead_count / (lead_count + runner_up) * 100)}% {lead_label}"


def quick_stats(snapshot: AggregateSnapshot) -> dict[str, Any]:
    return {
        "total_crashes": snapshot.unique_incidents,
        "total_victims": snapshot.total_records,
        "years_covered": len(snapshot.by_year),
        "top_state": _leader(snapshot.by_state),
        "top_weather": _leader(snapshot.by_weather),
        "top_hour": _leader(snapshot.by_hour),
        "top_day_of_week": _leader(snapshot.by_day_of_week),
        "top_person_type": _leader(snapshot.by_person_type),
        "top_road_type": _leader(snapshot.by_road_type),
        "rural_urban_ratio": rural_urban_ratio(snapshot),
    }


def temporal_profile(snapshot: AggregateSnapshot) -> dict[str, Any]:
    months = sort_by_rank(snapshot.by_month, month_rank)
    days = sort_by_rank(snapshot.by_day_of_week, day_of_week_rank)
    hours = sort_by_rank(snapshot.by_hour, hour_rank)
    years = sorted(snapshot.by_year.items(), key=lambda entry: entry[0])
    return {
        "years": years,
        "months": months,
        "days_of_week": days,
        "hours": hours,
        "peak_month": _peak(months),
        "peak_day_of_week": _peak(days),
        "peak_hour": _peak(hours),
    }


def demographics(
    snapshot: AggregateSnapshot,
    excluded: Sequence[str] = DEFAULT_EXCLUDED_LABELS,
) -> dict[str, list[FrequencyEntry]]:
    hidden = set(excluded)
    return {
        "gender": [entry for entry in snapshot.by_gender.items() if entry[0] not in hidden],
        "age_group": [
            entry
            for entry in sort_by_rank(snapshot.by_age, age_bucket_rank)
            if entry[0] not in hidden
        ],
        "person_type": sort_by_value(snapshot.by_person_type),
    }
