from __future__ import annotations

from dataclasses import dataclass

from fars_insights.features.snapshot import AggregateSnapshot
from fars_insights.ranking import FrequencyEntry, filter_min_count, sort_by_value

DEFAULT_MIN_CITY_CRASHES = 5
DEFAULT_SCORECARD_LIMIT = 50


@dataclass(frozen=True)
class CityScorecard:
    safest: list[FrequencyEntry]
    riskiest: list[FrequencyEntry]
    eligible_cities: int


def city_scorecard(
    snapshot: AggregateSnapshot,
    min_crashes: int = DEFAULT_MIN_CITY_CRASHES,
    limit: int = DEFAULT_SCORECARD_LIMIT,
) -> CityScorecard:
    """Rank cities with at least ``min_crashes`` records, fewest first and most first."""
    ascending = sort_by_value(filter_min_count(snapshot.by_city, min_crashes), ascending=True)
    riskiest = list(reversed(ascending))
    return CityScorecard(
        safest=ascending[:limit],
        riskiest=riskiest[:limit],
        eligible_cities=len(ascending),
    )


def search_cities(snapshot: AggregateSnapshot, term: str) -> list[FrequencyEntry]:
    needle = term.strip().lower()
    if not needle:
        return []
    matches = {city: count for city, count in snapshot.by_city.items() if needle in str(city).lower()}
    return sort_by_value(matches, ascending=True)
