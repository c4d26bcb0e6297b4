from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from fars_insights.config import DEFAULT_EXCLUDED_LABELS
from fars_insights.features.snapshot import AggregateSnapshot
from fars_insights.ranking import percentage, sort_by_value, table_total, top_n


@dataclass(frozen=True)
class WeatherRisk:
    weather: str
    count: int
    percentage: float


def weather_risk_factors(
    snapshot: AggregateSnapshot,
    limit: int = 5,
    excluded: Sequence[str] = DEFAULT_EXCLUDED_LABELS,
) -> list[WeatherRisk]:
    """Share of all records per weather condition, leaving placeholder labels out.

    Placeholders are hidden from the listing but still count toward the total.
    """
    total = table_total(snapshot.by_weather)
    if total == 0:
        return []
    hidden = set(excluded)
    risks = [
        WeatherRisk(weather=str(label), count=count, percentage=percentage(count, total))
        for label, count in sort_by_value(snapshot.by_weather)
        if label not in hidden
    ]
    return risks[:limit]


def weather_light_matrix(
    snapshot: AggregateSnapshot,
    top: int = 5,
) -> list[dict[str, object]]:
    """Light-condition breakdown for the most frequent weather conditions."""
    rows: list[dict[str, object]] = []
    for weather, _count in top_n(snapshot.by_weather, top):
        rows.append(
            {
                "weather": weather,
                "light_conditions": dict(snapshot.light_by_weather.get(weather, {})),
            }
        )
    return rows
