from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Hashable, Iterable

from fars_insights.config import PlacesConfig
from fars_insights.features.snapshot import (
    AggregateSnapshot,
    freeze_correlation,
    freeze_frequency,
)
from fars_insights.preprocess.normalize import normalize_record
from fars_insights.records import IncidentRecord

LOGGER = logging.getLogger(__name__)

# Snapshot table -> IncidentRecord attribute counted verbatim.
RECORD_DIMENSIONS: dict[str, str] = {
    "by_year": "year",
    "by_state": "state",
    "by_month": "month",
    "by_day_of_week": "day_of_week",
    "by_hour": "hour_label",
    "by_gender": "gender",
    "by_weather": "weather",
    "by_light_condition": "light_condition",
    "by_road_type": "road_type",
    "by_rural_urban": "rural_urban",
    "by_person_type": "person_type",
}


class _Accumulator:
    def __init__(self) -> None:
        self.incident_ids: set[str] = set()
        self.total_records = 0
        self.frequencies: dict[str, Counter] = {
            name: Counter()
            for name in (*RECORD_DIMENSIONS, "by_age", "by_city", "by_county")
        }
        self.correlations: dict[str, dict[Hashable, Counter]] = {
            "weather_by_month": {},
            "month_by_year": {},
            "year_by_state": {},
            "year_by_city": {},
            "light_by_weather": {},
        }
        self.skipped: Counter = Counter()

    def skip(self, dimension: str, index: int) -> None:
        self.skipped[dimension] += 1
        LOGGER.debug("Record %d has no %s; skipped for that dimension", index, dimension)

    def correlate(self, name: str, primary: Hashable | None, secondary: Hashable | None) -> None:
        if primary is None or secondary is None:
            return
        self.correlations[name].setdefault(primary, Counter())[secondary] += 1

    def freeze(self) -> AggregateSnapshot:
        tables = {name: freeze_frequency(counts) for name, counts in self.frequencies.items()}
        nested = {name: freeze_correlation(table) for name, table in self.correlations.items()}
        return AggregateSnapshot(
            incident_ids=frozenset(self.incident_ids),
            total_records=self.total_records,
            skipped_fields=freeze_frequency(self.skipped),
            **tables,
            **nested,
        )


def aggregate(
    records: Iterable[IncidentRecord],
    places: PlacesConfig | None = None,
) -> AggregateSnapshot:
    """Count every frequency and correlation table in a single pass.

    A record missing a categorical value is left out of that dimension only and
    tallied in ``skipped_fields``. City and county tables additionally drop
    absent or "not applicable" place names; those are not counted as skipped.
    """
    places_config = places or PlacesConfig()
    acc = _Accumulator()

    for index, record in enumerate(records):
        normalized = normalize_record(record, places_config)

        if record.incident_id is None:
            acc.skip("incident_id", index)
        else:
            acc.incident_ids.add(record.incident_id)

        for name, attribute in RECORD_DIMENSIONS.items():
            value = getattr(record, attribute)
            if value is None:
                acc.skip(attribute, index)
                continue
            acc.frequencies[name][value] += 1

        acc.frequencies["by_age"][normalized.age_bucket] += 1
        if normalized.include_city:
            acc.frequencies["by_city"][normalized.city] += 1
        if normalized.include_county:
            acc.frequencies["by_county"][normalized.county] += 1

        acc.correlate("weather_by_month", record.month, record.weather)
        acc.correlate("month_by_year", record.year, record.month)
        acc.correlate("year_by_state", record.state, record.year)
        acc.correlate("year_by_city", normalized.city, record.year)
        acc.correlate("light_by_weather", record.weather, record.light_condition)

        acc.total_records += 1

    if acc.skipped:
        LOGGER.warning(
            "Skipped missing values across %d records: %s",
            acc.total_records,
            ", ".join(f"{dimension}={count}" for dimension, count in acc.skipped.items()),
        )
    LOGGER.info(
        "Aggregated %d records from %d incidents",
        acc.total_records,
        len(acc.incident_ids),
    )
    return acc.freeze()
