from __future__ import annotations

from collections import Counter
from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field, fields
from types import MappingProxyType

FrequencyTable = Mapping[Hashable, int]
CorrelationTable = Mapping[Hashable, FrequencyTable]

# Snapshot attribute -> dimension name used in exports and skip accounting.
FREQUENCY_TABLES: dict[str, str] = {
    "by_year": "year",
    "by_state": "state",
    "by_month": "month",
    "by_day_of_week": "day_of_week",
    "by_hour": "hour",
    "by_gender": "gender",
    "by_age": "age_group",
    "by_weather": "weather",
    "by_light_condition": "light_condition",
    "by_road_type": "road_type",
    "by_city": "city",
    "by_county": "county",
    "by_rural_urban": "rural_urban",
    "by_person_type": "person_type",
}

# Snapshot attribute -> (primary dimension, secondary dimension).
CORRELATION_TABLES: dict[str, tuple[str, str]] = {
    "weather_by_month": ("month", "weather"),
    "month_by_year": ("year", "month"),
    "year_by_state": ("state", "year"),
    "year_by_city": ("city", "year"),
    "light_by_weather": ("weather", "light_condition"),
}

PLACE_DIMENSIONS = frozenset({"city", "county"})


def freeze_frequency(counts: Mapping[Hashable, int]) -> FrequencyTable:
    return MappingProxyType({key: int(value) for key, value in counts.items()})


def freeze_correlation(nested: Mapping[Hashable, Mapping[Hashable, int]]) -> CorrelationTable:
    return MappingProxyType({key: freeze_frequency(inner) for key, inner in nested.items()})


def _empty_frequency() -> FrequencyTable:
    return MappingProxyType({})


@dataclass(frozen=True)
class AggregateSnapshot:
    """Every frequency and correlation table from one pass over the records.

    Tables are read-only mapping proxies. Keys keep first-seen order, so ties
    rank the same way on every call.
    """

    incident_ids: frozenset[str] = frozenset()
    total_records: int = 0
    by_year: FrequencyTable = field(default_factory=_empty_frequency)
    by_state: FrequencyTable = field(default_factory=_empty_frequency)
    by_month: FrequencyTable = field(default_factory=_empty_frequency)
    by_day_of_week: FrequencyTable = field(default_factory=_empty_frequency)
    by_hour: FrequencyTable = field(default_factory=_empty_frequency)
    by_gender: FrequencyTable = field(default_factory=_empty_frequency)
    by_age: FrequencyTable = field(default_factory=_empty_frequency)
    by_weather: FrequencyTable = field(default_factory=_empty_frequency)
    by_light_condition: FrequencyTable = field(default_factory=_empty_frequency)
    by_road_type: FrequencyTable = field(default_factory=_empty_frequency)
    by_city: FrequencyTable = field(default_factory=_empty_frequency)
    by_county: FrequencyTable = field(default_factory=_empty_frequency)
    by_rural_urban: FrequencyTable = field(default_factory=_empty_frequency)
    by_person_type: FrequencyTable = field(default_factory=_empty_frequency)
    weather_by_month: CorrelationTable = field(default_factory=_empty_frequency)
    month_by_year: CorrelationTable = field(default_factory=_empty_frequency)
    year_by_state: CorrelationTable = field(default_factory=_empty_frequency)
    year_by_city: CorrelationTable = field(default_factory=_empty_frequency)
    light_by_weather: CorrelationTable = field(default_factory=_empty_frequency)
    skipped_fields: FrequencyTable = field(default_factory=_empty_frequency)

    @property
    def unique_incidents(self) -> int:
        return len(self.incident_ids)

    def frequency_tables(self) -> dict[str, FrequencyTable]:
        return {name: getattr(self, name) for name in FREQUENCY_TABLES}

    def correlation_tables(self) -> dict[str, CorrelationTable]:
        return {name: getattr(self, name) for name in CORRELATION_TABLES}

    def frequency(self, dimension: str) -> FrequencyTable:
        """Look up a one-key table by attribute name (``by_city``) or dimension (``city``)."""
        if dimension in FREQUENCY_TABLES:
            return getattr(self, dimension)
        for name, table_dimension in FREQUENCY_TABLES.items():
            if table_dimension == dimension:
                return getattr(self, name)
        raise KeyError(f"Unknown frequency dimension: {dimension}")


def merge_snapshots(*snapshots: AggregateSnapshot) -> AggregateSnapshot:
    """Combine partial snapshots by pointwise addition and identity-set union.

    Keys keep first-seen order across the snapshots as passed. Contiguous
    partitions passed in collection order therefore rank ties exactly like a
    single pass; any other partition order may order tied labels differently.
    """
    if not snapshots:
        return AggregateSnapshot()

    merged: dict[str, object] = {}
    for snapshot_field in fields(AggregateSnapshot):
        name = snapshot_field.name
        if name == "incident_ids":
            merged[name] = frozenset().union(*(snapshot.incident_ids for snapshot in snapshots))
        elif name == "total_records":
            merged[name] = sum(snapshot.total_records for snapshot in snapshots)
        elif name in CORRELATION_TABLES:
            nested: dict[Hashable, Counter] = {}
            for snapshot in snapshots:
                for key, inner in getattr(snapshot, name).items():
                    nested.setdefault(key, Counter()).update(inner)
            merged[name] = freeze_correlation(nested)
        else:
            counts: Counter = Counter()
            for snapshot in snapshots:
                counts.update(getattr(snapshot, name))
            merged[name] = freeze_frequency(counts)
    return AggregateSnapshot(**merged)
