from __future__ import annotations

import logging
import random
from dataclasses import FrozenInstanceError, replace

import pytest

from fars_insights.config import PlacesConfig
from fars_insights.features.aggregates import aggregate
from fars_insights.features.snapshot import FREQUENCY_TABLES, AggregateSnapshot
from fars_insights.records import IncidentRecord


def _record(**overrides: object) -> IncidentRecord:
    values: dict[str, object] = {
        "incident_id": "A",
        "year": 2020,
        "state": "Illinois",
        "month": "March",
        "day_of_week": "Friday",
        "hour_label": "6:00pm-6:59pm",
        "gender": "Male",
        "person_type": "Pedestrian",
        "weather": "Clear",
        "light_condition": "Daylight",
        "road_type": "Local",
        "rural_urban": "Urban",
        "city": "SPRINGFIELD",
        "county": "SANGAMON (167)",
        "age": 30,
        "person_number": 1,
    }
    values.update(overrides)
    return IncidentRecord(**values)  # type: ignore[arg-type]


def _sample_records() -> list[IncidentRecord]:
    return [
        _record(incident_id="A", year=2020, month="January", weather="Rain"),
        _record(incident_id="A", year=2020, month="January", weather="Rain", person_number=2),
        _record(
            incident_id="B",
            year=2021,
            state="Texas",
            city="NOT APPLICABLE",
            county="HARRIS (201)",
            month="June",
            weather="Clear",
            light_condition="Dark - Lighted",
            age=None,
        ),
        _record(incident_id="C", year=2021, month="June", weather="Clear", age=15),
        _record(
            incident_id="D",
            year=2022,
            state="Texas",
            city="AUSTIN",
            county="TRAVIS (453)",
            month="December",
            weather="Snow",
            age=80,
        ),
    ]


def test_aggregate_concrete_scenario() -> None:
    records = [
        _record(incident_id="A", year=2020, city="Springfield", weather="Rain"),
        _record(incident_id="A", year=2020, city="Springfield", weather="Rain", person_number=2),
        _record(incident_id="B", year=2021, city="NOT APPLICABLE", weather="Clear", month="May"),
    ]

    snapshot = aggregate(records)

    assert snapshot.total_records == 3
    assert snapshot.unique_incidents == 2
    assert dict(snapshot.by_year) == {2020: 2, 2021: 1}
    assert dict(snapshot.by_city) == {"Springfield": 2}
    assert dict(snapshot.by_weather) == {"Rain": 2, "Clear": 1}
    assert dict(snapshot.weather_by_month["March"]) == {"Rain": 2}
    assert dict(snapshot.weather_by_month["May"]) == {"Clear": 1}
    assert set(snapshot.year_by_city) == {"Springfield"}


def test_aggregate_one_key_tables_sum_to_total_records() -> None:
    snapshot = aggregate(_sample_records())

    for name, dimension in FREQUENCY_TABLES.items():
        if dimension in {"city", "county"}:
            continue
        assert sum(getattr(snapshot, name).values()) == snapshot.total_records, name
    assert sum(snapshot.by_city.values()) == 4
    assert snapshot.skipped_fields == {}


def test_aggregate_correlation_slices_match_one_key_tables() -> None:
    snapshot = aggregate(_sample_records())

    for year, count in snapshot.by_year.items():
        assert sum(snapshot.month_by_year[year].values()) == count
    for month, count in snapshot.by_month.items():
        assert sum(snapshot.weather_by_month[month].values()) == count
    for state, count in snapshot.by_state.items():
        assert sum(snapshot.year_by_state[state].values()) == count
    for city, count in snapshot.by_city.items():
        assert sum(snapshot.year_by_city[city].values()) == count
    for weather, count in snapshot.by_weather.items():
        assert sum(snapshot.light_by_weather[weather].values()) == count


def test_aggregate_deduplicates_incidents_but_counts_every_person() -> None:
    single = aggregate([_record(incident_id="Z", person_number=1)])
    pair = aggregate(
        [_record(incident_id="Z", person_number=1), _record(incident_id="Z", person_number=2)]
    )

    assert single.unique_incidents == 1
    assert pair.unique_incidents == 1
    assert pair.total_records == single.total_records + 1


def test_aggregate_buckets_ages() -> None:
    snapshot = aggregate(_sample_records())

    assert dict(snapshot.by_age) == {"25-34": 2, "Unknown": 1, "Under 16": 1, "75+": 1}


def test_aggregate_excludes_sentinel_places_from_place_tables_only() -> None:
    snapshot = aggregate(
        [_record(incident_id="B", city="NOT APPLICABLE", county="NOT APPLICABLE", year=2019)]
    )

    assert dict(snapshot.by_city) == {}
    assert dict(snapshot.by_county) == {}
    assert dict(snapshot.year_by_city) == {}
    assert dict(snapshot.by_year) == {2019: 1}
    assert dict(snapshot.by_weather) == {"Clear": 1}
    assert dict(snapshot.year_by_state) == {"Illinois": {2019: 1}}
    assert snapshot.skipped_fields == {}


def test_aggregate_strips_county_codes() -> None:
    snapshot = aggregate(_sample_records())

    assert dict(snapshot.by_county) == {"SANGAMON": 3, "HARRIS": 1, "TRAVIS": 1}


def test_aggregate_respects_custom_sentinel_marker() -> None:
    snapshot = aggregate(
        [_record(city="UNINCORPORATED AREA"), _record(city="NOT APPLICABLE")],
        places=PlacesConfig(not_applicable_marker="UNINCORPORATED"),
    )

    assert dict(snapshot.by_city) == {"NOT APPLICABLE": 1}


def test_aggregate_skips_missing_fields_per_dimension(caplog: pytest.LogCaptureFixture) -> None:
    records = [
        _record(incident_id="A"),
        _record(incident_id="B", weather=None, month=None),
        _record(incident_id=None, year=None),
    ]

    with caplog.at_level(logging.WARNING, logger="fars_insights.features.aggregates"):
        snapshot = aggregate(records)

    assert snapshot.total_records == 3
    assert snapshot.unique_incidents == 2
    assert dict(snapshot.by_weather) == {"Clear": 2}
    assert dict(snapshot.by_month) == {"March": 2}
    assert dict(snapshot.by_year) == {2020: 2}
    assert dict(snapshot.by_state) == {"Illinois": 3}
    assert dict(snapshot.skipped_fields) == {"weather": 1, "month": 1, "incident_id": 1, "year": 1}
    assert sum(snapshot.by_weather.values()) + snapshot.skipped_fields["weather"] == 3
    # Correlations need both keys.
    assert sum(snapshot.weather_by_month["March"].values()) == 2
    assert sum(snapshot.month_by_year[2020].values()) == 1
    assert "Skipped missing values" in caplog.text


def test_aggregate_is_independent_of_record_order() -> None:
    records = _sample_records()
    shuffled = list(records)
    random.Random(3).shuffle(shuffled)

    baseline = aggregate(records)
    reordered = aggregate(shuffled)

    for name in FREQUENCY_TABLES:
        assert dict(getattr(baseline, name)) == dict(getattr(reordered, name))
    assert baseline.correlation_tables() == reordered.correlation_tables()
    assert baseline.incident_ids == reordered.incident_ids


def test_aggregate_empty_input_produces_empty_snapshot() -> None:
    snapshot = aggregate([])

    assert snapshot.total_records == 0
    assert snapshot.unique_incidents == 0
    assert all(len(table) == 0 for table in snapshot.frequency_tables().values())
    assert all(len(table) == 0 for table in snapshot.correlation_tables().values())
    assert snapshot == AggregateSnapshot()


def test_aggregate_accepts_a_generator() -> None:
    snapshot = aggregate(record for record in _sample_records())

    assert snapshot.total_records == 5


def test_snapshot_is_read_only() -> None:
    snapshot = aggregate(_sample_records())

    with pytest.raises(FrozenInstanceError):
        snapshot.total_records = 0  # type: ignore[misc]
    with pytest.raises(TypeError):
        snapshot.by_year[2020] = 99  # type: ignore[index]
    with pytest.raises(TypeError):
        snapshot.month_by_year[2020]["January"] = 99  # type: ignore[index]


def test_aggregate_returns_fresh_snapshots() -> None:
    records = _sample_records()
    first = aggregate(records)
    second = aggregate(records + [replace(records[0], incident_id="E")])

    assert first.total_records == 5
    assert second.total_records == 6
    assert "E" not in first.incident_ids
