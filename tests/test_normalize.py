from __future__ import annotations

import pytest

from fars_insights.config import ColumnsConfig, PlacesConfig
from fars_insights.preprocess.age import UNKNOWN_AGE_BUCKET, age_bucket
from fars_insights.preprocess.normalize import normalize_record
from fars_insights.preprocess.places import clean_county_name, is_place_included
from fars_insights.records import IncidentRecord, record_from_properties


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
        "city": "CHICAGO",
        "county": "COOK (31)",
        "age": 40,
    }
    values.update(overrides)
    return IncidentRecord(**values)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("age", "expected"),
    [
        (0, "Under 16"),
        (15, "Under 16"),
        (16, "16-24"),
        (24, "16-24"),
        (25, "25-34"),
        (44, "35-44"),
        (45, "45-54"),
        (64, "55-64"),
        (74, "65-74"),
        (75, "75+"),
        (120, "75+"),
        (-3, "Under 16"),
        (None, UNKNOWN_AGE_BUCKET),
    ],
)
def test_age_bucket_uses_half_open_intervals(age: int | None, expected: str) -> None:
    assert age_bucket(age) == expected


def test_is_place_included_rejects_absent_blank_and_sentinel_values() -> None:
    marker = "NOT APPLICABLE"
    assert is_place_included("SPRINGFIELD", marker)
    assert not is_place_included(None, marker)
    assert not is_place_included("   ", marker)
    assert not is_place_included("NOT APPLICABLE", marker)
    assert not is_place_included("NOT APPLICABLE (0)", marker)
    # Substring match is case-sensitive.
    assert is_place_included("Not Applicable", marker)


def test_clean_county_name_strips_trailing_code() -> None:
    assert clean_county_name("COOK (31)") == "COOK"
    assert clean_county_name("LOS ANGELES (37)") == "LOS ANGELES"
    assert clean_county_name("KING") == "KING"


def test_normalize_record_derives_age_bucket_and_place_flags() -> None:
    normalized = normalize_record(_record(age=16))

    assert normalized.age_bucket == "16-24"
    assert normalized.include_city
    assert normalized.city == "CHICAGO"
    assert normalized.include_county
    assert normalized.county == "COOK"


def test_normalize_record_excludes_sentinel_places() -> None:
    normalized = normalize_record(
        _record(city="NOT APPLICABLE", county=None, age=None),
    )

    assert not normalized.include_city
    assert normalized.city is None
    assert not normalized.include_county
    assert normalized.age_bucket == UNKNOWN_AGE_BUCKET


def test_normalize_record_honors_places_config() -> None:
    places = PlacesConfig(not_applicable_marker="N/A", strip_county_code=False)
    normalized = normalize_record(_record(city="N/A", county="COOK (31)"), places)

    assert normalized.city is None
    assert normalized.county == "COOK (31)"


def test_record_from_properties_maps_fars_names_and_tolerates_bad_values() -> None:
    record = record_from_properties(
        {
            "CRASH_NUM1": 170001,
            "YEAR": "2017",
            "STATENAME": " Texas ",
            "CITYNAME": "",
            "MONTHNAME": "July",
            "PBAGE": "not-a-number",
            "PER_NO": 2.0,
            "WEATHERNAME": None,
        }
    )
    overflowing = record_from_properties({"YEAR": "1e999", "PBAGE": "inf", "PER_NO": "-Infinity"})

    assert record.incident_id == "170001"
    assert record.year == 2017
    assert record.state == "Texas"
    assert record.city is None
    assert record.month == "July"
    assert record.age is None
    assert record.person_number == 2
    assert record.weather is None
    assert record.hour_label is None
    assert overflowing.year is None
    assert overflowing.age is None
    assert overflowing.person_number is None


def test_record_from_properties_uses_configured_columns() -> None:
    columns = ColumnsConfig(incident_id="case_id", weather="conditions")
    record = record_from_properties({"case_id": "X-1", "conditions": "Snow"}, columns)

    assert record.incident_id == "X-1"
    assert record.weather == "Snow"
