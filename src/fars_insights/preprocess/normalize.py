from __future__ import annotations

from dataclasses import dataclass

from fars_insights.config import PlacesConfig
from fars_insights.preprocess.age import age_bucket
from fars_insights.preprocess.places import clean_county_name, is_place_included
from fars_insights.records import IncidentRecord


@dataclass(frozen=True, slots=True)
class NormalizedRecord:
    record: IncidentRecord
    age_bucket: str
    city: str | None
    county: str | None

    @property
    def include_city(self) -> bool:
        return self.city is not None

    @property
    def include_county(self) -> bool:
        return self.county is not None


def normalize_record(
    record: IncidentRecord,
    places: PlacesConfig | None = None,
) -> NormalizedRecord:
    places_config = places or PlacesConfig()
    marker = places_config.not_applicable_marker

    city = record.city if is_place_included(record.city, marker) else None

    county = record.county if is_place_included(record.county, marker) else None
    if county is not None and places_config.strip_county_code:
        county = clean_county_name(county)

    return NormalizedRecord(
        record=record,
        age_bucket=age_bucket(record.age),
        city=city,
        county=county,
    )
