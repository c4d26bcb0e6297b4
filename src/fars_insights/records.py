from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

from fars_insights.config import ColumnsConfig


@dataclass(frozen=True, slots=True)
class IncidentRecord:
    """One person involved in a crash; several records can share ``incident_id``.

    Attributes every FARS person row carries come first and have no default.
    They are still ``None`` when a malformed row omits them, so aggregation can
    skip that one dimension. Place and demographic details that are legitimately
    optional default to ``None``.
    """

    incident_id: str | None
    year: int | None
    state: str | None
    month: str | None
    day_of_week: str | None
    hour_label: str | None
    gender: str | None
    person_type: str | None
    weather: str | None
    light_condition: str | None
    road_type: str | None
    rural_urban: str | None
    city: str | None = None
    county: str | None = None
    age: int | None = None
    person_number: int | None = None


def _clean_label(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    text = str(value).strip()
    return text or None


def _clean_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    text = str(value).strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    return int(number) if math.isfinite(number) else None


def record_from_properties(
    properties: Mapping[str, Any],
    columns: ColumnsConfig | None = None,
) -> IncidentRecord:
    """Build a record from a raw property bag without ever rejecting the row."""
    cols = columns or ColumnsConfig()
    return IncidentRecord(
        incident_id=_clean_label(properties.get(cols.incident_id)),
        year=_clean_int(properties.get(cols.year)),
        state=_clean_label(properties.get(cols.state)),
        month=_clean_label(properties.get(cols.month)),
        day_of_week=_clean_label(properties.get(cols.day_of_week)),
        hour_label=_clean_label(properties.get(cols.hour_label)),
        gender=_clean_label(properties.get(cols.gender)),
        person_type=_clean_label(properties.get(cols.person_type)),
        weather=_clean_label(properties.get(cols.weather)),
        light_condition=_clean_label(properties.get(cols.light_condition)),
        road_type=_clean_label(properties.get(cols.road_type)),
        rural_urban=_clean_label(properties.get(cols.rural_urban)),
        city=_clean_label(properties.get(cols.city)),
        county=_clean_label(properties.get(cols.county)),
        age=_clean_int(properties.get(cols.age)),
        person_number=_clean_int(properties.get(cols.person_number)),
    )
