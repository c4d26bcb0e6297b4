from __future__ import annotations

from collections.abc import Iterable

from fars_insights.records import IncidentRecord

SEARCHABLE_ATTRIBUTES = ("state", "city", "county", "gender", "person_type", "weather")


def _matches_search(record: IncidentRecord, needle: str) -> bool:
    for attribute in SEARCHABLE_ATTRIBUTES:
        value = getattr(record, attribute)
        if value and needle in value.lower():
            return True
    return False


def filter_records(
    records: Iterable[IncidentRecord],
    year: int | None = None,
    state: str | None = None,
    weather: str | None = None,
    search: str | None = None,
) -> list[IncidentRecord]:
    """Select raw records by exact year/state/weather and a free-text search term."""
    needle = (search or "").strip().lower()
    selected: list[IncidentRecord] = []
    for record in records:
        if year is not None and record.year != year:
            continue
        if state is not None and record.state != state:
            continue
        if weather is not None and record.weather != weather:
            continue
        if needle and not _matches_search(record, needle):
            continue
        selected.append(record)
    return selected
