"""Canonical orderings for the fixed categorical vocabularies.

Rank functions never raise: labels outside a vocabulary get ``UNRANKED`` so
callers can place them deterministically.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Hashable, Mapping

UNRANKED = -1

MONTHS: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

DAYS_OF_WEEK: tuple[str, ...] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

AGE_BUCKETS: tuple[str, ...] = (
    "Under 16",
    "16-24",
    "25-34",
    "35-44",
    "45-54",
    "55-64",
    "65-74",
    "75+",
    "Unknown",
)

HOUR_LABEL_RE = re.compile(r"(\d+):00(am|pm)")

_MONTH_RANKS = {label: index for index, label in enumerate(MONTHS)}
_DAY_RANKS = {label: index for index, label in enumerate(DAYS_OF_WEEK)}
_AGE_BUCKET_RANKS = {label: index for index, label in enumerate(AGE_BUCKETS)}


def month_rank(label: object) -> int:
    return _MONTH_RANKS.get(label, UNRANKED) if isinstance(label, str) else UNRANKED


def day_of_week_rank(label: object) -> int:
    return _DAY_RANKS.get(label, UNRANKED) if isinstance(label, str) else UNRANKED


def age_bucket_rank(label: object) -> int:
    return _AGE_BUCKET_RANKS.get(label, UNRANKED) if isinstance(label, str) else UNRANKED


def hour_rank(label: object) -> int:
    """Map an hour label such as ``4:00pm-4:59pm`` to its 24-hour clock value."""
    if not isinstance(label, str):
        return UNRANKED
    match = HOUR_LABEL_RE.search(label)
    if match is None:
        return UNRANKED

    hour = int(match.group(1))
    if not 1 <= hour <= 12:
        return UNRANKED
    period = match.group(2)
    if period == "pm" and hour != 12:
        hour += 12
    if period == "am" and hour == 12:
        hour = 0
    return hour


def sort_by_rank(
    table: Mapping[Hashable, int],
    rank: Callable[[object], int],
) -> list[tuple[Hashable, int]]:
    """Order table entries by canonical rank; unranked labels trail in key order."""
    entries = list(table.items())
    ranked = [entry for entry in entries if rank(entry[0]) != UNRANKED]
    unranked = [entry for entry in entries if rank(entry[0]) == UNRANKED]
    ranked.sort(key=lambda entry: rank(entry[0]))
    return ranked + unranked
