from __future__ import annotations

from collections.abc import Hashable, Mapping

FrequencyEntry = tuple[Hashable, int]


def table_total(table: Mapping[Hashable, int]) -> int:
    return int(sum(table.values()))


def sort_by_value(
    table: Mapping[Hashable, int],
    ascending: bool = False,
) -> list[FrequencyEntry]:
    """Order entries by count. The sort is stable, so ties keep key order."""
    return sorted(table.items(), key=lambda entry: entry[1], reverse=not ascending)


def top_n(table: Mapping[Hashable, int], n: int) -> list[FrequencyEntry]:
    if n <= 0:
        return []
    return sort_by_value(table, ascending=False)[:n]


def bottom_n(table: Mapping[Hashable, int], n: int) -> list[FrequencyEntry]:
    if n <= 0:
        return []
    return sort_by_value(table, ascending=True)[:n]


def filter_min_count(table: Mapping[Hashable, int], minimum: int) -> dict[Hashable, int]:
    return {label: count for label, count in table.items() if count >= minimum}


def percentage(count: int, total: int) -> float:
    """Share of ``total`` as a percentage rounded to one decimal place.

    Callers must guard against an empty table; a non-positive total raises.
    """
    if total <= 0:
        raise ZeroDivisionError(f"percentage requires a positive total, got {total}")
    return round(count / total * 100, 1)


def format_percentage(count: int, total: int) -> str:
    return f"{percentage(count, total):.1f}%"
