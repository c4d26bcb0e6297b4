from __future__ import annotations

import re

COUNTY_CODE_RE = re.compile(r"\s+\(.*$")


def is_place_included(value: str | None, not_applicable_marker: str) -> bool:
    """Return False for absent place names and the "not applicable" sentinel."""
    if value is None or not value.strip():
        return False
    return not_applicable_marker not in value


def clean_county_name(value: str) -> str:
    """Drop the trailing FARS county code, e.g. ``COOK (31)`` -> ``COOK``."""
    return COUNTY_CODE_RE.sub("", value).strip() or value.strip()
