from __future__ import annotations

UNKNOWN_AGE_BUCKET = "Unknown"

# Half-open [lower, upper) bounds; the last bucket is open-ended.
AGE_BUCKET_BOUNDS: tuple[tuple[str, float, float], ...] = (
    ("Under 16", float("-inf"), 16),
    ("16-24", 16, 25),
    ("25-34", 25, 35),
    ("35-44", 35, 45),
    ("45-54", 45, 55),
    ("55-64", 55, 65),
    ("65-74", 65, 75),
    ("75+", 75, float("inf")),
)


def age_bucket(age: int | None) -> str:
    if age is None:
        return UNKNOWN_AGE_BUCKET
    for label, lower, upper in AGE_BUCKET_BOUNDS:
        if lower <= age < upper:
            return label
    return UNKNOWN_AGE_BUCKET
