from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from pathlib import Path
from typing import Any

import pandas as pd

from fars_insights.config import AppConfig, is_remote_source
from fars_insights.records import IncidentRecord, record_from_properties

LOGGER = logging.getLogger(__name__)


class LoadError(RuntimeError):
    """The crash feature collection could not be fetched or parsed."""


def _read_payload(source: str, timeout_seconds: float) -> str:
    if is_remote_source(source):
        try:
            with urllib.request.urlopen(source, timeout=timeout_seconds) as response:
                return response.read().decode("utf-8")
        except (urllib.error.URLError, TimeoutError, UnicodeDecodeError) as exc:
            raise LoadError(f"Failed to fetch crash data from {source}: {exc}") from exc

    path = Path(source)
    try:
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadError(f"Failed to read crash data from {path}: {exc}") from exc


def parse_feature_collection(payload: str) -> list[dict[str, Any]]:
    """Return the ``properties`` mapping of every feature in a GeoJSON document."""
    try:
        document = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise LoadError(f"Crash data is not valid JSON: {exc}") from exc

    if not isinstance(document, dict) or not isinstance(document.get("features"), list):
        raise LoadError("Crash data must be a GeoJSON object with a 'features' list")

    properties: list[dict[str, Any]] = []
    for feature in document["features"]:
        raw = feature.get("properties") if isinstance(feature, dict) else None
        properties.append(dict(raw) if isinstance(raw, dict) else {})
    return properties


def load_feature_collection(source: str, timeout_seconds: float = 30.0) -> list[dict[str, Any]]:
    properties = parse_feature_collection(_read_payload(source, timeout_seconds))
    LOGGER.info("Loaded %d crash features from %s", len(properties), source)
    return properties


def load_records(source: str | None, config: AppConfig) -> list[IncidentRecord]:
    """Load a feature collection and map each feature onto an ``IncidentRecord``."""
    if not source:
        raise ValueError("A crash data source is required: pass --source or set input.source")
    properties = load_feature_collection(source, timeout_seconds=config.input.timeout_seconds)
    return [record_from_properties(item, config.columns) for item in properties]


def records_frame(records: list[IncidentRecord]) -> pd.DataFrame:
    columns = list(IncidentRecord.__dataclass_fields__)
    return pd.DataFrame(
        [[getattr(record, column) for column in columns] for record in records],
        columns=columns,
    )
