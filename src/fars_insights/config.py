from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_EXCLUDED_LABELS = ["Unknown", "Not Reported"]


class ColumnsConfig(BaseModel):
    incident_id: str = "CRASH_NUM1"
    year: str = "YEAR"
    state: str = "STATENAME"
    city: str = "CITYNAME"
    county: str = "COUNTYNAME"
    month: str = "MONTHNAME"
    day_of_week: str = "DAY_WEEKNAME"
    hour_label: str = "HOURNAME"
    gender: str = "PBSEXNAME"
    person_type: str = "PBPTYPENAME"
    weather: str = "WEATHERNAME"
    light_condition: str = "LGT_CONDNAME"
    road_type: str = "FUNC_SYSNAME"
    rural_urban: str = "RUR_URBNAME"
    age: str = "PBAGE"
    person_number: str = "PER_NO"


class PlacesConfig(BaseModel):
    not_applicable_marker: str = Field(default="NOT APPLICABLE", min_length=1)
    strip_county_code: bool = True


class ViewsConfig(BaseModel):
    min_city_crashes: int = Field(default=5, ge=0)
    scorecard_limit: int = Field(default=50, ge=1)
    timeline_min_city_crashes: int = Field(default=10, ge=0)
    top_n: int = Field(default=8, ge=1)
    trend_threshold_pct: float = Field(default=5.0, ge=0.0)
    excluded_labels: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDED_LABELS))


class InputConfig(BaseModel):
    source: str | None = None
    timeout_seconds: float = Field(default=30.0, gt=0.0)


class OutputsConfig(BaseModel):
    tables_format: Literal["parquet", "csv"] = "parquet"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    columns: ColumnsConfig = Field(default_factory=ColumnsConfig)
    places: PlacesConfig = Field(default_factory=PlacesConfig)
    views: ViewsConfig = Field(default_factory=ViewsConfig)
    input: InputConfig = Field(default_factory=InputConfig)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")
SOURCE_ENV_VAR = "FARS_INSIGHTS_SOURCE"


def is_remote_source(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _resolve_source(source: str | None, base_dir: Path) -> str | None:
    if not source:
        return None
    if is_remote_source(source):
        return source
    candidate = Path(source)
    if candidate.is_absolute():
        return str(candidate)
    return str((base_dir / candidate).resolve())


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    config = AppConfig.model_validate(data)
    base_dir = path.resolve().parent

    config.input.source = _resolve_source(config.input.source, base_dir) or os.getenv(
        SOURCE_ENV_VAR
    )
    return config
