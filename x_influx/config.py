"""
Configuration models and YAML I/O for x-influx.

This module defines the Pydantic models that map 1:1 to an optional
``x-influx.yaml`` file, plus helpers for loading and saving it.  The
command line builds the same models, so a run is fully described by
one ``ImportConfig`` regardless of where the values came from.

Key models:
- ImportConfig: Top-level config (database + layout + source).
- DatabaseConfig: InfluxDB endpoint, credentials, database and series.
- LayoutConfig: Column names and timestamp format (-> ``Layout``).
- SourceConfig: File or interactive mode, files, delimiter, skip rows.

Key functions:
- load_config(path) -> ImportConfig: Load and validate from YAML.
- save_config(config, path): Serialize to YAML.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from x_influx.exceptions import ConfigValidationError
from x_influx.layout import DEFAULT_TIME_FORMAT, Layout

logger = logging.getLogger(__name__)


class DatabaseConfig(BaseModel):
    """Where and as whom to write."""

    server: str = Field("http://localhost:8086", description="InfluxDB base URL")
    user: str = "test"
    password: str = ""
    database: str = "test"
    series: str = Field("series", description="Name of the measurement series")


class LayoutConfig(BaseModel):
    """Column names for measure, time and tags, plus the time format."""

    measure: str = Field("data", description="Name of the measurement value column")
    tags: list[str] = Field(
        default_factory=list,
        description="Tag column names; a comma separated string is accepted",
    )
    time: str = Field("timestamp", description="Name of the timestamp column")
    tformat: str = Field(DEFAULT_TIME_FORMAT, description="strftime timestamp pattern")

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple)):
            return [str(t).strip() for t in value if str(t).strip()]
        return value

    def to_layout(self) -> Layout:
        return Layout(
            measure=self.measure,
            tags=tuple(self.tags),
            time=self.time,
            tformat=self.tformat,
        )


class SourceConfig(BaseModel):
    """Input source settings."""

    mode: Literal["file", "interactive"] = "file"
    files: list[str] = Field(default_factory=list)
    delimiter: str = Field(",", description="Single-character column delimiter")
    skip_rows: int = Field(0, ge=0, description="Lines to drop before the header")
    encoding: str = "utf-8-sig"

    @field_validator("delimiter")
    @classmethod
    def _single_char(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError(f"delimiter must be a single character, got {value!r}")
        return value

    @model_validator(mode="after")
    def _check_files(self) -> SourceConfig:
        if self.mode == "file" and not self.files:
            raise ValueError("File mode needs at least one input file.")
        return self


class ImportConfig(BaseModel):
    """Top-level configuration for one x-influx run."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    source: SourceConfig = Field(default_factory=lambda: SourceConfig(mode="interactive"))
    verbose: bool = False


def load_config(path: str | Path) -> ImportConfig:
    """Load and validate a YAML config file into an ImportConfig.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigValidationError: If the file is empty, not valid YAML or not
            a mapping.
        pydantic.ValidationError: If the YAML content fails schema validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f)
        except (yaml.YAMLError, UnicodeDecodeError) as exc:
            raise ConfigValidationError(
                f"Config file is not valid YAML: {path}: {exc}"
            ) from exc
    if raw is None:
        raise ConfigValidationError(f"Config file is empty: {path}")
    if not isinstance(raw, dict):
        raise ConfigValidationError(f"Config file must contain a mapping: {path}")
    logger.info("Loaded config from %s", path)
    return ImportConfig.model_validate(raw)


def save_config(config: ImportConfig, path: str | Path) -> None:
    """Serialize an ImportConfig to YAML."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        f.write("# x-influx configuration\n\n")
        yaml.dump(
            data,
            f,
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
        )
    logger.info("Saved config to %s", path)
