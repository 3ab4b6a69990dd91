"""Typed configuration for ingest runs."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import ujson as json
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigError
from .graph import DEFAULT_MAX_DEPTH

OutputFormat = Literal["json", "yaml", "tree", "debug"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class IngestConfig(BaseModel):
    """Options controlling resolution and presentation."""

    output: OutputFormat = "json"
    indent: int = Field(default=2, ge=0)
    # raise instead of dropping parents that are referenced but never defined
    strict_parents: bool = False
    max_depth: int | None = Field(default=DEFAULT_MAX_DEPTH, gt=0)
    log_level: LogLevel = "WARNING"

    model_config = {"extra": "forbid"}

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value

    def merged(self, **overrides: Any) -> IngestConfig:
        """Return a copy with every non-None override applied."""
        updates = {key: value for key, value in overrides.items() if value is not None}
        data = self.model_dump()
        data.update(updates)
        return IngestConfig(**data)


def load_ingest_config(path: str | Path) -> IngestConfig:
    """Load a config from YAML or JSON."""
    path = Path(path)
    data: Any
    try:
        text = path.read_text()
        if path.suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (OSError, yaml.YAMLError, ValueError) as exc:
        raise ConfigError(f"Unreadable config {path}: {exc}") from exc
    if data is None:
        return IngestConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config {path}: expected a mapping")
    try:
        return IngestConfig(**data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config {path}") from exc


def save_ingest_config(config: IngestConfig, path: str | Path) -> None:
    """Persist a config as YAML or JSON based on file suffix."""
    path = Path(path)
    if path.suffix in {".yaml", ".yml"}:
        path.write_text(yaml.safe_dump(config.model_dump(mode="python"), sort_keys=False))
    else:
        path.write_text(json.dumps(config.model_dump(mode="python"), indent=2))
