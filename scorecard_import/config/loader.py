from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.validation import Facility, ValidationOverrides

"""Config loader.

Responsibilities:
- Load the YAML config (default config/scorecard_import.yml, or the path in
  $SCORECARD_IMPORT_CONFIG)
- Validate it against the bundled JSON schema
- Apply defaults for optional keys
"""

__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATH",
    "ConfigError",
    "ImportConfig",
    "load_config",
    "resolve_config_path",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/scorecard_import.yml")
CONFIG_ENV_VAR = "SCORECARD_IMPORT_CONFIG"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ImportConfig:
    source_directory: str
    facilities: list[Facility] | None = None  # None: skip facility matching
    default_year: int | None = None
    require_year: bool = False
    facility_match_threshold: float = 0.5
    mismatch_threshold: float = 2.0
    date_overrides: dict[str, dict[str, int]] = field(default_factory=dict)  # filename -> {month, year}
    facility_overrides: dict[str, dict[str, Any]] = field(default_factory=dict)  # filename -> {id, name}

    def overrides_for(self, filename: str) -> ValidationOverrides:
        """Merged date and facility overrides configured for one file."""
        data: dict[str, Any] = {}
        data.update(self.date_overrides.get(filename, {}))
        data.update(self.facility_overrides.get(filename, {}))
        return ValidationOverrides.from_dict(data)


def resolve_config_path(path: Path | None = None) -> Path:
    """Explicit path, else $SCORECARD_IMPORT_CONFIG, else the default location."""
    if path is not None:
        return path
    env = os.getenv(CONFIG_ENV_VAR)
    return Path(env) if env else DEFAULT_CONFIG_PATH


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: the schema file is missing or unreadable, or the data
            fails validation (missing keys, wrong types, unknown keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path)
        suffix = f" (at {location})" if location else ""
        raise ConfigError(f"config validation failed: {e.message}{suffix}") from e


def load_config(path: Path | None = None) -> ImportConfig:
    path = resolve_config_path(path)
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    raw_facilities = data.get("facilities")
    facilities = (
        [Facility(id=f["id"], name=f["name"]) for f in raw_facilities]
        if raw_facilities is not None
        else None
    )
    return ImportConfig(
        source_directory=data["source_directory"],
        facilities=facilities,
        default_year=data.get("default_year"),
        require_year=data.get("require_year", False),
        facility_match_threshold=float(data.get("facility_match_threshold", 0.5)),
        mismatch_threshold=float(data.get("mismatch_threshold", 2.0)),
        date_overrides=data.get("date_overrides") or {},
        facility_overrides=data.get("facility_overrides") or {},
    )
