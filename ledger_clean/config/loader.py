from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Configuration loader.

Optional YAML file validated against the bundled ``config_schema.json``
(unknown keys rejected). Every key has a default, so running without any
config file is normal.

Lookup order (resolve_config_path):
    1. ``--config PATH``
    2. ``$LEDGER_CLEAN_CONFIG`` (``.env`` is loaded beforehand by the CLI)
    3. ``config/clean.yml`` in the working directory, if it exists
    4. built-in defaults
"""

__all__ = [
    "ConfigError",
    "LedgerConfig",
    "SCHEMA_PATH",
    "ENV_VAR",
    "DEFAULT_CONFIG_PATH",
    "resolve_config_path",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
ENV_VAR = "LEDGER_CLEAN_CONFIG"
DEFAULT_CONFIG_PATH = Path("config/clean.yml")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class LedgerConfig:
    encoding: str = "utf-8"
    delimiter: str = ","
    quote_char: str = '"'
    warning_preview_limit: int = 10
    fallback_year: int | None = None  # replaces the current year when none is detected
    diagnostics_log_dir: str | None = None  # JSONL diagnostics log off when None
    sheet_name: str | int | None = None  # workbook sheet; first sheet when None


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: schema file missing or unreadable, or data does not validate
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def resolve_config_path(explicit: str | Path | None = None) -> Path | None:
    """Config file to load, or None for defaults.

    A path named by flag or environment is returned even if it does not exist
    (load_config then fails); the implicit ``config/clean.yml`` only when present.
    """
    if explicit:
        return Path(explicit)
    env_value = os.getenv(ENV_VAR)
    if env_value:
        return Path(env_value)
    if DEFAULT_CONFIG_PATH.exists():
        return DEFAULT_CONFIG_PATH
    return None


def load_config(path: Path | None = None) -> LedgerConfig:
    """Load and validate ``path``; defaults when ``path`` is None.

    Raises:
        ConfigError: file missing, not YAML, not a mapping, or fails validation
    """
    if path is None:
        return LedgerConfig()
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"cannot read config {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    defaults = LedgerConfig()
    return LedgerConfig(
        encoding=data.get("encoding", defaults.encoding),
        delimiter=data.get("delimiter", defaults.delimiter),
        quote_char=data.get("quote_char", defaults.quote_char),
        warning_preview_limit=data.get("warning_preview_limit", defaults.warning_preview_limit),
        fallback_year=data.get("fallback_year"),
        diagnostics_log_dir=data.get("diagnostics_log_dir"),
        sheet_name=data.get("sheet_name"),
    )
