from __future__ import annotations

import codecs
import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load YAML config (config/lynx.yml by default)
- Validate against config_schema.json (unknown keys rejected)
- Apply defaults for every missing key
- Apply LYNX_* environment overrides (after .env has been loaded by the CLI)
"""

__all__ = [
    "ConfigError",
    "ParserConfig",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
    "apply_env_overrides",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/lynx.yml")

ENV_SOURCE_PATH = "LYNX_SOURCE_PATH"
ENV_OUTPUT_PATH = "LYNX_OUTPUT_PATH"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ParserConfig:
    source_path: str = "./data"
    file_extension: str = ".txt"
    encoding: str = "utf-8"
    replacement_char: str = "?"
    delimiter: str = "\t"
    header_keywords: tuple[str, ...] = ("RT", "Area", "Name")
    fuzzy_tolerance: float = 0.1
    allow_single_section: bool = True
    na_strings: tuple[str, ...] = ("NA",)
    max_workers: int = 1
    error_log_dir: str | None = None  # None = no JSON Lines error log
    output_path: str | None = None


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails validation (wrong types, unknown keys, ...).
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


def _check_encoding(name: str) -> None:
    try:
        codecs.lookup(name)
    except LookupError as e:
        raise ConfigError(f"unknown encoding: {name}") from e


def load_config(path: Path | None = None, *, required: bool = False) -> ParserConfig:
    """Load the parser configuration.

    Args:
        path: YAML file to read (defaults to config/lynx.yml)
        required: When False a missing file yields the built-in defaults;
            when True a missing file is a ConfigError.

    Returns:
        ParserConfig with defaults applied for absent keys
    """
    path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not path.exists():
        if required:
            raise ConfigError(f"config file not found: {path}")
        return ParserConfig()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    defaults = ParserConfig()
    encoding = data.get("encoding", defaults.encoding)
    _check_encoding(encoding)
    return ParserConfig(
        source_path=data.get("source_path", defaults.source_path),
        file_extension=data.get("file_extension", defaults.file_extension),
        encoding=encoding,
        replacement_char=data.get("replacement_char", defaults.replacement_char),
        delimiter=data.get("delimiter", defaults.delimiter),
        header_keywords=tuple(data.get("header_keywords", defaults.header_keywords)),
        fuzzy_tolerance=float(data.get("fuzzy_tolerance", defaults.fuzzy_tolerance)),
        allow_single_section=data.get("allow_single_section", defaults.allow_single_section),
        na_strings=tuple(data.get("na_strings", defaults.na_strings)),
        max_workers=data.get("max_workers", defaults.max_workers),
        error_log_dir=data.get("error_log_dir", defaults.error_log_dir),
        output_path=data.get("output_path", defaults.output_path),
    )


def apply_env_overrides(config: ParserConfig) -> ParserConfig:
    """Override source/output paths from LYNX_SOURCE_PATH / LYNX_OUTPUT_PATH."""
    changes: dict[str, Any] = {}
    source = os.getenv(ENV_SOURCE_PATH)
    if source:
        changes["source_path"] = source
    output = os.getenv(ENV_OUTPUT_PATH)
    if output:
        changes["output_path"] = output
    return replace(config, **changes) if changes else config
