"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import GeneratorSettings

CONFIG_PARAMETER = "config"

_STRING_KEYS = ("annotation_extension", "well_known_prefix", "output_suffix", "runtime_module")
_SEQUENCE_KEYS = ("excluded_file_fragments",)


class ConfigurationError(Exception):
    """Raised when generator settings are invalid."""


def load_settings(
    parameter: str | None = None,
    config_path: Path | str | None = None,
) -> GeneratorSettings:
    """Resolve generator settings from a YAML file and a protoc parameter string.

    Args:
      parameter: protoc plugin parameter (``key=value,key=value``). A ``config``
        entry names a YAML settings file.
      config_path: YAML settings file given outside of protoc.

    Returns:
      Settings where parameter values override file values, and file values
      override defaults.

    Raises:
      ConfigurationError: If the file or any value is invalid.
    """
    overrides = parse_parameter(parameter)
    file_reference = overrides.pop(CONFIG_PARAMETER, None) or config_path
    values: dict[str, Any] = {}
    if file_reference:
        values.update(_load_config_file(Path(file_reference)))
    values.update(overrides)
    return _build_settings(values)


def parse_parameter(parameter: str | None) -> dict[str, Any]:
    """Split a protoc plugin parameter string into settings values."""
    values: dict[str, Any] = {}
    if not parameter or not parameter.strip():
        return values
    for item in parameter.split(","):
        stripped = item.strip()
        if not stripped:
            continue
        key, separator, value = stripped.partition("=")
        if not separator:
            raise ConfigurationError(f"Plugin parameter '{stripped}' must use key=value.")
        key = key.strip()
        if key in _SEQUENCE_KEYS:
            values[key] = [fragment for fragment in value.split(":") if fragment.strip()]
        else:
            values[key] = value.strip()
    return values


def _load_config_file(path: Path) -> Mapping[str, Any]:
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        return {}
    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")
    return parsed


def _build_settings(values: Mapping[str, Any]) -> GeneratorSettings:
    unknown = sorted(set(values) - set(_STRING_KEYS) - set(_SEQUENCE_KEYS))
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

    kwargs: dict[str, Any] = {}
    for key in _STRING_KEYS:
        if key in values:
            kwargs[key] = _require_non_empty_string(values[key], key)
    if "excluded_file_fragments" in values:
        kwargs["excluded_file_fragments"] = _normalize_string_sequence(
            values["excluded_file_fragments"], "excluded_file_fragments"
        )

    output_suffix = kwargs.get("output_suffix")
    if output_suffix is not None and not output_suffix.endswith(".py"):
        raise ConfigurationError("output_suffix must end with '.py'.")
    well_known_prefix = kwargs.get("well_known_prefix")
    if well_known_prefix is not None and not well_known_prefix.startswith("."):
        raise ConfigurationError(
            "well_known_prefix must be a fully-qualified name starting with '.'."
        )

    return GeneratorSettings(**kwargs)


def _normalize_string_sequence(value: Any, field_name: str) -> tuple[str, ...]:
    if isinstance(value, str):
        stripped = value.strip()
        return (stripped,) if stripped else ()
    if isinstance(value, Sequence):
        normalized = []
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError(f"{field_name} entries must be strings.")
            stripped = item.strip()
            if stripped:
                normalized.append(stripped)
        return tuple(normalized)
    raise ConfigurationError(f"{field_name} must be a string or list of strings.")


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped
