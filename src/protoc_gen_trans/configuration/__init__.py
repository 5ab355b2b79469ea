"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import ConfigurationError, load_settings, parse_parameter
from .runtime_settings import GeneratorSettings

__all__ = [
    "GeneratorSettings",
    "ConfigurationError",
    "load_settings",
    "parse_parameter",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
