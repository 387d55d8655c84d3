"""Configuration management for photoprep."""

from photoprep.config.manager import ConfigManager, ConfigError
from photoprep.config.defaults import DEFAULT_CONFIG
from photoprep.config.catalog import OutputCatalog, OutputFormat, OutputSize

__all__ = [
    "ConfigManager",
    "ConfigError",
    "DEFAULT_CONFIG",
    "OutputCatalog",
    "OutputFormat",
    "OutputSize",
]
