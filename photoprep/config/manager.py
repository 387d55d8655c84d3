"""Configuration manager for photoprep."""

import copy
import logging
from typing import Any, Dict, Optional

from photoprep.config.defaults import DEFAULT_CONFIG, SUPPORTED_FORMATS
from photoprep.exceptions import PhotoPrepError

logger = logging.getLogger(__name__)


class ConfigError(PhotoPrepError):
    """Exception raised for configuration errors."""
    pass


class ConfigManager:
    """Holds run configuration and provides dot-notation access.

    Configuration is assembled in-process from ``DEFAULT_CONFIG`` and any
    overrides supplied by the caller (usually the CLI). Nothing is read from
    or written to disk.

    Attributes:
        config: Dictionary containing all configuration values

    Examples:
        >>> config = ConfigManager.from_overrides({"processing": {"workers": 2}})
        >>> config.get("processing.workers")
        2
        >>> config.get("manifest.genre")
        'Travel Photography'
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize configuration manager.

        Args:
            config: Configuration dictionary (defaults used if not provided)
        """
        self.config = config if config is not None else copy.deepcopy(DEFAULT_CONFIG)

    @classmethod
    def from_overrides(
        cls,
        overrides: Optional[Dict[str, Any]] = None,
        validate: bool = True
    ) -> "ConfigManager":
        """Build configuration from defaults plus overrides.

        Args:
            overrides: Nested dictionary of values that replace defaults
            validate: Whether to validate the merged configuration

        Returns:
            ConfigManager instance

        Raises:
            ConfigError: If the merged configuration is invalid
        """
        config = cls._merge_with_defaults(overrides or {})
        if validate:
            cls._validate(config)
        return cls(config)

    @staticmethod
    def _merge_with_defaults(config: Dict[str, Any]) -> Dict[str, Any]:
        """Merge overrides with defaults.

        Override values take precedence over defaults. Lists are replaced,
        never concatenated.

        Args:
            config: Override dictionary

        Returns:
            Merged configuration with defaults
        """
        def deep_merge(base: dict, updates: dict) -> dict:
            """Recursively merge two dictionaries, with updates taking precedence."""
            result = copy.deepcopy(base)
            for key, value in updates.items():
                if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                    result[key] = deep_merge(result[key], value)
                else:
                    result[key] = copy.deepcopy(value)
            return result

        return deep_merge(DEFAULT_CONFIG, config)

    @staticmethod
    def _validate(config: Dict[str, Any]) -> None:
        """Validate output catalog and processing values.

        Args:
            config: Configuration dictionary

        Raises:
            ConfigError: If any value is unusable
        """
        problems = []

        sizes = ConfigManager._get_nested_value(config, "output.sizes") or []
        if not sizes:
            problems.append("output.sizes must list at least one size")
        labels = set()
        for entry in sizes:
            label = entry.get("label") if isinstance(entry, dict) else None
            px = entry.get("px") if isinstance(entry, dict) else None
            if not label:
                problems.append(f"output size without a label: {entry!r}")
            elif label in labels:
                problems.append(f"duplicate output size label: {label}")
            else:
                labels.add(label)
            if not isinstance(px, int) or isinstance(px, bool) or px < 1:
                problems.append(f"output size {label!r} needs a positive pixel value")

        formats = ConfigManager._get_nested_value(config, "output.formats") or []
        if not formats:
            problems.append("output.formats must list at least one format")
        for entry in formats:
            name = entry.get("format") if isinstance(entry, dict) else None
            if name not in SUPPORTED_FORMATS:
                problems.append(
                    f"unsupported output format {name!r} "
                    f"(supported: {', '.join(sorted(SUPPORTED_FORMATS))})"
                )

        if not ConfigManager._get_nested_value(config, "output.suffix"):
            problems.append("output.suffix must not be empty")

        workers = ConfigManager._get_nested_value(config, "processing.workers")
        if not isinstance(workers, int) or isinstance(workers, bool) or workers < 1:
            problems.append("processing.workers must be a positive integer")

        if problems:
            raise ConfigError(
                "Invalid configuration:\n"
                + "\n".join(f"  - {problem}" for problem in problems)
            )

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "processing.workers")
            default: Default value to return if key not found

        Returns:
            Configuration value or default

        Examples:
            >>> config.get("manifest.display_width")
            2000
            >>> config.get("nonexistent.key", "default_value")
            'default_value'
        """
        value = self._get_nested_value(self.config, key)
        return value if value is not None else default

    def set(self, key: str, value: Any) -> None:
        """Set configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "processing.workers")
            value: Value to set
        """
        self._set_nested_value(self.config, key, value)

    @staticmethod
    def _get_nested_value(config: Dict[str, Any], key: str) -> Any:
        """Get value from nested dictionary using dot notation.

        Args:
            config: Configuration dictionary
            key: Dot-separated key path

        Returns:
            Value at key path, or None if not found
        """
        value = config
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return None
        return value

    @staticmethod
    def _set_nested_value(config: Dict[str, Any], key: str, value: Any) -> None:
        """Set value in nested dictionary using dot notation."""
        keys = key.split(".")
        current = config

        for k in keys[:-1]:
            if k not in current or not isinstance(current[k], dict):
                current[k] = {}
            current = current[k]

        current[keys[-1]] = value

    def to_dict(self) -> Dict[str, Any]:
        """Return a deep copy of the configuration dictionary."""
        return copy.deepcopy(self.config)

    def __repr__(self) -> str:
        """Return string representation of configuration."""
        return f"<ConfigManager workers={self.get('processing.workers')}>"
