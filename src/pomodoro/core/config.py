"""Configuration management for the Pomodoro timer."""

import copy
from pathlib import Path
from typing import Any, Optional

import yaml  # type: ignore[import-untyped]
from jsonschema import ValidationError, validate  # type: ignore[import-untyped]


def get_default_config_path() -> Path:
    return Path.home() / ".pomodoro" / "config.yml"


class ConfigManager:
    """Manage application configuration."""

    DEFAULT_CONFIG = {
        "version": "1.0",
        "timer": {
            "work_minutes": 25,
            "rest_minutes": 5,
        },
        "daemon": {
            "socket_path": None,
        },
        "notifications": {
            "enabled": True,
            "backend": "auto",
            "timeout": 5,
        },
        "advanced": {
            "log_level": "INFO",
        },
    }

    CONFIG_SCHEMA = {
        "type": "object",
        "properties": {
            "version": {"type": "string"},
            "timer": {
                "type": "object",
                "properties": {
                    "work_minutes": {"type": "integer", "minimum": 1, "maximum": 1440},
                    "rest_minutes": {"type": "integer", "minimum": 1, "maximum": 1440},
                },
            },
            "daemon": {
                "type": "object",
                "properties": {
                    "socket_path": {"type": ["string", "null"]},
                },
            },
            "notifications": {
                "type": "object",
                "properties": {
                    "enabled": {"type": "boolean"},
                    "backend": {"type": "string", "enum": ["auto", "plyer", "notify-send"]},
                    "timeout": {"type": "integer", "minimum": 1, "maximum": 60},
                },
            },
            "advanced": {
                "type": "object",
                "properties": {
                    "log_level": {
                        "type": "string",
                        "enum": ["DEBUG", "INFO", "WARNING", "ERROR"],
                    },
                },
            },
        },
        "required": ["version"],
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration manager.

        Args:
            config_path: Path to config file. Defaults to ~/.pomodoro/config.yml
        """
        if config_path is None:
            config_path = get_default_config_path()
        self.config_path = config_path
        self._config: dict[str, Any] = {}
        self._load_or_create()

    def _load_or_create(self) -> None:
        """Load existing config or create default."""
        if self.config_path.exists():
            with open(self.config_path, encoding="utf-8") as f:
                loaded_config = yaml.safe_load(f) or {}
            if not isinstance(loaded_config, dict):
                loaded_config = {"version": None}
            self._config = self._merge_with_defaults(loaded_config)
            try:
                self.validate()
            except ValueError as e:
                # Keep the broken file around for the user and fall back to defaults
                backup_path = self.config_path.with_suffix(".yml.backup")
                self.config_path.rename(backup_path)
                self._config = copy.deepcopy(self.DEFAULT_CONFIG)
                self.save()
                raise ValueError(
                    f"Config validation failed, backed up to {backup_path}. "
                    f"Using defaults. Error: {e}"
                )
        else:
            self._config = copy.deepcopy(self.DEFAULT_CONFIG)
            self.save()

    def _merge_with_defaults(self, config: dict[str, Any]) -> dict[str, Any]:
        result = copy.deepcopy(self.DEFAULT_CONFIG)
        self._deep_merge(result, config)
        return result

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> None:
        """Deep merge override into base dictionary (in-place)."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Args:
            key: Configuration key in dot notation (e.g., 'timer.work_minutes')
            default: Default value if key not found

        Returns:
            Configuration value or default

        Example:
            >>> config.get('timer.work_minutes')
            25
            >>> config.get('nonexistent.key', 'default')
            'default'
        """
        keys = key.split(".")
        value: Any = self._config
        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default
            if value is None:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """Set configuration value using dot notation.

        Args:
            key: Configuration key in dot notation
            value: Value to set

        Raises:
            ValueError: If configuration is invalid after setting
        """
        previous = copy.deepcopy(self._config)
        keys = key.split(".")
        config = self._config
        for k in keys[:-1]:
            if not isinstance(config.get(k), dict):
                config[k] = {}
            config = config[k]
        config[keys[-1]] = value
        try:
            self.validate()
        except ValueError:
            self._config = previous
            raise
        self.save()

    def validate(self) -> bool:
        """Validate configuration against schema.

        Returns:
            True if valid

        Raises:
            ValueError: If configuration is invalid
        """
        try:
            validate(instance=self._config, schema=self.CONFIG_SCHEMA)
            return True
        except ValidationError as e:
            raise ValueError(f"Invalid configuration: {e.message}")

    def save(self) -> None:
        """Save configuration to file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.dump(
                self._config, f, default_flow_style=False, sort_keys=False, allow_unicode=True
            )

    def reset(self) -> None:
        """Reset to default configuration."""
        self._config = copy.deepcopy(self.DEFAULT_CONFIG)
        self.save()

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._config)

    @property
    def work_seconds(self) -> int:
        return int(self.get("timer.work_minutes", 25)) * 60

    @property
    def rest_seconds(self) -> int:
        return int(self.get("timer.rest_minutes", 5)) * 60

    @property
    def socket_path(self) -> Optional[Path]:
        value = self.get("daemon.socket_path")
        return Path(value).expanduser() if value else None
