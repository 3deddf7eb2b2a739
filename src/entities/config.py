"""Configuration management for entities using YAML files."""

from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger()

CONFIG_DIRNAME = ".entities"
CONFIG_FILENAME = "config.yaml"

DEFAULTS: dict[str, str] = {
    "database.url": "sqlite:///entities.db",
    "entities.log.sql": "0",
    "entities.strict_duplicates": "true",
}

TRUE_VALUES = {"1", "true", "yes", "on"}


class Config:
    """Configuration stored in YAML files.

    Local config lives in ``.entities/config.yaml`` under the current
    directory, global config in ``~/.entities/config.yaml``. Reads check the
    local file, then the global one, then the built-in defaults.
    """

    def __init__(self, use_global: bool = False, config_dir: Path | None = None) -> None:
        """Initialize configuration manager.

        Args:
            use_global: If True, use global config only. If False, use local config with global fallback.
            config_dir: Custom directory to store the config file (overrides use_global)
        """
        if config_dir is not None:
            self.config_dir = Path(config_dir)
        elif use_global:
            self.config_dir = Path.home() / CONFIG_DIRNAME
        else:
            self.config_dir = Path.cwd() / CONFIG_DIRNAME
        self.is_global = use_global
        self.config_file = self.config_dir / CONFIG_FILENAME

        self._config: dict[str, Any] = self._read(self.config_file)

        self._global_config: dict[str, Any] = {}
        if not self.is_global:
            global_config_file = Path.home() / CONFIG_DIRNAME / CONFIG_FILENAME
            if global_config_file.exists() and global_config_file != self.config_file:
                try:
                    self._global_config = self._read(global_config_file)
                except ValueError as e:
                    logger.warning("Failed to load global config", error=str(e))

        logger.debug("Config initialized", config_file=str(self.config_file), is_global=self.is_global)

    @staticmethod
    def _read(path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}

        try:
            with open(path, "r") as f:
                return yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error("Failed to load config", path=str(path), error=str(e))
            raise ValueError(f"Failed to load config from {path}: {e}") from e

    def _save(self) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        try:
            with open(self.config_file, "w") as f:
                yaml.safe_dump(self._config, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            logger.error("Failed to save config", error=str(e))
            raise ValueError(f"Failed to save config to {self.config_file}: {e}") from e

    def get(self, key: str, default: str | None = None) -> str | None:
        """Get a configuration value.

        Args:
            key: Configuration key
            default: Returned when the key is set nowhere; falls back to the built-in default

        Returns:
            Configuration value or default
        """
        if key in self._config:
            return self._config[key]
        if not self.is_global and key in self._global_config:
            return self._global_config[key]
        if default is not None:
            return default
        return DEFAULTS.get(key)

    def get_bool(self, key: str) -> bool:
        return str(self.get(key) or "").strip().lower() in TRUE_VALUES

    @property
    def data_directory(self) -> Path:
        """Directory for files written at runtime, such as the SQL log."""
        value = self.get("datadirectory")
        return Path(value) if value else self.config_dir

    def set(self, key: str, value: str) -> None:
        logger.debug("Setting config value", key=key)
        self._config[key] = value
        self._save()

    def unset(self, key: str) -> None:
        logger.debug("Unsetting config value", key=key)
        if key in self._config:
            del self._config[key]
            self._save()

    def source(self, key: str) -> str | None:
        """Return where the value of ``key`` comes from: "local", "global" or "default"."""
        if key in self._config:
            return "global" if self.is_global else "local"
        if not self.is_global and key in self._global_config:
            return "global"
        if key in DEFAULTS:
            return "default"
        return None

    def list(self) -> dict[str, str]:
        """List all configuration settings, defaults included.

        Local values take precedence over global ones.
        """
        merged = dict(DEFAULTS)
        if not self.is_global:
            merged.update(self._global_config)
        merged.update(self._config)
        return merged


def get_config(use_global: bool = False) -> Config:
    """Get a configuration instance.

    Args:
        use_global: If True, return global config. If False, return local config with global fallback.

    Returns:
        Config instance
    """
    return Config(use_global=use_global)
