"""
BlobFS Configuration Loader

Configuration management:
- JSON configuration file loading
- Validation of the storage backend and log level
- Default value handling
- Runtime configuration updates by dotted key

Version: 1.0.0
"""

import json
import threading
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

from blobfs.exceptions import ConfigError
from blobfs.logger import Logger, LogLevel, get_logger


STORAGE_BACKENDS = ("memory", "file")


@dataclass
class StorageConfig:
    """Where the serialized tree lives."""
    key: str = "local-fs"
    backend: str = "memory"
    path: str = ".blobfs"


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "INFO"
    log_file: Optional[str] = None
    console_output: bool = True
    use_colors: bool = True


@dataclass
class Config:
    """Main configuration container."""
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader:
    """
    Configuration loader and manager.

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load('blobfs.json')
        >>> print(config.storage.key)
        local-fs
    """

    _instance: Optional['ConfigLoader'] = None
    _lock = threading.Lock()

    def __new__(cls) -> 'ConfigLoader':
        """Singleton pattern for configuration access."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._config = Config()
                cls._instance._loaded = False
            return cls._instance

    def load(self, config_path: str) -> Config:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Config object with loaded settings

        Raises:
            ConfigError: If the file cannot be loaded, parsed or validated
        """
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file: {e}")
        except OSError as e:
            raise ConfigError(f"Cannot read configuration file: {e}")

        self._config = self.parse(data)
        self._loaded = True
        get_logger('config').debug(
            "Configuration loaded",
            context={'path': str(path), 'backend': self._config.storage.backend}
        )
        return self._config

    @staticmethod
    def parse(data: Any) -> Config:
        """Parse configuration data into a validated Config object."""
        if not isinstance(data, dict):
            raise ConfigError("Configuration root must be a JSON object")

        config = Config()

        for section in ('storage', 'logging'):
            if section in data and not isinstance(data[section], dict):
                raise ConfigError(f"Section '{section}' must be a JSON object", key=section)

        if 'storage' in data:
            storage_data = data['storage']
            config.storage = StorageConfig(
                key=storage_data.get('key', config.storage.key),
                backend=storage_data.get('backend', config.storage.backend),
                path=storage_data.get('path', config.storage.path),
            )

        if 'logging' in data:
            log_data = data['logging']
            config.logging = LoggingConfig(
                level=log_data.get('level', config.logging.level),
                log_file=log_data.get('log_file', config.logging.log_file),
                console_output=log_data.get('console_output', config.logging.console_output),
                use_colors=log_data.get('use_colors', config.logging.use_colors),
            )

        validate(config)
        return config

    @property
    def config(self) -> Config:
        """Get the current configuration."""
        if not self._loaded:
            return Config()
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by dot-notation key.

        Args:
            key: Dot-notation key (e.g., 'storage.key')
            default: Default value if key not found
        """
        obj: Any = self._config

        for part in key.split('.'):
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                return default

        return obj

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value at runtime.

        Changes are not written back to disk.
        """
        parts = key.split('.')
        obj: Any = self._config

        for part in parts[:-1]:
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                raise ConfigError(f"Invalid configuration key: {key}", key=key)

        final_key = parts[-1]
        if not hasattr(obj, final_key):
            raise ConfigError(f"Invalid configuration key: {key}", key=key)

        setattr(obj, final_key, value)
        self._loaded = True

    def reset(self) -> None:
        """Drop loaded settings and return to defaults."""
        self._config = Config()
        self._loaded = False

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            section.name: {
                f.name: getattr(getattr(self._config, section.name), f.name)
                for f in fields(getattr(self._config, section.name))
            }
            for section in fields(self._config)
        }


def validate(config: Config) -> None:
    """Raise ConfigError if any setting is out of range."""
    if config.storage.backend not in STORAGE_BACKENDS:
        raise ConfigError(
            f"Unknown storage backend: {config.storage.backend}",
            key="storage.backend"
        )
    if not config.storage.key:
        raise ConfigError("Storage key must not be empty", key="storage.key")
    try:
        LogLevel.from_name(config.logging.level)
    except ValueError as e:
        raise ConfigError(str(e), key="logging.level")


def setup_logging(config: Optional[Config] = None) -> None:
    """Initialize the logging system from the logging section."""
    if config is None:
        config = get_config()
    Logger.initialize(
        level=LogLevel.from_name(config.logging.level),
        log_file=config.logging.log_file,
        use_colors=config.logging.use_colors,
        console_output=config.logging.console_output,
    )


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Config object with current settings
    """
    return ConfigLoader().config
