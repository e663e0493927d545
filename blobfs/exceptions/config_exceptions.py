"""
Configuration Exceptions

Version: 1.0.0
"""

from typing import Optional, Any


class ConfigError(Exception):
    """
    Configuration could not be loaded or is invalid.

    Example:
        >>> raise ConfigError("Unknown storage backend: redis", key="storage.backend")
    """

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.key = key
        self.error_code = 5001
        self.context = context or {}
        if key is not None:
            self.context["key"] = key

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.key is not None:
            base = f"{base} (key={self.key})"
        return base
