"""
Storage Backend Module

The key-value medium the node store persists into. Every backend offers
the same three synchronous, whole-value operations:

    get(key) -> str | None
    set(key, value)
    remove(key)

Version: 1.0.0
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Iterator
from urllib.parse import quote, unquote

from blobfs.config import Config, get_config
from blobfs.exceptions import StorageError, ConfigError
from blobfs.logger import get_logger


class StorageBackend(ABC):
    """Synchronous string store addressed by key."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value under key, or None if absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Replace the value under key."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete the value under key. Removing an absent key is a no-op."""

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


class MemoryStorage(StorageBackend):
    """
    Dict-backed storage.

    Example:
        >>> storage = MemoryStorage()
        >>> storage.set('local-fs', '[]')
        >>> storage.get('local-fs')
        '[]'
    """

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StorageError(key, operation="set", reason="value must be a string")
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def keys(self) -> Iterator[str]:
        return iter(list(self._values))

    def __len__(self) -> int:
        return len(self._values)


class FileStorage(StorageBackend):
    """
    Stores each key as one UTF-8 file inside a directory.

    Keys are percent-encoded so any string is a valid key.
    Writes go to a temporary sibling first and are renamed into place.
    """

    SUFFIX = '.blob'

    def __init__(self, root: str):
        self._root = Path(root)
        self._logger = get_logger('storage')

    @property
    def root(self) -> Path:
        return self._root

    def _path_for(self, key: str) -> Path:
        return self._root / (quote(key, safe='') + self.SUFFIX)

    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            return path.read_text(encoding='utf-8')
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(key, operation="get", reason=str(e)) from e

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StorageError(key, operation="set", reason="value must be a string")
        path = self._path_for(key)
        tmp_path = path.with_name(path.name + '.tmp')
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(value, encoding='utf-8')
            tmp_path.replace(path)
        except OSError as e:
            raise StorageError(key, operation="set", reason=str(e)) from e
        self._logger.debug("Wrote blob", context={'key': key, 'bytes': len(value)})

    def remove(self, key: str) -> None:
        try:
            self._path_for(key).unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageError(key, operation="remove", reason=str(e)) from e
        self._logger.debug("Removed blob", context={'key': key})

    def keys(self) -> Iterator[str]:
        if not self._root.is_dir():
            return iter([])
        return iter(sorted(
            unquote(p.name[:-len(self.SUFFIX)])
            for p in self._root.iterdir()
            if p.name.endswith(self.SUFFIX)
        ))


def create_storage(config: Optional[Config] = None) -> StorageBackend:
    """
    Build the storage backend named in the configuration.

    Args:
        config: Configuration to use (defaults to the global config)

    Raises:
        ConfigError: If the backend name is unknown
    """
    if config is None:
        config = get_config()
    backend = config.storage.backend

    if backend == "memory":
        return MemoryStorage()
    if backend == "file":
        return FileStorage(config.storage.path)

    raise ConfigError(f"Unknown storage backend: {backend}", key="storage.backend")
