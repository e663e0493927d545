"""
BlobFS - A hierarchical pseudo-filesystem in a single key-value blob

Files and directories, each carrying arbitrary JSON-compatible data, are
kept in one flat array serialized under a single storage key. Callers
navigate and modify the tree through Pointers.
"""

from typing import Optional

__version__ = "1.0.0"

from .config import Config, ConfigLoader, get_config, setup_logging
from .filesystem import (
    ErrorKind,
    NodeStore,
    Pointer,
    PointerFileSystem,
    PointerKind,
)
from .storage import StorageBackend, MemoryStorage, FileStorage


def open_filesystem(
    storage: Optional[StorageBackend] = None,
    config: Optional[Config] = None
) -> PointerFileSystem:
    """
    Set up logging and return an initialized filesystem.

    Args:
        storage: Backend to use instead of the configured one
        config: Configuration to use (defaults to the global config)
    """
    if config is None:
        config = get_config()
    setup_logging(config)
    fs = PointerFileSystem.from_config(config, storage=storage)
    fs.initialize()
    return fs


__all__ = [
    'open_filesystem',
    'Config',
    'ConfigLoader',
    'get_config',
    'setup_logging',
    'ErrorKind',
    'NodeStore',
    'Pointer',
    'PointerFileSystem',
    'PointerKind',
    'StorageBackend',
    'MemoryStorage',
    'FileStorage',
]
