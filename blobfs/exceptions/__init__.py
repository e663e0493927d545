"""
BlobFS Exception Hierarchy

Architecture:
    NodeStoreException
    ├── NotFoundError
    ├── WrongKindError
    ├── NotAFileError
    ├── NotADirectoryError
    ├── AlreadyExistsError
    ├── NoSuchPathError
    ├── StoreCorruptionError
    ├── RootRemovalError
    └── InvalidNameError
    StorageException
    └── StorageError
    ConfigError
"""

from .store_exceptions import (
    NodeStoreException,
    NotFoundError,
    WrongKindError,
    NotAFileError,
    NotADirectoryError,
    AlreadyExistsError,
    NoSuchPathError,
    StoreCorruptionError,
    RootRemovalError,
    InvalidNameError,
)

from .storage_exceptions import (
    StorageException,
    StorageError,
)

from .config_exceptions import ConfigError

__all__ = [
    # Node store exceptions
    "NodeStoreException",
    "NotFoundError",
    "WrongKindError",
    "NotAFileError",
    "NotADirectoryError",
    "AlreadyExistsError",
    "NoSuchPathError",
    "StoreCorruptionError",
    "RootRemovalError",
    "InvalidNameError",
    # Storage exceptions
    "StorageException",
    "StorageError",
    # Config exceptions
    "ConfigError",
]
