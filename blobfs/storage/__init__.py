"""
BlobFS Storage Module

Key-value backends holding the serialized tree:
- StorageBackend contract (get / set / remove)
- In-memory and directory-of-files implementations
"""

from .backend import StorageBackend, MemoryStorage, FileStorage, create_storage

__all__ = [
    'StorageBackend',
    'MemoryStorage',
    'FileStorage',
    'create_storage',
]
