"""
BlobFS File System Module

- Slot-addressed node store persisted as one JSON blob
- File and directory node records
- Pointer handles and the pointer-based filesystem facade
- Path parsing
"""

from .node import NodeKind, FileNode, DirectoryNode, new_file, new_directory
from .node_store import NodeStore
from .path_resolver import PathResolver, ParsedPath, ROOT_SENTINEL
from .pointer import Pointer, PointerKind, ErrorKind, error_pointer
from .vfs import PointerFileSystem

__all__ = [
    # Nodes
    'NodeKind',
    'FileNode',
    'DirectoryNode',
    'new_file',
    'new_directory',
    # Node store
    'NodeStore',
    # Path resolver
    'PathResolver',
    'ParsedPath',
    'ROOT_SENTINEL',
    # Pointers
    'Pointer',
    'PointerKind',
    'ErrorKind',
    'error_pointer',
    'PointerFileSystem',
]
