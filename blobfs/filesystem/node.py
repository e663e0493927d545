"""
Node Module

The two kinds of record a slot can hold, and their serialized form.

Serialized nodes are JSON objects with a ``kind`` discriminator:

    {"kind": "file", "name": "a.txt", "parentId": 1, "data": "hello"}
    {"kind": "directory", "name": "docs", "parentId": 0, "childIds": [2], "data": {}}

Records written with the older ``type`` / ``parent`` / ``children``
field names are accepted on read.

Version: 1.0.0
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Union

from blobfs.exceptions import StoreCorruptionError


class NodeKind(Enum):
    """Kinds of node."""
    FILE = "file"
    DIRECTORY = "directory"


@dataclass
class FileNode:
    """A leaf node holding application data."""

    name: str
    parent_id: int
    data: Any = None

    kind = NodeKind.FILE

    def to_dict(self) -> dict[str, Any]:
        return {
            'kind': self.kind.value,
            'name': self.name,
            'parentId': self.parent_id,
            'data': self.data,
        }


@dataclass
class DirectoryNode:
    """
    An interior node.

    ``child_ids`` keeps insertion order; the order only matters
    for listing.
    """

    name: str
    parent_id: int
    data: Any = None
    child_ids: List[int] = field(default_factory=list)

    kind = NodeKind.DIRECTORY

    def add_child(self, slot_id: int) -> None:
        """Append a child slot."""
        self.child_ids.append(slot_id)

    def remove_child(self, slot_id: int) -> bool:
        """Drop every occurrence of a child slot. Returns True if one was present."""
        before = len(self.child_ids)
        self.child_ids = [c for c in self.child_ids if c != slot_id]
        return len(self.child_ids) != before

    def to_dict(self) -> dict[str, Any]:
        return {
            'kind': self.kind.value,
            'name': self.name,
            'parentId': self.parent_id,
            'childIds': list(self.child_ids),
            'data': self.data,
        }


Node = Union[FileNode, DirectoryNode]


def new_file(name: str, parent_id: int, data: Any = None) -> FileNode:
    """Create a file record."""
    return FileNode(name=name, parent_id=parent_id, data=data)


def new_directory(name: str, parent_id: int, data: Any = None) -> DirectoryNode:
    """Create an empty directory record."""
    return DirectoryNode(name=name, parent_id=parent_id, data=data)


def node_from_dict(raw: Any, slot_id: int) -> Node:
    """
    Decode one serialized node.

    Args:
        raw: The decoded JSON value of the slot
        slot_id: Slot index, for error reporting

    Raises:
        StoreCorruptionError: If the value is not a well-formed node
    """
    if not isinstance(raw, dict):
        raise StoreCorruptionError("slot is not an object", slot_id=slot_id)

    kind = raw.get('kind', raw.get('type'))
    name = raw.get('name')
    parent_id = raw.get('parentId', raw.get('parent'))

    if not isinstance(name, str):
        raise StoreCorruptionError("node name is not a string", slot_id=slot_id)
    if not _is_slot_id(parent_id):
        raise StoreCorruptionError("node parent is not a slot id", slot_id=slot_id)

    if kind == NodeKind.FILE.value:
        return FileNode(name=name, parent_id=parent_id, data=raw.get('data'))

    if kind == NodeKind.DIRECTORY.value:
        child_ids = raw.get('childIds', raw.get('children', []))
        if not isinstance(child_ids, list) or not all(_is_slot_id(c) for c in child_ids):
            raise StoreCorruptionError("directory children are not slot ids", slot_id=slot_id)
        return DirectoryNode(
            name=name,
            parent_id=parent_id,
            data=raw.get('data'),
            child_ids=list(child_ids),
        )

    raise StoreCorruptionError(f"unknown node kind {kind!r}", slot_id=slot_id)


def _is_slot_id(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0
