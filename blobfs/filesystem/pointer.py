"""
Pointer Module

A Pointer is a read-only view of one slot, built by
``PointerFileSystem.derive()``. It never changes after construction;
derive again (or call ``reload()``) to observe later writes.

Failures are returned as pointers of kind ERROR instead of being
raised, so callers branch on ``pointer.kind``.

Version: 1.0.0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Union, TYPE_CHECKING

from .node import Node, NodeKind

if TYPE_CHECKING:
    from .vfs import PointerFileSystem


class PointerKind(Enum):
    """What a pointer refers to."""
    FILE = "file"
    DIRECTORY = "directory"
    ERROR = "error"


class ErrorKind(Enum):
    """Reason carried by an error pointer."""
    NOT_FOUND = "not_found"
    WRONG_KIND = "wrong_kind"
    NOT_A_FILE = "not_a_file"
    NOT_A_DIRECTORY = "not_a_directory"
    ALREADY_EXISTS = "already_exists"
    NO_SUCH_PATH = "no_such_path"
    CHILDREN_NOT_APPLICABLE = "children_not_applicable"
    ROOT_NOT_REMOVABLE = "root_not_removable"
    INVALID_NAME = "invalid_name"
    CORRUPT_STORE = "corrupt_store"
    STORE_ERROR = "store_error"


ROOT_SLOT = 0


@dataclass(frozen=True, eq=False)
class Pointer:
    """
    Handle over a slot id.

    Attributes:
        kind: FILE, DIRECTORY or ERROR
        slot_id: Slot the pointer was derived from (None for errors)
        name: Node name at derive time (None for errors)
        error: Reason, for error pointers
        message: Human-readable reason, for error pointers
    """

    kind: PointerKind
    slot_id: Optional[int] = None
    name: Optional[str] = None
    error: Optional[ErrorKind] = None
    message: str = ""
    filesystem: Optional['PointerFileSystem'] = field(default=None, repr=False)
    node: Optional[Node] = field(default=None, repr=False)

    @property
    def is_file(self) -> bool:
        return self.kind is PointerKind.FILE

    @property
    def is_directory(self) -> bool:
        return self.kind is PointerKind.DIRECTORY

    @property
    def is_error(self) -> bool:
        return self.kind is PointerKind.ERROR

    @property
    def is_root(self) -> bool:
        return self.is_directory and self.slot_id == ROOT_SLOT

    def data(self) -> Any:
        """Node data as of derive time (None for error pointers)."""
        if self.node is None:
            return None
        return self.node.data

    def parent(self) -> Pointer:
        """Pointer to the parent directory. The root is its own parent."""
        if self.is_error:
            return self
        return self.filesystem.derive(self.node.parent_id)

    def children(self) -> Union[List[Pointer], Pointer]:
        """Pointers to every child, in insertion order."""
        if not self.is_directory:
            return self._no_children("file has no children")
        return [self.filesystem.derive(child_id) for child_id in self.node.child_ids]

    def files(self) -> Union[List[Pointer], Pointer]:
        """Pointers to the child files."""
        if not self.is_directory:
            return self._no_children("file has no subfiles")
        return self._children_of_kind(NodeKind.FILE)

    def dirs(self) -> Union[List[Pointer], Pointer]:
        """Pointers to the child directories."""
        if not self.is_directory:
            return self._no_children("file has no subdirs")
        return self._children_of_kind(NodeKind.DIRECTORY)

    def reload(self) -> Pointer:
        """Derive a fresh pointer for the same slot."""
        if self.is_error:
            return self
        return self.filesystem.derive(self.slot_id)

    def same_node(self, other: Pointer) -> bool:
        """True if both pointers were derived from the same slot."""
        return (
            not self.is_error
            and not other.is_error
            and self.slot_id == other.slot_id
        )

    def _children_of_kind(self, kind: NodeKind) -> List[Pointer]:
        store = self.filesystem.store
        return [
            self.filesystem.derive(child_id)
            for child_id in self.node.child_ids
            if store.type_of(child_id) is kind
        ]

    def _no_children(self, message: str) -> Pointer:
        if self.is_error:
            return self
        return error_pointer(ErrorKind.CHILDREN_NOT_APPLICABLE, message)


def error_pointer(error: ErrorKind, message: str) -> Pointer:
    """Build an error pointer."""
    return Pointer(kind=PointerKind.ERROR, error=error, message=message)
