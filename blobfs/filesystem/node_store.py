"""
Node Store Module

Keeps every node of the tree in one flat list, serialized as a single
JSON array under one storage key. The slot index is the node id.

Each public method is one transaction: the whole list is loaded into a
working copy, mutated, and written back exactly once at the end. A
method that raises leaves the stored blob untouched.

Version: 1.0.0
"""

import json
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional, Any, List, Iterator, Set

from .node import (
    Node,
    NodeKind,
    FileNode,
    DirectoryNode,
    new_directory,
    node_from_dict,
)
from blobfs.exceptions import (
    NodeStoreException,
    NotFoundError,
    WrongKindError,
    NotAFileError,
    NotADirectoryError,
    AlreadyExistsError,
    StoreCorruptionError,
    RootRemovalError,
    InvalidNameError,
)
from blobfs.storage import StorageBackend
from blobfs.subsystem import Subsystem, SubsystemState


Slots = List[Optional[Node]]


class NodeStore(Subsystem):
    """
    Slot-addressed node storage.

    Freed slots are reused first-fit, so ids stay dense. Slot 0 always
    holds the root directory once ``initialize()`` has run.

    Example:
        >>> store = NodeStore(MemoryStorage())
        >>> store.initialize()
        >>> file_id = store.add_child(0, new_file('a.txt', 0, 'hello'))
        >>> store.read_file(file_id).data
        'hello'
    """

    ROOT_ID = 0
    ROOT_NAME = "/"
    DEFAULT_KEY = "local-fs"

    def __init__(self, storage: StorageBackend, key: str = DEFAULT_KEY):
        super().__init__('store')
        self._storage = storage
        self._key = key

    @property
    def storage(self) -> StorageBackend:
        return self._storage

    @property
    def key(self) -> str:
        return self._key

    # Serialization

    def _load(self) -> Slots:
        raw = self._storage.get(self._key)
        if raw is None:
            return []

        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StoreCorruptionError(f"invalid JSON ({e.msg})")

        if not isinstance(decoded, list):
            raise StoreCorruptionError("top-level value is not an array")

        return [
            None if item is None else node_from_dict(item, slot_id)
            for slot_id, item in enumerate(decoded)
        ]

    def _store(self, slots: Slots) -> None:
        # Trailing holes carry no information
        end = len(slots)
        while end > 0 and slots[end - 1] is None:
            end -= 1

        try:
            payload = json.dumps([
                None if node is None else node.to_dict()
                for node in slots[:end]
            ])
        except (TypeError, ValueError) as e:
            raise NodeStoreException(f"Node data is not JSON-serializable: {e}")

        self._storage.set(self._key, payload)

    @contextmanager
    def _transaction(self) -> Iterator[Slots]:
        slots = self._load()
        yield slots
        self._store(slots)

    @staticmethod
    def _slot(slots: Slots, slot_id: int) -> Optional[Node]:
        if 0 <= slot_id < len(slots):
            return slots[slot_id]
        return None

    @staticmethod
    def _first_free(slots: Slots) -> int:
        for slot_id, node in enumerate(slots):
            if node is None:
                return slot_id
        return len(slots)

    @staticmethod
    def _put(slots: Slots, slot_id: int, node: Node) -> None:
        if slot_id < 0:
            raise NotFoundError(slot_id)
        if slot_id >= len(slots):
            slots.extend([None] * (slot_id + 1 - len(slots)))
        slots[slot_id] = node

    @classmethod
    def _root_valid(cls, slots: Slots) -> bool:
        root = cls._slot(slots, cls.ROOT_ID)
        return isinstance(root, DirectoryNode) and root.name == cls.ROOT_NAME

    # Lifecycle

    def initialize(self) -> None:
        """
        Make sure slot 0 holds the root directory.

        Creates the blob if it is missing. If slot 0 is empty or holds
        anything other than a directory named "/", a fresh root is
        written there. Otherwise nothing is written.

        Raises:
            StoreCorruptionError: If the existing blob cannot be decoded
        """
        slots = self._load()

        if self._root_valid(slots):
            self.set_state(SubsystemState.INITIALIZED)
            return

        if self._slot(slots, self.ROOT_ID) is not None:
            self._logger.warning(
                "Replacing invalid root slot",
                slot_id=self.ROOT_ID,
                context={'key': self._key}
            )

        root = new_directory(
            self.ROOT_NAME,
            self.ROOT_ID,
            {'createdAt': datetime.now(timezone.utc).isoformat()}
        )
        self._put(slots, self.ROOT_ID, root)
        self._store(slots)

        self.set_state(SubsystemState.INITIALIZED)
        self._logger.info("Initialized root directory", context={'key': self._key})

    def is_initialized(self) -> bool:
        """Check whether the blob exists and slot 0 is a valid root."""
        if self._storage.get(self._key) is None:
            return False
        try:
            return self._root_valid(self._load())
        except NodeStoreException:
            return False

    def clear(self) -> None:
        """Delete the whole tree and start over with an empty root."""
        self._storage.remove(self._key)
        self._logger.info("Cleared store", context={'key': self._key})
        self.initialize()

    def health_check(self) -> bool:
        return self.is_initialized()

    # Probes and reads

    def allocate_id(self) -> int:
        """Return the lowest free slot id (or the list length if none is free)."""
        return self._first_free(self._load())

    def type_of(self, slot_id: int) -> Optional[NodeKind]:
        """
        Return the kind of node at slot_id, or None if the slot is empty.

        Never raises for missing or corrupt data.
        """
        try:
            node = self._slot(self._load(), slot_id)
        except NodeStoreException:
            return None
        return None if node is None else node.kind

    def read_node(self, slot_id: int) -> Node:
        """Return the node at slot_id, whatever its kind."""
        node = self._slot(self._load(), slot_id)
        if node is None:
            raise NotFoundError(slot_id)
        return node

    def read_file(self, slot_id: int) -> FileNode:
        """
        Return the file at slot_id.

        Raises:
            NotFoundError: If the slot is empty
            WrongKindError: If the slot holds a directory
        """
        node = self.read_node(slot_id)
        if not isinstance(node, FileNode):
            raise WrongKindError(slot_id, expected="file", actual=node.kind.value)
        return node

    def read_directory(self, slot_id: int) -> DirectoryNode:
        """
        Return the directory at slot_id.

        Raises:
            NotFoundError: If the slot is empty
            WrongKindError: If the slot holds a file
        """
        node = self.read_node(slot_id)
        if not isinstance(node, DirectoryNode):
            raise WrongKindError(slot_id, expected="directory", actual=node.kind.value)
        return node

    # Writes

    def write_file(self, slot_id: int, node: FileNode) -> None:
        """Overwrite slot_id with a file record."""
        if not isinstance(node, FileNode):
            raise WrongKindError(slot_id, expected="file", actual=_kind_name(node))
        _check_name(node)
        with self._transaction() as slots:
            self._put(slots, slot_id, node)
        self._logger.debug("Wrote file", slot_id=slot_id)

    def write_directory(self, slot_id: int, node: DirectoryNode) -> None:
        """Overwrite slot_id with a directory record."""
        if not isinstance(node, DirectoryNode):
            raise WrongKindError(slot_id, expected="directory", actual=_kind_name(node))
        _check_name(node)
        with self._transaction() as slots:
            self._put(slots, slot_id, node)
        self._logger.debug("Wrote directory", slot_id=slot_id)

    def write_file_data(self, slot_id: int, data: Any) -> None:
        """
        Replace the data of the file at slot_id, keeping name and parent.

        Raises:
            NotFoundError: If the slot is empty
            NotAFileError: If the slot holds a directory
        """
        with self._transaction() as slots:
            node = self._slot(slots, slot_id)
            if node is None:
                raise NotFoundError(slot_id)
            if not isinstance(node, FileNode):
                raise NotAFileError(slot_id, actual_type=node.kind.value)
            node.data = data
        self._logger.debug("Updated file data", slot_id=slot_id)

    def add_child(self, parent_id: int, node: Node) -> int:
        """
        Store node in the lowest free slot and link it under parent_id.

        The stored copy's parent id is set to parent_id. A new directory
        always starts with no children.

        Returns:
            Slot id of the new node

        Raises:
            InvalidNameError: If the name is not a non-empty string
            NotADirectoryError: If parent_id is not a directory
            AlreadyExistsError: If a sibling already uses the name
        """
        _check_name(node)
        if isinstance(node, DirectoryNode):
            stored = replace(node, parent_id=parent_id, child_ids=[])
        else:
            stored = replace(node, parent_id=parent_id)

        with self._transaction() as slots:
            parent = self._slot(slots, parent_id)
            if not isinstance(parent, DirectoryNode):
                raise NotADirectoryError(parent_id, actual_type=_kind_name(parent))

            for child_id in parent.child_ids:
                sibling = self._slot(slots, child_id)
                if sibling is not None and sibling.name == node.name:
                    raise AlreadyExistsError(node.name, parent_id=parent_id)

            new_id = self._first_free(slots)
            self._put(slots, new_id, stored)
            parent.add_child(new_id)

        self._logger.debug(
            f"Added {node.kind.value}",
            slot_id=new_id,
            context={'parent_id': parent_id, 'name': node.name}
        )
        return new_id

    # Removal

    def remove_file(self, slot_id: int) -> bool:
        """
        Unlink the file at slot_id from its parent and free the slot.

        Returns:
            True if a file was removed, False if the slot was already empty

        Raises:
            NotAFileError: If the slot holds a directory
        """
        slots = self._load()
        node = self._slot(slots, slot_id)
        if node is None:
            self._logger.debug("File already absent", slot_id=slot_id)
            return False
        if not isinstance(node, FileNode):
            raise NotAFileError(slot_id, actual_type=node.kind.value)

        self._detach(slots, slot_id, node)
        slots[slot_id] = None
        self._store(slots)

        self._logger.debug("Removed file", slot_id=slot_id)
        return True

    def remove_directory(self, slot_id: int) -> bool:
        """
        Free the directory at slot_id and everything below it.

        Descendants are freed before their parents. Child ids that no
        longer point at a node are skipped.

        Returns:
            True if a directory was removed, False if the slot was already empty

        Raises:
            RootRemovalError: If slot_id is the root
            NotADirectoryError: If the slot holds a file
        """
        if slot_id == self.ROOT_ID:
            raise RootRemovalError()

        slots = self._load()
        node = self._slot(slots, slot_id)
        if node is None:
            self._logger.debug("Directory already absent", slot_id=slot_id)
            return False
        if not isinstance(node, DirectoryNode):
            raise NotADirectoryError(slot_id, actual_type=node.kind.value)

        freed = self._free_subtree(slots, slot_id, {slot_id})
        self._detach(slots, slot_id, node)
        slots[slot_id] = None
        self._store(slots)

        self._logger.debug(
            "Removed directory",
            slot_id=slot_id,
            context={'descendants': freed}
        )
        return True

    def _free_subtree(self, slots: Slots, dir_id: int, seen: Set[int]) -> int:
        directory = slots[dir_id]
        freed = 0

        for child_id in directory.child_ids:
            if child_id == self.ROOT_ID or child_id in seen:
                self._logger.warning(
                    "Skipping cyclic child link",
                    slot_id=child_id,
                    context={'parent_id': dir_id}
                )
                continue
            child = self._slot(slots, child_id)
            if child is None:
                continue
            seen.add(child_id)
            if isinstance(child, DirectoryNode):
                freed += self._free_subtree(slots, child_id, seen)
            slots[child_id] = None
            freed += 1

        return freed

    def _detach(self, slots: Slots, slot_id: int, node: Node) -> None:
        parent = self._slot(slots, node.parent_id)
        if isinstance(parent, DirectoryNode):
            parent.remove_child(slot_id)
        else:
            self._logger.warning(
                "Parent link broken, freeing slot anyway",
                slot_id=slot_id,
                context={'parent_id': node.parent_id}
            )

    # Statistics

    def stats(self) -> dict[str, Any]:
        """Get store statistics."""
        slots = self._load()
        files = sum(1 for n in slots if isinstance(n, FileNode))
        directories = sum(1 for n in slots if isinstance(n, DirectoryNode))
        return {
            'key': self._key,
            'total_slots': len(slots),
            'occupied_slots': files + directories,
            'free_slots': len(slots) - files - directories,
            'files': files,
            'directories': directories,
        }


def _kind_name(node: Any) -> Optional[str]:
    kind = getattr(node, 'kind', None)
    return kind.value if isinstance(kind, NodeKind) else None


def _check_name(node: Node) -> None:
    if not isinstance(node.name, str) or not node.name:
        raise InvalidNameError(node.name)
