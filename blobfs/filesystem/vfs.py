"""
Pointer File System Module

The public face of BlobFS. Wraps a NodeStore and lets callers work
with Pointers instead of raw slot ids:
- Navigation (root, children, parent, named lookups)
- Path resolution and path formatting
- Adding, removing and updating files and directories
- Predicate-based queries over a directory's files

Nothing raised by the node store or the storage backend escapes this
module. Pointer-returning methods hand back an error pointer,
boolean methods return False, list methods return [].

Version: 1.0.0
"""

from typing import Any, Callable, List, Optional

from .node import FileNode, new_file, new_directory, Node
from .node_store import NodeStore
from .path_resolver import PathResolver
from .pointer import Pointer, PointerKind, ErrorKind, error_pointer
from blobfs.config import Config, get_config
from blobfs.exceptions import (
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
    StorageException,
)
from blobfs.storage import StorageBackend, create_storage
from blobfs.subsystem import Subsystem, SubsystemState


Predicate = Callable[[Any], bool]

# Most specific first
_ERROR_KINDS = (
    (NotFoundError, ErrorKind.NOT_FOUND),
    (WrongKindError, ErrorKind.WRONG_KIND),
    (NotAFileError, ErrorKind.NOT_A_FILE),
    (NotADirectoryError, ErrorKind.NOT_A_DIRECTORY),
    (AlreadyExistsError, ErrorKind.ALREADY_EXISTS),
    (NoSuchPathError, ErrorKind.NO_SUCH_PATH),
    (StoreCorruptionError, ErrorKind.CORRUPT_STORE),
    (RootRemovalError, ErrorKind.ROOT_NOT_REMOVABLE),
    (InvalidNameError, ErrorKind.INVALID_NAME),
)

_FAILURES = (NodeStoreException, StorageException)


class PointerFileSystem(Subsystem):
    """
    Pointer-based access to a slot-backed tree.

    Example:
        >>> fs = PointerFileSystem(NodeStore(MemoryStorage()))
        >>> root = fs.root()
        >>> docs = fs.add_dir(root, 'docs', {})
        >>> fs.add_file(docs, 'a.txt', 'hello').name
        'a.txt'
        >>> fs.resolve_path(root, '/docs/a.txt').data()
        'hello'
    """

    def __init__(self, store: NodeStore):
        super().__init__('pointer')
        self._store = store

    @classmethod
    def from_config(
        cls,
        config: Optional[Config] = None,
        storage: Optional[StorageBackend] = None
    ) -> 'PointerFileSystem':
        """
        Build a filesystem from configuration.

        Args:
            config: Configuration to use (defaults to the global config)
            storage: Backend to use instead of the configured one
        """
        if config is None:
            config = get_config()
        if storage is None:
            storage = create_storage(config)
        return cls(NodeStore(storage, key=config.storage.key))

    @property
    def store(self) -> NodeStore:
        return self._store

    def initialize(self) -> None:
        """
        Initialize the underlying store.

        Raises:
            StoreCorruptionError: If the stored blob cannot be decoded
        """
        try:
            self._store.initialize()
        except _FAILURES:
            self.set_state(SubsystemState.ERROR)
            raise
        self.set_state(SubsystemState.INITIALIZED)

    def health_check(self) -> bool:
        return self._store.health_check()

    # Error conversion

    def _fail(self, error: ErrorKind, message: str, **context: Any) -> Pointer:
        self._logger.debug(message, context={'error': error.value, **context})
        return error_pointer(error, message)

    def _from_exception(self, exc: Exception) -> Pointer:
        for exc_type, error in _ERROR_KINDS:
            if isinstance(exc, exc_type):
                return self._fail(error, str(exc))
        return self._fail(ErrorKind.STORE_ERROR, str(exc))

    # Pointer construction

    def derive(self, slot_id: int) -> Pointer:
        """
        Build a pointer for slot_id from the current store contents.

        Returns an error pointer if the slot is empty or the store
        cannot be read.
        """
        try:
            node = self._store.read_node(slot_id)
        except _FAILURES as e:
            return self._from_exception(e)

        kind = PointerKind.FILE if isinstance(node, FileNode) else PointerKind.DIRECTORY
        return Pointer(
            kind=kind,
            slot_id=slot_id,
            name=node.name,
            filesystem=self,
            node=node,
        )

    def root(self) -> Pointer:
        """Initialize the store if needed and return the root pointer."""
        try:
            self.initialize()
        except _FAILURES as e:
            return self._from_exception(e)
        return self.derive(NodeStore.ROOT_ID)

    def reload(self, ptr: Pointer) -> Pointer:
        """Re-derive a pointer from its slot id."""
        return ptr.reload()

    def clear(self) -> Pointer:
        """Delete the whole tree and return the new, empty root."""
        try:
            self._store.clear()
        except _FAILURES as e:
            return self._from_exception(e)
        self.set_state(SubsystemState.INITIALIZED)
        return self.derive(NodeStore.ROOT_ID)

    # Named lookups

    def child_file(self, dir_ptr: Pointer, name: str) -> Pointer:
        """Return the file called name directly under dir_ptr."""
        return self._child_named(dir_ptr, name, PointerKind.FILE)

    def child_dir(self, dir_ptr: Pointer, name: str) -> Pointer:
        """Return the directory called name directly under dir_ptr."""
        return self._child_named(dir_ptr, name, PointerKind.DIRECTORY)

    def _child_named(self, dir_ptr: Pointer, name: str, kind: PointerKind) -> Pointer:
        current = self._current_directory(dir_ptr)
        if current.is_error:
            return current

        named = [p for p in current.children() if not p.is_error and p.name == name]

        if any(p.kind is not kind for p in named):
            return self._fail(
                ErrorKind.WRONG_KIND,
                f"'{name}' is not a {kind.value}",
                slot_id=current.slot_id
            )
        if named:
            return named[0]
        return self._fail(
            ErrorKind.NOT_FOUND,
            f"no {kind.value} named '{name}'",
            slot_id=current.slot_id
        )

    def _current_directory(self, dir_ptr: Pointer) -> Pointer:
        if not dir_ptr.is_directory:
            return self._fail(ErrorKind.NOT_A_DIRECTORY, "not a dir pointer")
        current = dir_ptr.reload()
        if current.is_file:
            return self._fail(ErrorKind.NOT_A_DIRECTORY, "not a dir pointer")
        return current

    def parent_of(self, ptr: Pointer) -> Pointer:
        """Return the parent directory pointer."""
        return ptr.parent()

    # Listings

    def file_list(self, dir_ptr: Pointer) -> List[Pointer]:
        """Pointers to the files directly under dir_ptr."""
        current = self._current_directory(dir_ptr)
        if current.is_error:
            return []
        return current.files()

    def dir_list(self, dir_ptr: Pointer) -> List[Pointer]:
        """Pointers to the directories directly under dir_ptr."""
        current = self._current_directory(dir_ptr)
        if current.is_error:
            return []
        return current.dirs()

    def dir_name_list(self, dir_ptr: Pointer) -> List[str]:
        return [p.name for p in self.dir_list(dir_ptr)]

    def dir_data_list(self, dir_ptr: Pointer) -> List[Any]:
        return [p.data() for p in self.dir_list(dir_ptr)]

    def dir_by_name(self, dir_ptr: Pointer, name: str) -> Pointer:
        """Child directory called name, or dir_ptr itself if there is none."""
        found = self.child_dir(dir_ptr, name)
        return found if found.is_directory else dir_ptr

    def parent_dir(self, ptr: Pointer) -> Pointer:
        """Parent directory of ptr, or ptr itself if it has none."""
        found = ptr.parent()
        return found if found.is_directory else ptr

    # Mutation

    def add_file(self, dir_ptr: Pointer, name: str, data: Any = None) -> Pointer:
        """Create a file under dir_ptr and return its pointer."""
        return self._add(dir_ptr, new_file(name, dir_ptr.slot_id, data))

    def add_dir(self, dir_ptr: Pointer, name: str, data: Any = None) -> Pointer:
        """Create a directory under dir_ptr and return its pointer."""
        return self._add(dir_ptr, new_directory(name, dir_ptr.slot_id, data))

    def _add(self, dir_ptr: Pointer, node: Node) -> Pointer:
        current = self._current_directory(dir_ptr)
        if current.is_error:
            return current

        if any(not p.is_error and p.name == node.name for p in current.children()):
            return self._fail(
                ErrorKind.ALREADY_EXISTS,
                f"{node.kind.value} {node.name} already exist",
                slot_id=current.slot_id
            )

        try:
            new_id = self._store.add_child(current.slot_id, node)
        except _FAILURES as e:
            return self._from_exception(e)
        return self.derive(new_id)

    def remove(self, ptr: Pointer) -> bool:
        """
        Remove the node ptr refers to (recursively, for directories).

        Returns:
            True if something was removed
        """
        try:
            if ptr.is_file:
                return self._store.remove_file(ptr.slot_id)
            if ptr.is_directory:
                return self._store.remove_directory(ptr.slot_id)
        except _FAILURES as e:
            self._from_exception(e)
        return False

    def update_file_data(self, ptr: Pointer, data: Any) -> bool:
        """Replace the data of the file ptr refers to."""
        if not ptr.is_file:
            return False
        try:
            self._store.write_file_data(ptr.slot_id, data)
        except _FAILURES as e:
            self._from_exception(e)
            return False
        return True

    # Paths

    def resolve_path(self, dir_ptr: Pointer, path: str) -> Pointer:
        """
        Resolve a '/'-delimited path.

        A leading '/' starts from the root, anything else from dir_ptr.
        The last component may name a file or a directory; files are
        looked up first. Every other component must be a directory.
        The root sentinel 'ROOT' resolves to the root unless dir_ptr
        has a child of that name.
        """
        if not dir_ptr.is_directory:
            return self._fail(ErrorKind.NOT_A_DIRECTORY, "not a dir pointer")

        parsed = PathResolver.parse(path)
        start = self.root() if parsed.is_absolute else dir_ptr.reload()
        found = self._walk(start, parsed.components, path)

        if found.is_error and PathResolver.is_root_sentinel(path):
            return self.root()
        return found

    def _walk(self, current: Pointer, components: List[str], path: str) -> Pointer:
        if current.is_error or not components:
            return current

        head, rest = components[0], components[1:]

        if not rest:
            found = self.child_file(current, head)
            if found.is_file:
                return found
            found = self.child_dir(current, head)
            if found.is_directory:
                return found
            return self._fail(
                ErrorKind.NO_SUCH_PATH,
                f"no such file or directory: {path}",
                component=head
            )

        found = self.child_dir(current, head)
        if not found.is_directory:
            return self._fail(
                ErrorKind.NO_SUCH_PATH,
                f"no such directory: {path}",
                component=head
            )
        return self._walk(found, rest, path)

    def pointer_path(self, ptr: Pointer) -> str:
        """
        Absolute path of ptr, e.g. '/docs/a.txt'.

        Returns 'ROOT' for the root directory and '' if the parent
        chain is broken.
        """
        names: List[str] = []
        seen = set()
        current = ptr

        while not current.is_root:
            if current.is_error or current.slot_id in seen:
                return ""
            seen.add(current.slot_id)
            names.append(current.name)
            current = current.parent()

        return PathResolver.format(names[::-1])

    # Predicate-based queries

    def filter_file_data(self, dir_ptr: Pointer, predicate: Predicate) -> List[Any]:
        """Data of every file under dir_ptr whose data satisfies predicate."""
        return [p.data() for p in self.file_list(dir_ptr) if predicate(p.data())]

    def file_data_list(self, dir_ptr: Pointer) -> List[Any]:
        """Data of every file under dir_ptr."""
        return self.filter_file_data(dir_ptr, lambda _: True)

    def delete_files_matching(self, dir_ptr: Pointer, predicate: Predicate) -> bool:
        """Remove every file under dir_ptr whose data satisfies predicate."""
        targets = [p for p in self.file_list(dir_ptr) if predicate(p.data())]
        for target in targets:
            self.remove(target)
        return bool(targets)

    def delete_dirs_matching(self, dir_ptr: Pointer, predicate: Predicate) -> bool:
        """Remove every directory under dir_ptr whose data satisfies predicate."""
        targets = [p for p in self.dir_list(dir_ptr) if predicate(p.data())]
        for target in targets:
            self.remove(target)
        return bool(targets)

    def modify_unique_file_matching(
        self,
        dir_ptr: Pointer,
        predicate: Predicate,
        new_data: Any
    ) -> bool:
        """
        Replace the data of the single file under dir_ptr matching predicate.

        Nothing changes unless exactly one file matches.
        """
        targets = [p for p in self.file_list(dir_ptr) if predicate(p.data())]
        if len(targets) != 1:
            return False
        return self.update_file_data(targets[0], new_data)
