"""
Node Store Exceptions

Exceptions raised by the node store while reading, writing and unlinking
slots of the serialized filesystem. The pointer layer converts every one
of these into an error pointer before returning to its caller.

Version: 1.0.0
"""

from typing import Optional, Any


class NodeStoreException(Exception):
    """
    Base exception for all node store errors.

    Attributes:
        message: Human-readable error description
        slot_id: Slot associated with the error (if applicable)
        error_code: Numeric error code for programmatic handling
        context: Additional context about the error
    """

    def __init__(
        self,
        message: str,
        slot_id: Optional[int] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.slot_id = slot_id
        self.error_code = error_code or 4000
        self.context = context or {}
        if slot_id is not None:
            self.context["slot_id"] = slot_id

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.slot_id is not None:
            base = f"{base} (slot={self.slot_id})"
        return base


class NotFoundError(NodeStoreException):
    """
    The slot is empty.

    Example:
        >>> raise NotFoundError(7)
    """

    def __init__(
        self,
        slot_id: int,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"No node at slot {slot_id}",
            slot_id=slot_id,
            error_code=4001,
            context=context
        )


class WrongKindError(NodeStoreException):
    """
    The slot (or a sibling with the requested name) holds the other kind
    of node than the one the caller asked for.

    Example:
        >>> raise WrongKindError(3, expected="file", actual="directory")
    """

    def __init__(
        self,
        slot_id: Optional[int] = None,
        expected: Optional[str] = None,
        actual: Optional[str] = None,
        name: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if expected:
            ctx["expected"] = expected
        if actual:
            ctx["actual"] = actual
        if name is not None:
            ctx["name"] = name
        subject = f"'{name}'" if name is not None else f"slot {slot_id}"
        super().__init__(
            message=f"Expected {expected or 'other kind'} at {subject}, found {actual or 'other kind'}",
            slot_id=slot_id,
            error_code=4002,
            context=ctx
        )
        self.expected = expected
        self.actual = actual
        self.name = name


class NotAFileError(NodeStoreException):
    """
    Operation requires a file.

    Example:
        >>> raise NotAFileError(0, actual_type="directory")
    """

    def __init__(
        self,
        slot_id: Optional[int] = None,
        actual_type: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if actual_type:
            ctx["actual_type"] = actual_type
        super().__init__(
            message="Not a file",
            slot_id=slot_id,
            error_code=4003,
            context=ctx
        )
        self.actual_type = actual_type


class NotADirectoryError(NodeStoreException):
    """
    Operation requires a directory.

    Example:
        >>> raise NotADirectoryError(4, actual_type="file")
    """

    def __init__(
        self,
        slot_id: Optional[int] = None,
        actual_type: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if actual_type:
            ctx["actual_type"] = actual_type
        super().__init__(
            message="Not a directory",
            slot_id=slot_id,
            error_code=4004,
            context=ctx
        )
        self.actual_type = actual_type


class AlreadyExistsError(NodeStoreException):
    """
    A sibling of either kind already uses the name.

    Example:
        >>> raise AlreadyExistsError("a.txt", parent_id=0)
    """

    def __init__(
        self,
        name: str,
        parent_id: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        ctx["name"] = name
        super().__init__(
            message=f"'{name}' already exists",
            slot_id=parent_id,
            error_code=4005,
            context=ctx
        )
        self.name = name


class NoSuchPathError(NodeStoreException):
    """
    Path resolution reached a dead end.

    Example:
        >>> raise NoSuchPathError("docs/missing", component="missing")
    """

    def __init__(
        self,
        path: str,
        component: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        ctx["path"] = path
        if component is not None:
            ctx["component"] = component
        super().__init__(
            message=f"No such file or directory: {path}",
            error_code=4006,
            context=ctx
        )
        self.path = path
        self.component = component


class StoreCorruptionError(NodeStoreException):
    """
    The persisted blob cannot be decoded into a node list.

    Raised for invalid JSON, a top-level value that is not an array,
    or an element that is neither null nor a well-formed node.
    """

    def __init__(
        self,
        reason: str,
        slot_id: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        ctx["reason"] = reason
        super().__init__(
            message=f"Corrupt store: {reason}",
            slot_id=slot_id,
            error_code=4007,
            context=ctx
        )
        self.reason = reason


class RootRemovalError(NodeStoreException):
    """The root directory cannot be removed."""

    def __init__(self, context: Optional[dict[str, Any]] = None) -> None:
        super().__init__(
            message="Root directory cannot be removed",
            slot_id=0,
            error_code=4008,
            context=context
        )


class InvalidNameError(NodeStoreException):
    """
    A node name is not a non-empty string.

    Example:
        >>> raise InvalidNameError(5)
    """

    def __init__(
        self,
        name: Any,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        ctx["name"] = repr(name)
        super().__init__(
            message=f"Invalid node name: {name!r}",
            error_code=4009,
            context=ctx
        )
        self.name = name
