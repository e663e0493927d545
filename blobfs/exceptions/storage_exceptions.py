"""
Storage Exceptions

Exceptions raised by storage backends when the underlying medium
cannot be read or written.

Version: 1.0.0
"""

from typing import Optional, Any


class StorageException(Exception):
    """
    Base exception for all storage backend errors.

    Attributes:
        message: Human-readable error description
        key: Storage key associated with the error (if applicable)
        error_code: Numeric error code for programmatic handling
    """

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.key = key
        self.error_code = error_code or 6000
        self.context = context or {}
        if key is not None:
            self.context["key"] = key

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.key is not None:
            base = f"{base} (key={self.key})"
        return base


class StorageError(StorageException):
    """
    A backend operation failed.

    Example:
        >>> raise StorageError("local-fs", operation="set", reason="disk full")
    """

    def __init__(
        self,
        key: str,
        operation: Optional[str] = None,
        reason: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if operation:
            ctx["operation"] = operation
        if reason:
            ctx["reason"] = reason
        super().__init__(
            message=f"Storage {operation or 'access'} failed: {reason or 'unknown error'}",
            key=key,
            error_code=6001,
            context=ctx
        )
        self.operation = operation
        self.reason = reason
