"""Exceptions raised by the permission store.

Every error derives from :class:`StoreError`. Each concrete error also
derives from the closest built-in exception so callers can catch
``PermissionError``, ``KeyError`` or ``ValueError`` without importing
this module.
"""
from __future__ import annotations


class StoreError(Exception):
    """Base class for all permission store errors."""


class AccessDeniedError(StoreError, PermissionError):
    """Raised when a read or write targets a path its top-level field does not allow.

    Attributes
    ----------
    path:
        The full path that was requested.
    operation:
        ``"read"`` or ``"write"``.
    permission:
        The effective permission of the path's top-level field.
    """

    def __init__(self, path: str, operation: str, permission: object) -> None:
        self.path = path
        self.operation = operation
        self.permission = permission
        super().__init__(
            f"Cannot {operation} path {path!r} (permission: {permission})"
        )


class FieldNotFoundError(StoreError, KeyError):
    """Raised when a path segment does not exist during read traversal.

    Attributes
    ----------
    path:
        The full path that was requested.
    segment:
        The segment that could not be resolved.
    """

    def __init__(self, path: str, segment: str) -> None:
        self.path = path
        self.segment = segment
        super().__init__(path, segment)

    def __str__(self) -> str:
        return f"No field {self.segment!r} while resolving path {self.path!r}"


class InvalidPathError(StoreError, ValueError):
    """Raised when a write path is empty or contains an empty segment."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Invalid path {path!r}: {reason}")


class CyclicStoreError(StoreError, ValueError):
    """Raised when a write would make a store contain itself."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            f"Writing path {path!r} would make the store contain itself"
        )


class InvalidPermissionError(StoreError, ValueError):
    """Raised when a permission literal is not one of the known values."""

    def __init__(self, raw: object) -> None:
        self.raw = raw
        super().__init__(
            f"Unknown permission {raw!r}. "
            "Valid: 'r', 'w', 'rw', 'none', 'read', 'write', 'read-write'."
        )
