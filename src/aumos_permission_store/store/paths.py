"""Colon-delimited path handling for the permission store.

Reads walk a path left to right, one nesting level per segment, through
nested stores, plain mappings and lists. Writes never merge: the segments
after the top-level field are folded into a fresh nested dict that
replaces the whole field.

Permission checks do not happen here. The store gates a path once, on its
top-level segment, before calling into this module.

Example
-------
>>> build_nested(["b", "c"], 1)
{'b': {'c': 1}}
>>> resolve_path({"a": {"b": [10, 20]}}, "a:b:1")
20
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping

from aumos_permission_store.errors import FieldNotFoundError, InvalidPathError
from aumos_permission_store.permissions.resolver import PATH_SEPARATOR


class FieldContainer(ABC):
    """Anything that exposes raw (ungated) field access to path traversal."""

    elevated: bool = False

    @abstractmethod
    def has_field(self, name: str) -> bool:
        """Return True when *name* is a field of this container."""

    @abstractmethod
    def raw_field(self, name: str, default: object = None) -> object:
        """Return the value of *name* without any permission check."""

    @abstractmethod
    def raw_items(self) -> Iterator[tuple[str, object]]:
        """Iterate over ``(name, value)`` pairs without any permission check."""


def split_path(path: str) -> list[str]:
    return path.split(PATH_SEPARATOR)


def split_write_path(path: str) -> list[str]:
    """Split *path* for a write, rejecting empty paths and empty segments.

    Raises
    ------
    InvalidPathError
        If *path* is empty or any segment is empty (``"a::b"``, ``"a:"``).
    """
    if not path:
        raise InvalidPathError(path, "path must not be empty")
    segments = split_path(path)
    if any(not segment for segment in segments):
        raise InvalidPathError(path, "path segments must not be empty")
    return segments


def validate_field_name(name: str) -> str:
    """Return *name* if it can address a top-level field on its own.

    Raises
    ------
    InvalidPathError
        If *name* is empty or contains the path separator.
    """
    if not name:
        raise InvalidPathError(name, "field name must not be empty")
    if PATH_SEPARATOR in name:
        raise InvalidPathError(name, f"field name must not contain {PATH_SEPARATOR!r}")
    return name


def build_nested(segments: list[str], value: object) -> object:
    """Right-fold *segments* into single-key dicts wrapping *value*.

    ``["b", "c"]`` with ``V`` gives ``{"b": {"c": V}}``. An empty segment
    list returns *value* unchanged.
    """
    nested = value
    for segment in reversed(segments):
        nested = {segment: nested}
    return nested


def child(container: object, segment: str, full_path: str) -> object:
    """Return the value one level below *container* addressed by *segment*.

    Nested stores are read through their raw fields. Lists and tuples are
    indexed by non-negative decimal segments.

    Raises
    ------
    FieldNotFoundError
        If *segment* does not address anything inside *container*.
    """
    if isinstance(container, FieldContainer):
        if container.has_field(segment):
            return container.raw_field(segment)
    elif isinstance(container, Mapping):
        if segment in container:
            return container[segment]
    elif isinstance(container, (list, tuple)) and segment.isdecimal():
        index = int(segment)
        if index < len(container):
            return container[index]
    raise FieldNotFoundError(full_path, segment)


def resolve_path(container: object, path: str, full_path: str | None = None) -> object:
    """Walk *path* down from *container* and return the addressed value.

    Parameters
    ----------
    container:
        The store, mapping or list to start from.
    path:
        Remaining colon-delimited path. An empty path returns *container*.
    full_path:
        The path as originally requested, used in error messages.

    Returns
    -------
    object

    Notes
    -----
    A computed (callable) field is handled in place rather than descended
    into:

    - with a following segment, the callable is invoked and its result is
      indexed by that segment; anything after it is ignored;
    - with no following segment, an elevated container returns the
      computed value, while any other container returns *itself* without
      invoking the callable.
    """
    if full_path is None:
        full_path = path
    if not path:
        return container

    head, *rest = split_path(path)
    value = child(container, head, full_path)

    if callable(value) and not isinstance(value, FieldContainer):
        elevated = isinstance(container, FieldContainer) and container.elevated
        if not rest:
            # Plain containers return themselves, leaving the callable uninvoked.
            return value() if elevated else container
        return child(value(), rest[0], full_path)

    return resolve_path(value, PATH_SEPARATOR.join(rest), full_path)


def contains_container(value: object, target: FieldContainer) -> bool:
    """Return True when *target* is *value* or is reachable from it.

    Walks nested containers, mappings, lists and tuples. Computed fields
    are not invoked.
    """
    seen: set[int] = set()
    pending: list[object] = [value]
    while pending:
        current = pending.pop()
        if current is target:
            return True
        if id(current) in seen:
            continue
        seen.add(id(current))
        if isinstance(current, FieldContainer):
            pending.extend(v for _, v in current.raw_items())
        elif isinstance(current, Mapping):
            pending.extend(current.values())
        elif isinstance(current, (list, tuple)):
            pending.extend(current)
    return False
