"""Permission-gated hierarchical key/value store.

:class:`Store` holds an ordered mapping of top-level fields. Every public
read or write is gated on the effective permission of the path's
top-level segment (see :mod:`aumos_permission_store.permissions.resolver`);
deeper segments are never checked separately.

Field declarations can live on a subclass, the way a schema is declared
once and shared by every instance:

::

    class UserStore(Store):
        restrictions = StoreSchema().restrict("name", "r")
        defaults = {"name": "John Doe"}

    user = UserStore()
    user.read("name")          # "John Doe"
    user.write("name", "Ann")  # raises AccessDeniedError

Writes to nested paths replace the whole top-level field:

::

    store = Store()
    store.write("a:b", 1)
    store.write("a:c", 2)
    store.read("a")            # {"c": 2}
"""
from __future__ import annotations

import copy
import logging
from collections.abc import Iterator, Mapping
from typing import ClassVar

from aumos_permission_store.errors import AccessDeniedError, CyclicStoreError, FieldNotFoundError
from aumos_permission_store.permissions.permission import Permission
from aumos_permission_store.permissions.resolver import StoreSchema, resolve_permission
from aumos_permission_store.store.paths import (
    FieldContainer,
    build_nested,
    contains_container,
    resolve_path,
    split_write_path,
    validate_field_name,
)

logger = logging.getLogger(__name__)


class Store(FieldContainer):
    """A nested key/value container with per-field read/write policy.

    Parameters
    ----------
    default_policy:
        Permission applied to fields with no declared restriction.
        Default ``"rw"``.
    schema:
        Optional per-instance restrictions, layered over the class-level
        :attr:`restrictions`.
    initial:
        Optional fields seeded at construction without permission checks,
        layered over the class-level :attr:`defaults`.

    Raises
    ------
    InvalidPermissionError
        If *default_policy* or a restriction is not a known permission.
    InvalidPathError
        If a seeded field name is empty or contains a colon.
    CyclicStoreError
        If a seeded value contains this store.
    """

    restrictions: ClassVar[StoreSchema] = StoreSchema()
    defaults: ClassVar[Mapping[str, object]] = {}

    def __init__(
        self,
        default_policy: Permission | str = Permission.READ_WRITE,
        schema: StoreSchema | None = None,
        initial: Mapping[str, object] | None = None,
    ) -> None:
        self._fields: dict[str, object] = {}
        self._default_policy = Permission.parse(default_policy)
        class_schema = type(self).restrictions
        self._schema = class_schema.extend(schema or StoreSchema())

        seeded = copy.deepcopy(dict(type(self).defaults))
        seeded.update(initial or {})
        for name, value in seeded.items():
            validate_field_name(name)
            if contains_container(value, self):
                raise CyclicStoreError(name)
            self._fields[name] = value

    # ------------------------------------------------------------------
    # Policy
    # ------------------------------------------------------------------

    @property
    def default_policy(self) -> Permission:
        """Permission for undeclared fields. Assigning takes effect immediately."""
        return self._default_policy

    @default_policy.setter
    def default_policy(self, value: Permission | str) -> None:
        self._default_policy = Permission.parse(value)

    @property
    def schema(self) -> StoreSchema:
        """The declared restrictions in effect for this instance."""
        return self._schema

    def permission_for(self, path: str) -> Permission:
        """Return the effective permission of *path*'s top-level segment."""
        return resolve_permission(self, path)

    def allowed_to_read(self, path: str) -> bool:
        return self.permission_for(path).grants_read

    def allowed_to_write(self, path: str) -> bool:
        return self.permission_for(path).grants_write

    # ------------------------------------------------------------------
    # Gated access
    # ------------------------------------------------------------------

    def read(self, path: str) -> object:
        """Return the value addressed by *path*.

        Parameters
        ----------
        path:
            Colon-delimited path. An empty path returns the store itself.

        Returns
        -------
        object

        Raises
        ------
        AccessDeniedError
            If the top-level segment is not readable. Raised before any
            traversal or computed field invocation.
        FieldNotFoundError
            If a segment does not exist.
        """
        permission = self.permission_for(path)
        if not permission.grants_read:
            logger.debug("Read DENY: path=%s permission=%s", path, permission)
            raise AccessDeniedError(path, "read", permission)
        return resolve_path(self, path)

    def get(self, path: str, default: object = None) -> object:
        """Like :meth:`read`, but return *default* when the path is absent.

        Access denial is still raised.
        """
        try:
            return self.read(path)
        except FieldNotFoundError:
            return default

    def write(self, path: str, value: object) -> None:
        """Assign *value* at *path*.

        A single-segment path overwrites that field. A nested path
        ``"a:b:c"`` replaces field ``a`` with ``{"b": {"c": value}}``;
        existing content under ``a`` is discarded, not merged.

        Raises
        ------
        AccessDeniedError
            If the top-level segment is not writable. The store is left
            unmodified.
        InvalidPathError
            If the path is empty or has an empty segment.
        CyclicStoreError
            If *value* is or contains this store.
        """
        head, rest = self._prepare_write(path, value)
        self._fields[head] = build_nested(rest, value)

    def write_entries(self, entries: Mapping[str, object]) -> None:
        """Write every ``path -> value`` pair of *entries* in iteration order.

        All entries are checked before any is applied: the first entry that
        would fail raises and the store is left unmodified.
        """
        prepared = [
            (self._prepare_write(path, value), value)
            for path, value in entries.items()
        ]
        for (head, rest), value in prepared:
            self._fields[head] = build_nested(rest, value)

    def entries(self) -> dict[str, object]:
        """Return a snapshot of all readable top-level fields in insertion order.

        Nested dicts, lists and tuples are copied, so mutating the snapshot
        does not affect the store. Nested stores and computed fields are
        returned by reference.
        """
        return {
            name: _snapshot(value)
            for name, value in self._fields.items()
            if self.allowed_to_read(name)
        }

    # ------------------------------------------------------------------
    # Raw access (used by path traversal and policy resolution)
    # ------------------------------------------------------------------

    def has_field(self, name: str) -> bool:
        return name in self._fields

    def raw_field(self, name: str, default: object = None) -> object:
        return self._fields.get(name, default)

    def raw_items(self) -> Iterator[tuple[str, object]]:
        return iter(list(self._fields.items()))

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(default_policy={self._default_policy.value!r}, "
            f"fields={list(self._fields)!r})"
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _prepare_write(self, path: str, value: object) -> tuple[str, list[str]]:
        """Gate and validate a write; return the top-level field and remaining segments."""
        permission = self.permission_for(path)
        if not permission.grants_write:
            logger.debug("Write DENY: path=%s permission=%s", path, permission)
            raise AccessDeniedError(path, "write", permission)

        head, *rest = split_write_path(path)
        if contains_container(value, self):
            raise CyclicStoreError(path)
        return head, rest



def _snapshot(value: object) -> object:
    if isinstance(value, dict):
        return {key: _snapshot(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_snapshot(item) for item in value]
    if isinstance(value, tuple):
        return tuple(_snapshot(item) for item in value)
    return value

class AdminStore(Store):
    """A store whose computed fields are invoked when read directly.

    On a plain :class:`Store`, reading a computed field with no further
    segment returns the enclosing store. An ``AdminStore`` returns the
    computed value instead.
    """

    elevated = True
