"""Effective-permission resolution for store paths.

Only the top-level segment of a path (text before the first colon) is
consulted. Resolution order:

1. Escalation: the store currently holds a non-empty ``user`` field and the
   segment is ``user`` -> ``rw``.
2. The declared restriction for the segment in the store's schema.
3. The store's default policy.

Example
-------
::

    schema = StoreSchema().restrict("age", "r")
    store = Store(default_policy="rw", schema=schema)
    resolve_permission(store, "age")        # Permission.READ
    resolve_permission(store, "name:first") # Permission.READ_WRITE
"""
from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING

from aumos_permission_store.permissions.permission import Permission

if TYPE_CHECKING:
    from aumos_permission_store.store.container import Store

logger = logging.getLogger(__name__)

ESCALATION_FIELD: str = "user"
PATH_SEPARATOR: str = ":"


def top_level_segment(path: str) -> str:
    """Return the text of *path* before the first colon."""
    return path.split(PATH_SEPARATOR, 1)[0]


class StoreSchema:
    """Table of declared per-field permission restrictions.

    A schema is usually declared once on a :class:`Store` subclass and
    shared by all of its instances. Restrictions are keyed by top-level
    field name.

    Parameters
    ----------
    restrictions:
        Optional initial mapping of field name to permission (either a
        :class:`Permission` or one of its string spellings).

    Examples
    --------
    ::

        schema = (
            StoreSchema()
            .restrict("name", "r")
            .restrict("password", "w")
        )
        schema.declared_restriction("name")   # Permission.READ
        schema.declared_restriction("email")  # None
    """

    def __init__(
        self, restrictions: Mapping[str, Permission | str] | None = None
    ) -> None:
        self._restrictions: dict[str, Permission] = {}
        for name, permission in (restrictions or {}).items():
            self.restrict(name, permission)

    def restrict(self, field_name: str, permission: Permission | str) -> StoreSchema:
        """Declare *permission* for *field_name* and return the schema."""
        self._restrictions[field_name] = Permission.parse(permission)
        return self

    def declared_restriction(self, field_name: str) -> Permission | None:
        """Return the declared permission for *field_name*, or ``None``."""
        return self._restrictions.get(field_name)

    def extend(self, other: StoreSchema) -> StoreSchema:
        """Return a new schema with *other*'s restrictions layered over this one."""
        merged = StoreSchema(self._restrictions)
        for name, permission in other.items():
            merged.restrict(name, permission)
        return merged

    def items(self) -> Iterator[tuple[str, Permission]]:
        return iter(self._restrictions.items())

    def __contains__(self, field_name: object) -> bool:
        return field_name in self._restrictions

    def __len__(self) -> int:
        return len(self._restrictions)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StoreSchema):
            return NotImplemented
        return self._restrictions == other._restrictions

    def __repr__(self) -> str:
        body = ", ".join(f"{k}={v.value}" for k, v in self._restrictions.items())
        return f"StoreSchema({body})"


def is_escalated(store: Store, field_name: str) -> bool:
    """Return True when the escalation rule applies to *field_name*.

    Evaluated against the store's current contents on every call.
    """
    if field_name != ESCALATION_FIELD:
        return False
    return bool(store.raw_field(ESCALATION_FIELD))


def resolve_permission(store: Store, path: str) -> Permission:
    """Return the effective permission of *path* on *store*.

    Parameters
    ----------
    store:
        The store whose schema and default policy are consulted.
    path:
        A full colon-delimited path. Only its top-level segment is used.

    Returns
    -------
    Permission
    """
    key = top_level_segment(path)
    if is_escalated(store, key):
        logger.debug("Escalated %r to rw: store holds a non-empty user field", path)
        return Permission.READ_WRITE

    declared = store.schema.declared_restriction(key)
    if declared is not None:
        return declared
    return store.default_policy
