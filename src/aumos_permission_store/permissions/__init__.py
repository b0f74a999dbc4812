"""Permission values, policy resolution and store declarations.

Example
-------
::

    from aumos_permission_store.permissions import Permission, StoreSchema

    schema = StoreSchema().restrict("age", Permission.READ)
    schema.declared_restriction("age").grants_write  # False
"""
from __future__ import annotations

from aumos_permission_store.permissions.permission import Permission
from aumos_permission_store.permissions.resolver import (
    ESCALATION_FIELD,
    StoreSchema,
    is_escalated,
    resolve_permission,
    top_level_segment,
)

__all__ = [
    "ESCALATION_FIELD",
    "Permission",
    "StoreSchema",
    "is_escalated",
    "resolve_permission",
    "top_level_segment",
]
