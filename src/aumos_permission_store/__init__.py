"""aumos-permission-store — permission-gated hierarchical key/value store.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import aumos_permission_store as aps
>>> store = aps.Store(default_policy="rw", schema=aps.StoreSchema().restrict("age", "r"))
>>> store.allowed_to_write("age")
False
>>> store.write("name", "Ann")
>>> store.read("name")
'Ann'
"""
from __future__ import annotations

__version__: str = "0.1.0"

from aumos_permission_store.convenience import store_from_config

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
from aumos_permission_store.errors import (
    AccessDeniedError,
    CyclicStoreError,
    FieldNotFoundError,
    InvalidPathError,
    InvalidPermissionError,
    StoreError,
)

# ---------------------------------------------------------------------------
# Permissions
# ---------------------------------------------------------------------------
from aumos_permission_store.permissions.permission import Permission
from aumos_permission_store.permissions.resolver import StoreSchema, resolve_permission
from aumos_permission_store.permissions.schema_loader import (
    SchemaConfigError,
    SchemaLoader,
    StoreConfig,
)

# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------
from aumos_permission_store.store.container import AdminStore, Store

__all__ = [
    "__version__",
    "store_from_config",
    # Errors
    "AccessDeniedError",
    "CyclicStoreError",
    "FieldNotFoundError",
    "InvalidPathError",
    "InvalidPermissionError",
    "StoreError",
    # Permissions
    "Permission",
    "SchemaConfigError",
    "SchemaLoader",
    "StoreConfig",
    "StoreSchema",
    "resolve_permission",
    # Store
    "AdminStore",
    "Store",
]
