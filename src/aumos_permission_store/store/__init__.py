"""The permission-gated nested store and its path handling.

Example
-------
::

    from aumos_permission_store.store import Store

    store = Store(default_policy="rw")
    store.write("profile:address:city", "Oslo")
    store.read("profile:address:city")  # "Oslo"
"""
from __future__ import annotations

from aumos_permission_store.store.container import AdminStore, Store
from aumos_permission_store.store.paths import build_nested, resolve_path

__all__ = [
    "AdminStore",
    "Store",
    "build_nested",
    "resolve_path",
]
