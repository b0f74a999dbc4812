"""Convenience API for aumos-permission-store: one-call store construction.

Example
-------
::

    from aumos_permission_store import store_from_config
    store = store_from_config({"default_policy": "rw", "restrictions": {"age": "r"}})
    store.allowed_to_write("age")  # False

"""
from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from aumos_permission_store.permissions.schema_loader import SchemaLoader
from aumos_permission_store.store.container import Store


def store_from_config(
    source: Mapping[str, object] | str | Path,
    strict: bool = False,
) -> Store:
    """Build a store from a declaration.

    Parameters
    ----------
    source:
        A parsed declaration dict, a :class:`~pathlib.Path` to a YAML file,
        or a YAML document as a string.
    strict:
        Reject unknown top-level keys.

    Returns
    -------
    Store
        An :class:`~aumos_permission_store.store.container.AdminStore` when
        the declaration sets ``admin: true``.
    """
    loader = SchemaLoader(strict=strict)
    if isinstance(source, Path):
        config = loader.load(source)
    elif isinstance(source, str):
        config = loader.load_from_yaml_string(source)
    else:
        config = loader.load_from_dict(dict(source))
    return config.build_store()
