#!/usr/bin/env python3
"""Example: Quickstart — aumos-permission-store

Minimal working example: declare restrictions, write and read nested
paths, and inspect what a caller is allowed to see.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install aumos-permission-store
"""
from __future__ import annotations

import aumos_permission_store as aps


def main() -> None:
    print(f"aumos-permission-store version: {aps.__version__}")

    # Step 1: Build a store with a read-only and a hidden field
    schema = aps.StoreSchema().restrict("age", "r").restrict("secret", "none")
    store = aps.Store(
        default_policy="rw",
        schema=schema,
        initial={"age": 30, "secret": "s3cr3t"},
    )

    # Step 2: Write nested paths
    store.write("profile:address:city", "Oslo")
    store.write("name", "Ann")
    print(f"City: {store.read('profile:address:city')}")

    # Step 3: Denied writes leave the store untouched
    try:
        store.write("age", 31)
    except aps.AccessDeniedError as exc:
        print(f"Denied: {exc}")

    # Step 4: Nested writes replace the whole top-level field
    store.write("profile:phone", "555-0100")
    print(f"Profile after second write: {store.read('profile')}")

    # Step 5: Only readable fields are exported
    print(f"Entries: {store.entries()}")


if __name__ == "__main__":
    main()
