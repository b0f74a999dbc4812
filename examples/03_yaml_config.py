#!/usr/bin/env python3
"""Example: Loading a store declaration from YAML — aumos-permission-store

Usage:
    python examples/03_yaml_config.py
"""
from __future__ import annotations

import logging

from aumos_permission_store import SchemaLoader

_CONFIG = """
version: "1.0"
default_policy: rw
restrictions:
  age: r
  password: w
  secret: none
fields:
  age: 30
  password: hunter2
  secret: s3cr3t
"""


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)

    config = SchemaLoader(strict=True).load_from_yaml_string(_CONFIG, config_path="inline")
    store = config.build_store()

    for path in ["age", "password", "secret", "name"]:
        print(
            f"{path:10s} read={store.allowed_to_read(path)!s:5s} "
            f"write={store.allowed_to_write(path)}"
        )
    print(f"Entries: {store.entries()}")


if __name__ == "__main__":
    main()
