#!/usr/bin/env python3
"""Example: Declared stores and computed fields — aumos-permission-store

Declares restrictions on Store subclasses, nests stores, and shows how
computed fields read differently on a plain Store and an AdminStore.

Usage:
    python examples/02_declared_stores.py
"""
from __future__ import annotations

from aumos_permission_store import AdminStore, Store, StoreSchema


class UserStore(Store):
    restrictions = StoreSchema().restrict("name", "r")
    defaults = {"name": "John Doe"}


class AccountStore(AdminStore):
    restrictions = StoreSchema().restrict("credentials", "r")
    defaults = {"credentials": lambda: UserStore(initial={"token": "t-123"})}


def main() -> None:
    user = UserStore()
    print(f"User name: {user.read('name')}")
    print(f"Can rename user: {user.allowed_to_write('name')}")

    # A non-empty "user" field grants full access to "user:*" paths.
    session = Store(default_policy="none", initial={"user": user})
    print(f"Session user name: {session.read('user:name')}")

    account = AccountStore()
    print(f"Account token: {account.read('credentials:token')}")
    print(f"Credentials (computed): {account.read('credentials')!r}")


if __name__ == "__main__":
    main()
