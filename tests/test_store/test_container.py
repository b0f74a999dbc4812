"""Tests for Store: gated read/write, entries and construction."""
from __future__ import annotations

import logging

import pytest

from aumos_permission_store.errors import (
    AccessDeniedError,
    CyclicStoreError,
    FieldNotFoundError,
    InvalidPathError,
    InvalidPermissionError,
)
from aumos_permission_store.permissions.permission import Permission
from aumos_permission_store.permissions.resolver import StoreSchema
from aumos_permission_store.store.container import AdminStore, Store


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def store() -> Store:
    return Store(
        default_policy="rw",
        schema=StoreSchema({"age": "r", "secret": "none", "password": "w"}),
        initial={"age": 30, "secret": "s3cr3t", "password": "hunter2"},
    )


class UserStore(Store):
    restrictions = StoreSchema().restrict("name", "r").restrict("token", "none")
    defaults = {"name": "John Doe", "token": "abc", "prefs": {"theme": "dark"}}


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_default_policy_is_read_write(self) -> None:
        assert Store().default_policy is Permission.READ_WRITE

    def test_default_policy_parsed_from_string(self) -> None:
        assert Store(default_policy="read").default_policy is Permission.READ

    def test_invalid_default_policy_raises(self) -> None:
        with pytest.raises(InvalidPermissionError):
            Store(default_policy="everything")

    def test_invalid_default_policy_assignment_raises(self) -> None:
        store = Store()
        with pytest.raises(InvalidPermissionError):
            store.default_policy = "x"
        assert store.default_policy is Permission.READ_WRITE

    def test_initial_fields_seeded_without_checks(self) -> None:
        store = Store(default_policy="none", initial={"a": 1})
        assert store.raw_field("a") == 1
        assert len(store) == 1

    @pytest.mark.parametrize("name", ["a:b", ":a", ""])
    def test_seeded_field_name_must_be_single_segment(self, name: str) -> None:
        with pytest.raises(InvalidPathError):
            Store(initial={name: 1})

    def test_class_default_name_must_be_single_segment(self) -> None:
        class BadStore(Store):
            defaults = {"profile:city": "Oslo"}

        with pytest.raises(InvalidPathError):
            BadStore()

    def test_empty_store_is_empty(self) -> None:
        assert len(Store()) == 0
        assert Store().entries() == {}

    def test_repr(self) -> None:
        store = Store(default_policy="r", initial={"a": 1})
        assert repr(store) == "Store(default_policy='r', fields=['a'])"


class TestClassLevelDeclarations:
    def test_class_restrictions_apply(self) -> None:
        user = UserStore()
        assert user.read("name") == "John Doe"
        with pytest.raises(AccessDeniedError):
            user.write("name", "Ann")

    def test_class_defaults_copied_per_instance(self) -> None:
        first = UserStore()
        second = UserStore()
        first.read("prefs")["theme"] = "light"  # type: ignore[index]
        assert second.read("prefs:theme") == "dark"
        assert UserStore.defaults["prefs"] == {"theme": "dark"}

    def test_instance_schema_layered_over_class(self) -> None:
        user = UserStore(schema=StoreSchema({"name": "rw", "email": "r"}))
        assert user.allowed_to_write("name") is True
        assert user.allowed_to_write("email") is False
        assert user.allowed_to_read("token") is False
        assert UserStore().allowed_to_write("name") is False

    def test_initial_overrides_class_defaults(self) -> None:
        user = UserStore(initial={"name": "Ann"})
        assert user.read("name") == "Ann"

    def test_base_class_schema_untouched(self) -> None:
        UserStore()
        assert len(Store.restrictions) == 0

    def test_restrict_through_instance_schema_is_private(self) -> None:
        first = Store()
        second = Store()
        first.schema.restrict("secret", "none")
        assert first.allowed_to_read("secret") is False
        assert second.allowed_to_read("secret") is True
        assert "secret" not in Store.restrictions

    def test_restrict_through_subclass_instance_is_private(self) -> None:
        first = UserStore()
        first.schema.restrict("prefs", "none")
        assert UserStore().allowed_to_read("prefs") is True
        assert "prefs" not in UserStore.restrictions


# ---------------------------------------------------------------------------
# allowed_to_read / allowed_to_write
# ---------------------------------------------------------------------------


class TestAllowed:
    @pytest.mark.parametrize(
        ("path", "can_read", "can_write"),
        [
            ("age", True, False),
            ("password", False, True),
            ("secret", False, False),
            ("name", True, True),
            ("age:nested:deep", True, False),
        ],
    )
    def test_checks(self, store: Store, path: str, can_read: bool, can_write: bool) -> None:
        assert store.allowed_to_read(path) is can_read
        assert store.allowed_to_write(path) is can_write

    def test_permission_for(self, store: Store) -> None:
        assert store.permission_for("secret:x") is Permission.NONE

    def test_default_policy_change_applies_to_undeclared(self, store: Store) -> None:
        store.default_policy = "r"
        assert store.allowed_to_write("name") is False
        assert store.allowed_to_read("name") is True
        assert store.allowed_to_write("password") is True


# ---------------------------------------------------------------------------
# read
# ---------------------------------------------------------------------------


class TestRead:
    def test_read_declared_read_only(self, store: Store) -> None:
        assert store.read("age") == 30

    def test_read_none_denied(self, store: Store) -> None:
        with pytest.raises(AccessDeniedError) as exc_info:
            store.read("secret")
        assert exc_info.value.operation == "read"
        assert exc_info.value.permission is Permission.NONE
        assert exc_info.value.path == "secret"

    def test_read_write_only_denied(self, store: Store) -> None:
        with pytest.raises(AccessDeniedError):
            store.read("password")

    def test_denied_error_is_permission_error(self, store: Store) -> None:
        with pytest.raises(PermissionError):
            store.read("secret")

    def test_denied_before_traversal_of_missing_path(self, store: Store) -> None:
        with pytest.raises(AccessDeniedError):
            store.read("secret:does:not:exist")

    def test_empty_path_returns_store(self, store: Store) -> None:
        assert store.read("") is store

    def test_missing_field_raises_not_found(self, store: Store) -> None:
        with pytest.raises(FieldNotFoundError):
            store.read("missing")

    def test_get_returns_default_for_missing(self, store: Store) -> None:
        assert store.get("missing") is None
        assert store.get("missing:deep", default=0) == 0

    def test_get_still_raises_access_denied(self, store: Store) -> None:
        with pytest.raises(AccessDeniedError):
            store.get("secret")

    def test_nested_store_not_rechecked(self) -> None:
        inner = Store(default_policy="none", initial={"hidden": "value"})
        outer = Store(default_policy="r", initial={"inner": inner})
        assert outer.read("inner:hidden") == "value"
        with pytest.raises(AccessDeniedError):
            inner.read("hidden")

    def test_read_list_element(self) -> None:
        store = Store(initial={"tags": ["a", "b"]})
        assert store.read("tags:1") == "b"

    def test_read_denial_logged(
        self, store: Store, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="aumos_permission_store"):
            with pytest.raises(AccessDeniedError):
                store.read("secret")
        assert any("Read DENY" in record.message for record in caplog.records)


# ---------------------------------------------------------------------------
# write
# ---------------------------------------------------------------------------


class TestWrite:
    def test_write_then_read(self, store: Store) -> None:
        store.write("name", "Ann")
        assert store.read("name") == "Ann"

    def test_write_overwrites(self, store: Store) -> None:
        store.write("name", "Ann")
        store.write("name", "Bob")
        assert store.read("name") == "Bob"

    def test_nested_write_then_read(self, store: Store) -> None:
        store.write("profile:address:city", "Oslo")
        assert store.read("profile:address:city") == "Oslo"
        assert store.read("profile") == {"address": {"city": "Oslo"}}

    def test_nested_write_replaces_not_merges(self, store: Store) -> None:
        store.write("a:b", 1)
        store.write("a:c", 2)
        assert store.read("a") == {"c": 2}
        with pytest.raises(FieldNotFoundError):
            store.read("a:b")
        assert store.get("a:b") is None

    def test_nested_write_discards_existing_non_dict(self, store: Store) -> None:
        store.write("a", [1, 2, 3])
        store.write("a:b", 1)
        assert store.read("a") == {"b": 1}

    def test_write_to_write_only_field(self, store: Store) -> None:
        store.write("password", "new")
        assert store.raw_field("password") == "new"

    def test_write_read_only_denied_and_unmodified(self, store: Store) -> None:
        before = dict(store.raw_items())
        with pytest.raises(AccessDeniedError) as exc_info:
            store.write("age", 31)
        assert exc_info.value.operation == "write"
        assert dict(store.raw_items()) == before

    def test_nested_write_read_only_denied(self, store: Store) -> None:
        with pytest.raises(AccessDeniedError):
            store.write("age:years", 31)
        assert store.read("age") == 30

    def test_write_none_denied(self, store: Store) -> None:
        with pytest.raises(AccessDeniedError):
            store.write("secret", "x")

    def test_empty_path_rejected(self, store: Store) -> None:
        with pytest.raises(InvalidPathError):
            store.write("", 1)

    def test_empty_segment_rejected_without_mutation(self, store: Store) -> None:
        with pytest.raises(InvalidPathError):
            store.write("a::b", 1)
        assert not store.has_field("a")

    def test_write_nested_store(self, store: Store) -> None:
        child = Store(initial={"x": 1})
        store.write("child", child)
        assert store.read("child") is child
        assert store.read("child:x") == 1

    def test_write_self_rejected(self, store: Store) -> None:
        with pytest.raises(CyclicStoreError):
            store.write("me", store)
        assert not store.has_field("me")

    def test_write_indirect_cycle_rejected(self, store: Store) -> None:
        child = Store()
        store.write("child", child)
        with pytest.raises(CyclicStoreError):
            child.write("parent", {"ref": [store]})
        assert not child.has_field("parent")

    def test_cycle_through_existing_nesting_rejected(self) -> None:
        outer = Store()
        inner = Store(initial={"outer": outer})
        with pytest.raises(CyclicStoreError):
            outer.write("inner", inner)
        assert not outer.has_field("inner")

    def test_write_denial_logged(
        self, store: Store, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="aumos_permission_store"):
            with pytest.raises(AccessDeniedError):
                store.write("age", 1)
        assert any("Write DENY" in record.message for record in caplog.records)


# ---------------------------------------------------------------------------
# write_entries
# ---------------------------------------------------------------------------


class TestWriteEntries:
    def test_writes_all_in_order(self, store: Store) -> None:
        store.write_entries({"name": "Ann", "profile:city": "Oslo", "tags": ["a"]})
        assert store.read("name") == "Ann"
        assert store.read("profile:city") == "Oslo"
        assert list(store.entries())[-3:] == ["name", "profile", "tags"]

    def test_later_entry_wins_on_same_field(self, store: Store) -> None:
        store.write_entries({"a:b": 1, "a:c": 2})
        assert store.read("a") == {"c": 2}

    def test_denied_entry_fails_whole_batch(self, store: Store) -> None:
        with pytest.raises(AccessDeniedError) as exc_info:
            store.write_entries({"name": "Ann", "age": 31, "city": "Oslo"})
        assert exc_info.value.path == "age"
        assert not store.has_field("name")
        assert not store.has_field("city")
        assert store.read("age") == 30

    def test_invalid_path_fails_whole_batch(self, store: Store) -> None:
        with pytest.raises(InvalidPathError):
            store.write_entries({"name": "Ann", "": 1})
        assert not store.has_field("name")

    def test_empty_batch_is_noop(self, store: Store) -> None:
        before = store.entries()
        store.write_entries({})
        assert store.entries() == before


# ---------------------------------------------------------------------------
# entries
# ---------------------------------------------------------------------------


class TestEntries:
    def test_only_readable_fields(self, store: Store) -> None:
        store.write("name", "Ann")
        assert store.entries() == {"age": 30, "name": "Ann"}

    def test_insertion_order(self) -> None:
        store = Store()
        for name in ["z", "a", "m"]:
            store.write(name, name.upper())
        assert list(store.entries()) == ["z", "a", "m"]

    def test_never_includes_default_policy(self, store: Store) -> None:
        assert "default_policy" not in store.entries()
        assert "defaultPolicy" not in store.entries()

    def test_snapshot_not_writable_through(self, store: Store) -> None:
        snapshot = store.entries()
        snapshot["age"] = 99
        snapshot["injected"] = True
        assert store.read("age") == 30
        assert not store.has_field("injected")

    def test_nested_values_copied_in_snapshot(self) -> None:
        store = Store(initial={"profile": {"city": "Oslo", "tags": ["a"]}})
        snapshot = store.entries()
        snapshot["profile"]["city"] = "Bergen"  # type: ignore[index]
        snapshot["profile"]["tags"].append("b")  # type: ignore[index]
        assert store.read("profile") == {"city": "Oslo", "tags": ["a"]}

    def test_nested_store_returned_by_reference(self) -> None:
        child = Store(initial={"x": 1})
        store = Store(initial={"child": {"store": child}})
        assert store.entries()["child"]["store"] is child  # type: ignore[index]

    def test_follows_default_policy_changes(self) -> None:
        store = Store(initial={"a": 1})
        store.default_policy = "w"
        assert store.entries() == {}

    def test_includes_escalated_user(self) -> None:
        store = Store(schema=StoreSchema({"user": "none"}), initial={"user": {"id": 1}})
        assert store.entries() == {"user": {"id": 1}}

    def test_computed_fields_returned_uninvoked(self) -> None:
        def compute() -> int:
            return 1

        store = Store(initial={"fn": compute})
        assert store.entries() == {"fn": compute}


# ---------------------------------------------------------------------------
# Properties and scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    @pytest.mark.parametrize(
        ("path", "value"),
        [
            ("name", "Ann"),
            ("a:b", 1),
            ("a:b:c:d", [1, 2]),
            ("flag", None),
            ("nested:store", Store()),
        ],
    )
    def test_write_then_read_round_trip(self, path: str, value: object) -> None:
        store = Store(default_policy="rw")
        store.write(path, value)
        assert store.read(path) is value

    def test_declared_none_field(self) -> None:
        store = Store(schema=StoreSchema({"hidden": "none"}), initial={"hidden": 1})
        assert store.allowed_to_read("hidden") is False
        assert store.allowed_to_write("hidden") is False
        assert "hidden" not in store.entries()

    def test_user_escalation_overrides_none(self) -> None:
        store = Store(
            default_policy="none",
            schema=StoreSchema({"user": "none"}),
            initial={"user": {"name": "Ann"}},
        )
        store.write("user:name", "Bob")
        assert store.read("user:name") == "Bob"
        assert store.read("user") == {"name": "Bob"}

    def test_age_scenario(self) -> None:
        store = Store(
            default_policy="rw",
            schema=StoreSchema({"age": "r"}),
            initial={"age": 30},
        )
        with pytest.raises(AccessDeniedError):
            store.write("age", 30)
        assert store.read("age") == 30
        store.write("name", "Ann")
        assert store.read("name") == "Ann"

    def test_admin_store_is_a_store(self) -> None:
        admin = AdminStore(default_policy="r")
        assert isinstance(admin, Store)
        assert admin.elevated is True
        assert Store.elevated is False
