"""Tests for the generated accessor table and PermissionEngine.can()."""

from __future__ import annotations

import pytest

from rbacgraph import ConfigurationError, PermissionEngine, UnknownAccessorError
from rbacgraph.permissions import accessor_name, build_accessor_table

CRUD = ("create", "read", "update", "delete")


@pytest.fixture(scope="module")
def engine() -> PermissionEngine:
    return PermissionEngine({"modules": {"store": ["orders", "products"], "admin": ["dashboard"]}})


class TestAccessorName:
    """Tests for accessor_name()."""

    def test_joins_parts(self) -> None:
        assert accessor_name("read", "store") == "read_store"
        assert accessor_name("create", "store", "orders") == "create_store_orders"

    def test_normalizes(self) -> None:
        """Non-identifier characters become underscores, case is folded."""
        assert accessor_name("create", "my-store", "Orders") == "create_my_store_orders"


class TestBuildAccessorTable:
    """Tests for build_accessor_table()."""

    def test_module_and_resource_names(self) -> None:
        table = build_accessor_table({"store": ["orders"]}, CRUD)
        assert table["read_store"] == "store:read"
        assert table["create_store_orders"] == "store.orders:create"
        assert table["delete_orders"] == "store.orders:delete"

    def test_shared_resource_has_no_short_name(self) -> None:
        """A resource declared by two modules only gets long names."""
        table = build_accessor_table({"shop": ["items"], "warehouse": ["items"]}, CRUD)
        assert "read_items" not in table
        assert table["read_shop_items"] == "shop.items:read"
        assert table["read_warehouse_items"] == "warehouse.items:read"

    def test_colliding_names_are_dropped(self) -> None:
        """Two permissions mapping to one name leave it out."""
        table = build_accessor_table({"a_b": [], "a": ["b"]}, ["read"])
        assert "read_a_b" not in table
        assert table["read_a"] == "a:read"

    def test_no_wildcards(self) -> None:
        table = build_accessor_table({"store": ["orders"]}, CRUD)
        assert all("*" not in permission for permission in table.values())

    def test_read_only(self) -> None:
        table = build_accessor_table({"store": []}, CRUD)
        with pytest.raises(TypeError):
            table["x"] = "y"  # type: ignore[index]


class TestCan:
    """Tests for PermissionEngine.can()."""

    def test_module_level(self, engine: PermissionEngine) -> None:
        assert engine.can("read_store", ["store:read"]) is True

    def test_resource_level_long_name(self, engine: PermissionEngine) -> None:
        assert engine.can("create_store_orders", ["store.orders:create"]) is True

    def test_resource_level_short_name(self, engine: PermissionEngine) -> None:
        """dashboard is unique, so read_dashboard exists."""
        assert engine.can("read_dashboard", ["admin.dashboard:read"]) is True

    def test_follows_hierarchy(self, engine: PermissionEngine) -> None:
        assert engine.can("read_orders", ["store:delete"]) is True
        assert engine.can("delete_orders", ["store:read"]) is False

    def test_unknown_accessor(self, engine: PermissionEngine) -> None:
        with pytest.raises(UnknownAccessorError, match="eat_pizza"):
            engine.can("eat_pizza", ["store:read"])

    def test_unknown_accessor_is_not_configuration_error(self) -> None:
        """Accessor lookups fail at query time, not construction time."""
        assert issubclass(UnknownAccessorError, LookupError)
        assert not issubclass(UnknownAccessorError, ConfigurationError)

    def test_custom_action_accessors(self) -> None:
        engine = PermissionEngine(
            {"modules": {"blog": ["posts"]}, "hierarchy": {"approve": ["read"], "read": []}}
        )
        assert engine.accessors["approve_blog_posts"] == "blog.posts:approve"
        assert engine.can("read_posts", ["blog:approve"])
