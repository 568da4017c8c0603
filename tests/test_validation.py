"""Tests for strict role validation."""

from __future__ import annotations

import pytest

from rbacgraph import (
    ConfigurationError,
    PermissionEngine,
    UnknownParentRoleError,
    UnknownPermissionError,
    UnknownRoleReferenceError,
)
from rbacgraph.permissions import RBACConfig, generate_catalog, validate_roles

MODULES = {"users": ["profile", "settings"], "system": ["logs"]}


def _validate(roles: dict) -> None:
    config = RBACConfig(modules=MODULES, roles=roles)
    catalog = generate_catalog(config.modules, config.actions, config.role_ids)
    validate_roles(config.roles, catalog)


class TestValidateRoles:
    """Tests for validate_roles()."""

    def test_valid_roles(self) -> None:
        """Literal grants, role references and parents that exist pass."""
        _validate(
            {
                "viewer": {"name": "Viewer", "permissions": ["users:read", "*:read"]},
                "manager": {
                    "name": "Manager",
                    "permissions": ["role:viewer", "users.profile:*", "*:*"],
                    "inherits": ["viewer"],
                },
            }
        )

    def test_unknown_role_reference(self) -> None:
        """role:<id> must name a declared role."""
        with pytest.raises(UnknownRoleReferenceError, match=r"Invalid role reference 'role:ghost'") as exc_info:
            _validate({"manager": {"name": "Manager", "permissions": ["role:ghost"]}})
        assert exc_info.value.role == "manager"
        assert exc_info.value.reference == "role:ghost"

    def test_invalid_permission_among_valid(self) -> None:
        """One bad grant fails the role even when the rest are fine."""
        with pytest.raises(UnknownPermissionError, match=r"Invalid permission 'users:fake_action'") as exc_info:
            _validate(
                {
                    "admin": {
                        "name": "Admin",
                        "permissions": ["users:read", "system:delete", "users:fake_action"],
                    }
                }
            )
        assert exc_info.value.role == "admin"
        assert exc_info.value.permission == "users:fake_action"

    def test_invalid_permission_with_inheritance(self) -> None:
        """A child role's own grants are validated too."""
        with pytest.raises(UnknownPermissionError, match=r"Invalid permission 'users:bad_action'"):
            _validate(
                {
                    "base": {"name": "Base", "permissions": ["users:read"]},
                    "child": {"name": "Child", "permissions": ["users:bad_action"], "inherits": ["base"]},
                }
            )

    def test_typo_in_action(self) -> None:
        """Resource-level typo is rejected."""
        with pytest.raises(UnknownPermissionError):
            _validate({"admin": {"name": "Admin", "permissions": ["users.profile:typo"]}})

    def test_unknown_resource(self) -> None:
        """Resource of another module is not in the catalog."""
        with pytest.raises(UnknownPermissionError):
            _validate({"admin": {"name": "Admin", "permissions": ["users.logs:read"]}})

    def test_unknown_parent(self) -> None:
        """Inheriting a missing role fails with the parent error."""
        with pytest.raises(UnknownParentRoleError, match="non-existent role") as exc_info:
            _validate({"admin": {"name": "Admin", "permissions": [], "inherits": ["ghost_role"]}})
        assert exc_info.value.parent == "ghost_role"
        assert exc_info.value.reference == "role:ghost_role"

    def test_parent_error_is_role_reference_error(self) -> None:
        """Unknown parents are a kind of unknown role reference."""
        assert issubclass(UnknownParentRoleError, UnknownRoleReferenceError)
        assert issubclass(UnknownRoleReferenceError, ConfigurationError)
        assert issubclass(UnknownPermissionError, ConfigurationError)

    def test_first_error_is_deterministic(self) -> None:
        """Roles are checked in id order."""
        with pytest.raises(UnknownPermissionError) as exc_info:
            _validate(
                {
                    "zeta": {"name": "Z", "permissions": ["users:zzz"]},
                    "alpha": {"name": "A", "permissions": ["users:aaa"]},
                }
            )
        assert exc_info.value.role == "alpha"


class TestEngineRejectsInvalidRoles:
    """Construction aborts on invalid roles."""

    def test_engine_raises(self) -> None:
        """No engine is produced for an invalid role."""
        with pytest.raises(UnknownPermissionError, match="Invalid permission"):
            PermissionEngine(
                {
                    "modules": {"users": ["profile"]},
                    "roles": {"admin": {"id": "admin", "name": "Admin", "permissions": ["users.profile:typo"]}},
                }
            )

    def test_engine_raises_for_missing_parent(self) -> None:
        """Inheriting from a non-existent role aborts construction."""
        with pytest.raises(UnknownParentRoleError, match="non-existent role"):
            PermissionEngine(
                {
                    "modules": {"users": ["profile"]},
                    "roles": {"admin": {"name": "Admin", "permissions": [], "inherits": ["ghost_role"]}},
                }
            )
