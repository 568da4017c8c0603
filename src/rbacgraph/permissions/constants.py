"""Permission constants and string builders for rbacgraph.

Provides:
- ``Actions`` — the default CRUD action labels.
- ``DEFAULT_ACTION_HIERARCHY`` — action → implied actions (delete > update > create > read).
- ``Permissions`` — builders for every permission-string shape.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

# Separators of the permission-string grammar
ACTION_SEPARATOR = ":"
RESOURCE_SEPARATOR = "."
WILDCARD = "*"
ROLE_SCOPE = "role"


class Actions:
    """Default CRUD action labels.

    Custom hierarchies may declare any other labels; these are only the
    names used by :data:`DEFAULT_ACTION_HIERARCHY`.
    """

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"

    ALL = frozenset({"create", "read", "update", "delete"})


# Action → actions it implies directly. Must form a DAG.
DEFAULT_ACTION_HIERARCHY: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        Actions.DELETE: (Actions.UPDATE, Actions.CREATE, Actions.READ),
        Actions.UPDATE: (Actions.CREATE, Actions.READ),
        Actions.CREATE: (Actions.READ,),
        Actions.READ: (),
    }
)


class Permissions:
    """Builders for canonical permission strings.

    Shapes::

        Permissions.module("users", "read")              → "users:read"
        Permissions.resource("users", "profile", "read") → "users.profile:read"
        Permissions.wildcard("delete")                   → "*:delete"
        Permissions.module_wildcard("users")             → "users:*"
        Permissions.role("editor")                       → "role:editor"
    """

    GLOBAL_WILDCARD = f"{WILDCARD}{ACTION_SEPARATOR}{WILDCARD}"  # "*:*"

    @staticmethod
    def scope(module: str, resource: str | None = None) -> str:
        """Return the scope part of a permission (``users`` or ``users.profile``)."""
        if resource is None:
            return module
        return f"{module}{RESOURCE_SEPARATOR}{resource}"

    @staticmethod
    def at(scope: str, action: str) -> str:
        """Join a scope and an action: ``at("users.profile", "read")``."""
        return f"{scope}{ACTION_SEPARATOR}{action}"

    @staticmethod
    def module(module: str, action: str) -> str:
        return Permissions.at(module, action)

    @staticmethod
    def resource(module: str, resource: str, action: str) -> str:
        return Permissions.at(Permissions.scope(module, resource), action)

    @staticmethod
    def wildcard(action: str) -> str:
        """Global wildcard for an action: holds it on every module and resource."""
        return Permissions.at(WILDCARD, action)

    @staticmethod
    def module_wildcard(module: str) -> str:
        return Permissions.at(module, WILDCARD)

    @staticmethod
    def resource_wildcard(module: str, resource: str) -> str:
        return Permissions.at(Permissions.scope(module, resource), WILDCARD)

    @staticmethod
    def role(role_id: str) -> str:
        """Node identifier of a role inside the permission graph."""
        return Permissions.at(ROLE_SCOPE, role_id)


__all__ = [
    "ACTION_SEPARATOR",
    "Actions",
    "DEFAULT_ACTION_HIERARCHY",
    "Permissions",
    "RESOURCE_SEPARATOR",
    "ROLE_SCOPE",
    "WILDCARD",
]
