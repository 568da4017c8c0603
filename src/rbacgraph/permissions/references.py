"""Typed permission references.

A permission granted by a role is either a literal permission string
(``users.profile:read``) or a reference to another role (``role:editor``).
The two are kept apart as a tagged variant while configuration is checked,
and only collapse to a single string node id when stored in the graph.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .constants import ACTION_SEPARATOR, ROLE_SCOPE, Permissions

_ROLE_PREFIX = f"{ROLE_SCOPE}{ACTION_SEPARATOR}"


@dataclass(frozen=True)
class PermissionLiteral:
    """A plain permission string such as ``users:read`` or ``*:delete``."""

    value: str

    @property
    def node(self) -> str:
        return self.value


@dataclass(frozen=True)
class RoleReference:
    """A reference to a declared role, stored in the graph as ``role:<id>``."""

    role_id: str

    @property
    def node(self) -> str:
        return Permissions.role(self.role_id)


PermissionRef = Union[PermissionLiteral, RoleReference]


def is_role_node(permission: str) -> bool:
    """Return True if ``permission`` has the ``role:<id>`` shape."""
    return permission.startswith(_ROLE_PREFIX)


def parse_permission_ref(permission: str) -> PermissionRef:
    """Classify a granted permission string.

    Example::

        >>> parse_permission_ref("role:viewer")
        RoleReference(role_id='viewer')
        >>> parse_permission_ref("posts:update")
        PermissionLiteral(value='posts:update')
    """
    if is_role_node(permission):
        return RoleReference(permission[len(_ROLE_PREFIX) :])
    return PermissionLiteral(permission)


__all__ = [
    "PermissionLiteral",
    "PermissionRef",
    "RoleReference",
    "is_role_node",
    "parse_permission_ref",
]
