"""Strict validation of role definitions against the permission catalog.

Pure validate-or-fail: nothing is printed or logged here. Runs over the full
configuration before any graph work so that an invalid configuration never
reaches the closure step.
"""

from __future__ import annotations

from typing import AbstractSet, Mapping

from ..exceptions import UnknownParentRoleError, UnknownPermissionError, UnknownRoleReferenceError
from .constants import Permissions
from .models import RoleDefinition
from .references import RoleReference, parse_permission_ref


def validate_roles(roles: Mapping[str, RoleDefinition], catalog: AbstractSet[str]) -> None:
    """Check every grant and parent reference of every role.

    Roles are checked in id order, grants in declaration order, so the
    first reported problem is deterministic.

    Raises:
        UnknownRoleReferenceError: A grant ``role:<id>`` names an undeclared role.
        UnknownPermissionError: A grant is not a catalog member.
        UnknownParentRoleError: An inherited parent is not a declared role.
    """
    for role_id in sorted(roles):
        role = roles[role_id]

        for permission in role.permissions:
            ref = parse_permission_ref(permission)
            if ref.node in catalog:
                continue
            if isinstance(ref, RoleReference):
                raise UnknownRoleReferenceError(role_id, permission)
            raise UnknownPermissionError(role_id, permission)

        for parent in role.inherits:
            if Permissions.role(parent) not in catalog:
                raise UnknownParentRoleError(role_id, parent)


__all__ = ["validate_roles"]
