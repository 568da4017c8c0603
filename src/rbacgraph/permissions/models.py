"""RBAC configuration and result models.

Provides:
- ``RoleDefinition`` / ``RBACConfig`` — Pydantic models for the declarative
  input a :class:`~rbacgraph.permissions.engine.PermissionEngine` is built from.
- ``GraphStats`` / ``PermissionCheckResult`` — immutable query results.

Structural problems (illegal names, implied actions that are not declared,
role id/key mismatch) are rejected here, by pydantic. References from roles
into the permission catalog are checked later by the role validator, because
the catalog only exists once the modules are known.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .constants import DEFAULT_ACTION_HIERARCHY, ROLE_SCOPE

# Characters that belong to the permission-string grammar
_FORBIDDEN_NAME_CHARS = re.compile(r"[:.*\s]")
_FORBIDDEN_ROLE_ID_CHARS = re.compile(r"[:*\s]")


def _check_name(kind: str, name: str) -> str:
    if not name:
        raise ValueError(f"{kind} name must not be empty")
    if _FORBIDDEN_NAME_CHARS.search(name):
        raise ValueError(f"{kind} name '{name}' must not contain ':', '.', '*' or whitespace")
    return name


class RoleDefinition(BaseModel):
    """A named bundle of permissions.

    ``permissions`` may contain ``role:<id>`` entries to compose other roles
    explicitly; ``inherits`` lists parent role ids whose grants this role
    receives as well.
    """

    model_config = {"extra": "forbid", "frozen": True}

    id: str
    name: str
    permissions: tuple[str, ...] = ()
    inherits: tuple[str, ...] = ()
    description: Optional[str] = None

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not v:
            raise ValueError("Role id must not be empty")
        if _FORBIDDEN_ROLE_ID_CHARS.search(v):
            raise ValueError(f"Role id '{v}' must not contain ':', '*' or whitespace")
        return v

    @field_validator("inherits", mode="before")
    @classmethod
    def validate_inherits(cls, v: Any) -> Any:
        return () if v is None else v


class RBACConfig(BaseModel):
    """Declarative RBAC configuration.

    Example::

        RBACConfig(
            modules={"users": ["profile", "settings"], "posts": ["content"]},
            roles={
                "viewer": {"name": "Viewer", "permissions": ["posts:read"]},
                "editor": {"name": "Editor", "permissions": ["posts:update"], "inherits": ["viewer"]},
            },
        )

    A role's ``id`` defaults to its key in ``roles``. A flat mapping without a
    ``modules`` key (``{"users": ["profile"]}``) is read as the module
    declaration itself.
    """

    model_config = {"extra": "forbid", "frozen": True}

    modules: dict[str, tuple[str, ...]] = Field(
        default_factory=dict,
        description="Module name → ordered resource names",
    )
    roles: dict[str, RoleDefinition] = Field(
        default_factory=dict,
        description="Role id → role definition",
    )
    hierarchy: Optional[dict[str, tuple[str, ...]]] = Field(
        default=None,
        description="Action → implied actions; replaces the default CRUD chain",
    )

    @model_validator(mode="before")
    @classmethod
    def normalize_input(cls, data: Any) -> Any:
        """Accept the flat module mapping and fill role ids from their keys."""
        if not isinstance(data, Mapping):
            return data
        if "modules" not in data and data and all(isinstance(v, (list, tuple)) for v in data.values()):
            return {"modules": dict(data)}

        roles = data.get("roles")
        if isinstance(roles, Mapping):
            filled: dict[str, Any] = {}
            for key, role in roles.items():
                if isinstance(role, Mapping) and "id" not in role:
                    role = {**role, "id": key}
                filled[key] = role
            data = {**data, "roles": filled}
        return data

    @field_validator("modules")
    @classmethod
    def validate_modules(cls, v: dict[str, tuple[str, ...]]) -> dict[str, tuple[str, ...]]:
        for module, resources in v.items():
            _check_name("Module", module)
            if module == ROLE_SCOPE:
                raise ValueError(f"Module name '{ROLE_SCOPE}' is reserved for role references")
            seen: set[str] = set()
            for resource in resources:
                _check_name("Resource", resource)
                if resource in seen:
                    raise ValueError(f"Duplicate resource '{resource}' in module '{module}'")
                seen.add(resource)
        return v

    @field_validator("hierarchy")
    @classmethod
    def validate_hierarchy(
        cls, v: Optional[dict[str, tuple[str, ...]]]
    ) -> Optional[dict[str, tuple[str, ...]]]:
        """Implied actions must be declared keys; self-implication is dropped."""
        if v is None:
            return v
        if not v:
            raise ValueError("Action hierarchy must declare at least one action")
        normalized: dict[str, tuple[str, ...]] = {}
        for action, implied in v.items():
            _check_name("Action", action)
            for target in implied:
                if target not in v:
                    raise ValueError(f"Action '{action}' implies undeclared action '{target}'")
            # Reflexivity is implicit at query time
            normalized[action] = tuple(dict.fromkeys(t for t in implied if t != action))
        return normalized

    @model_validator(mode="after")
    def validate_role_keys(self) -> "RBACConfig":
        for key, role in self.roles.items():
            if role.id != key:
                raise ValueError(f"Role key '{key}' does not match role id '{role.id}'")
        return self

    @property
    def effective_hierarchy(self) -> Mapping[str, tuple[str, ...]]:
        """The configured hierarchy, or the default CRUD chain."""
        if self.hierarchy is None:
            return DEFAULT_ACTION_HIERARCHY
        return self.hierarchy

    @property
    def actions(self) -> tuple[str, ...]:
        """Known actions: exactly the keys of the effective hierarchy."""
        return tuple(self.effective_hierarchy)

    @property
    def role_ids(self) -> tuple[str, ...]:
        return tuple(self.roles)

    @property
    def resource_count(self) -> int:
        return sum(len(resources) for resources in self.modules.values())


# ── Query results ───────────────────────────────────────


@dataclass(frozen=True)
class GraphStats:
    """Size figures of a built permission graph."""

    total_permissions: int
    grant_relationships: int
    modules: int
    resources: int
    actions: int
    roles: int = 0


@dataclass(frozen=True)
class PermissionCheckResult:
    """Outcome of :meth:`PermissionEngine.check_detailed`."""

    allowed: bool
    permission: str
    held: tuple[str, ...]
    reason: str


__all__ = [
    "GraphStats",
    "PermissionCheckResult",
    "RBACConfig",
    "RoleDefinition",
]
