"""Unified exception hierarchy for rbacgraph.

All errors inherit from RBACGraphError. This module provides:
- Base exception hierarchy with stable error codes
- ErrorRegistry for mapping codes back to exception types

Construction-time errors (everything under ConfigurationError) are fatal to
the engine being built: no partially constructed instance is ever returned.

Usage:
    from rbacgraph.exceptions import (
        CircularDependencyError,
        ConfigurationError,
        UnknownPermissionError,
    )

    try:
        engine = PermissionEngine(config)
    except ConfigurationError as e:
        log.error("rejected RBAC config [%s]: %s", e.code, e.message)
"""

from __future__ import annotations

from typing import Any, Callable, Sequence, TypeVar, cast

__all__ = [
    # Base hierarchy
    "RBACGraphError",
    "ConfigurationError",
    "UnknownPermissionError",
    "UnknownRoleReferenceError",
    "UnknownParentRoleError",
    "CircularDependencyError",
    "UnknownAccessorError",
    # Registry
    "ErrorRegistry",
    "error_registry",
    "register_error",
]


# ---- Exception Hierarchy ----------------------------------------------------


class RBACGraphError(Exception):
    """Base exception for rbacgraph.

    Attributes:
        code: Stable error code string (e.g. "CIRCULAR_DEPENDENCY").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(RBACGraphError):
    """Invalid RBAC configuration. Aborts engine construction."""

    code: str = "CONFIGURATION_ERROR"
    message: str = "Invalid RBAC configuration"


class UnknownPermissionError(ConfigurationError):
    """A role grants a permission string that is not in the catalog."""

    code: str = "UNKNOWN_PERMISSION"

    def __init__(self, role: str, permission: str) -> None:
        self.role = role
        self.permission = permission
        super().__init__(
            f"Invalid permission '{permission}' in role '{role}'",
            role=role,
            permission=permission,
        )


class UnknownRoleReferenceError(ConfigurationError):
    """A role grants ``role:<id>`` for an id that is not declared."""

    code: str = "UNKNOWN_ROLE_REFERENCE"

    def __init__(self, role: str, reference: str, message: str | None = None, **kwargs: Any) -> None:
        self.role = role
        self.reference = reference
        super().__init__(
            message or f"Invalid role reference '{reference}' in role '{role}'",
            role=role,
            reference=reference,
            **kwargs,
        )


class UnknownParentRoleError(UnknownRoleReferenceError):
    """A role inherits from a parent id that is not declared."""

    code: str = "UNKNOWN_PARENT_ROLE"

    def __init__(self, role: str, parent: str) -> None:
        self.parent = parent
        super().__init__(
            role,
            f"role:{parent}",
            message=f"Role '{role}' inherits from non-existent role '{parent}'",
            parent=parent,
        )


class CircularDependencyError(ConfigurationError):
    """The direct implication graph contains a cycle.

    Attributes:
        node: One permission node lying on the cycle.
        cycle: The nodes of the cycle in edge order, closed by repeating
            the first node (``("role:a", "role:b", "role:a")``).
    """

    code: str = "CIRCULAR_DEPENDENCY"

    def __init__(self, node: str, cycle: Sequence[str] = ()) -> None:
        self.node = node
        self.cycle = tuple(cycle) or (node, node)
        super().__init__(
            f"Circular dependency detected at '{node}': {' -> '.join(self.cycle)}",
            node=node,
            cycle=self.cycle,
        )


class UnknownAccessorError(RBACGraphError, LookupError):
    """Lookup of a named accessor that was never generated.

    Raised by the accessor sugar at query time only; it is not a
    ConfigurationError and never aborts construction.
    """

    code: str = "UNKNOWN_ACCESSOR"

    def __init__(self, accessor: str) -> None:
        self.accessor = accessor
        super().__init__(f"Unknown permission accessor '{accessor}'", accessor=accessor)


# ---- Error Registry ----------------------------------------------------------

_E = TypeVar("_E", bound=type[RBACGraphError])


class ErrorRegistry:
    """Registry for mapping stable error codes to exception types."""

    def __init__(self) -> None:
        self._errors: dict[str, type[RBACGraphError]] = {}

    def register(self, code: str, error_cls: type[RBACGraphError]) -> None:
        self._errors[code] = error_cls

    def get(self, code: str) -> type[RBACGraphError] | None:
        return self._errors.get(code)

    def all(self) -> dict[str, type[RBACGraphError]]:
        return dict(self._errors)


error_registry = ErrorRegistry()


def register_error(code: str) -> Callable[[_E], _E]:
    """Decorator to register a custom error type.

    Usage:
        @register_error("POLICY_ERROR")
        class PolicyError(RBACGraphError):
            code = "POLICY_ERROR"
    """

    def decorator(cls: _E) -> _E:
        error_registry.register(code, cls)
        return cls

    return cast(Callable[[_E], _E], decorator)


# Register base errors
error_registry.register("INTERNAL_ERROR", RBACGraphError)
error_registry.register("CONFIGURATION_ERROR", ConfigurationError)
error_registry.register("UNKNOWN_PERMISSION", UnknownPermissionError)
error_registry.register("UNKNOWN_ROLE_REFERENCE", UnknownRoleReferenceError)
error_registry.register("UNKNOWN_PARENT_ROLE", UnknownParentRoleError)
error_registry.register("CIRCULAR_DEPENDENCY", CircularDependencyError)
error_registry.register("UNKNOWN_ACCESSOR", UnknownAccessorError)
