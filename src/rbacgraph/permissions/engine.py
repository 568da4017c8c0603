"""Permission engine: build once, answer permission checks in O(1).

Construction runs the whole pipeline synchronously::

    catalog → role validation → direct edges → cycle check → closure → freeze

and either yields a ready, immutable engine or raises a
:class:`~rbacgraph.exceptions.ConfigurationError`. There is no way to observe
a partially built engine and no mutation API afterwards; a configuration
change means building a new engine (see :class:`~rbacgraph.permissions.holder.EngineHolder`).

Scaling note: the closed graph is a mapping of sets and can approach O(V²)
entries for densely connected configurations (many modules and resources
under a wildcard). That memory buys single-lookup checks at runtime.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Iterable, Iterator, Mapping, Union
from uuid import uuid4

from pydantic import ValidationError

from ..exceptions import ConfigurationError, UnknownAccessorError
from ..logging import BuildObserver, safe_preview
from .accessors import build_accessor_table
from .catalog import generate_catalog
from .constants import Permissions
from .graph import FrozenPermissionGraph, build_direct_graph, detect_cycles, transitive_closure
from .models import GraphStats, PermissionCheckResult, RBACConfig
from .validation import validate_roles

logger = logging.getLogger(__name__)

# A single permission string or any iterable of them
HeldPermissions = Union[str, Iterable[str]]


def _coerce_config(config: RBACConfig | Mapping[str, Any]) -> RBACConfig:
    if isinstance(config, RBACConfig):
        # Private snapshot: later edits to the caller's dicts cannot leak in
        return config.model_copy(deep=True)
    try:
        return RBACConfig.model_validate(config)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid RBAC configuration: {e}", errors=e.errors()) from e


class PermissionEngine:
    """Closed permission graph with read-only queries.

    Args:
        config: An :class:`RBACConfig` or a mapping validated into one.
        observer: Optional callback receiving construction events
            (``catalog.generated``, ``roles.validated``, ``graph.built``,
            ``graph.acyclic``, ``graph.closed``, ``engine.ready``) with
            sizes and ``elapsed_ms``.

    Raises:
        ConfigurationError: Structurally invalid configuration.
        UnknownPermissionError: A role grants a permission outside the catalog.
        UnknownRoleReferenceError: A role references an undeclared role.
        CircularDependencyError: Roles or actions imply each other in a loop.

    Example::

        engine = PermissionEngine({
            "modules": {"users": ["profile", "settings"], "posts": ["content"]},
            "roles": {"viewer": {"name": "Viewer", "permissions": ["posts:read"]}},
        })
        engine.has_permission(["users:update"], "users.profile:read")  # True
        engine.has_permission(["viewer"], "posts.content:read")         # True
    """

    def __init__(
        self,
        config: RBACConfig | Mapping[str, Any],
        *,
        observer: BuildObserver | None = None,
    ) -> None:
        self._observer = observer
        self.graph_id = uuid4().hex
        started = time.perf_counter()

        config = _coerce_config(config)

        mark = time.perf_counter()
        catalog = generate_catalog(config.modules, config.actions, config.role_ids)
        mark = self._emit("catalog.generated", mark, size=len(catalog))

        validate_roles(config.roles, catalog)
        mark = self._emit("roles.validated", mark, roles=len(config.roles))

        graph = build_direct_graph(config)
        direct_edges = graph.edge_count()
        mark = self._emit("graph.built", mark, edges=direct_edges)

        detect_cycles(graph, catalog)
        mark = self._emit("graph.acyclic", mark, nodes=len(catalog))

        added = transitive_closure(graph, catalog)
        mark = self._emit("graph.closed", mark, edges=graph.edge_count(), added=added)

        self._config = config
        self._catalog = catalog
        self._roles = frozenset(config.roles)
        self._role_nodes = frozenset(Permissions.role(role_id) for role_id in self._roles)
        self._graph: FrozenPermissionGraph = graph.freeze()
        self._stats = GraphStats(
            total_permissions=len(catalog),
            grant_relationships=self._graph.edge_count(),
            modules=len(config.modules),
            resources=config.resource_count,
            actions=len(config.actions),
            roles=len(self._roles),
        )
        self._accessors = build_accessor_table(config.modules, config.actions)

        self._emit("engine.ready", started, permissions=len(catalog), edges=self._graph.edge_count())
        logger.info(
            "Permission graph %s ready: %d permissions, %d direct / %d closed edges",
            self.graph_id,
            len(catalog),
            direct_edges,
            self._graph.edge_count(),
        )

    def _emit(self, event: str, since: float, **details: Any) -> float:
        now = time.perf_counter()
        if self._observer is not None:
            self._observer(event, {"graph_id": self.graph_id, "elapsed_ms": (now - since) * 1000.0, **details})
        return now

    # ── Introspection ──────────────────────────────────

    @property
    def config(self) -> RBACConfig:
        """A copy of the configuration this engine was built from."""
        return self._config.model_copy(deep=True)

    @property
    def catalog(self) -> frozenset[str]:
        """Every valid permission string of this configuration."""
        return self._catalog

    @property
    def roles(self) -> frozenset[str]:
        """Declared role ids."""
        return self._roles

    @property
    def accessors(self) -> Mapping[str, str]:
        """Read-only accessor name → permission table (see :meth:`can`)."""
        return self._accessors

    def is_known(self, permission: str) -> bool:
        return permission in self._catalog

    # ── Queries ────────────────────────────────────────

    def _qualify(self, permission: str) -> str:
        """Map a bare role id to its ``role:<id>`` node; leave anything else alone."""
        if permission in self._catalog:
            return permission
        role_node = Permissions.role(permission)
        if role_node in self._role_nodes:
            return role_node
        return permission

    def _qualify_all(self, held: HeldPermissions) -> Iterator[str]:
        if isinstance(held, str):
            held = (held,)
        for permission in held:
            yield self._qualify(permission)

    def has_permission(self, held: HeldPermissions, required: str) -> bool:
        """Check whether ``held`` implies ``required``.

        ``held`` may contain bare role ids (``"editor"``), which count as
        ``role:editor``. One hash lookup per held permission.

        Example::

            engine.has_permission(["users:update"], "users:read")    # True
            engine.has_permission(["users:create"], "users:update")  # False
            engine.has_permission(["*:delete"], "posts:delete")      # True
        """
        required = self._qualify(required)
        for permission in self._qualify_all(held):
            if permission == required or required in self._graph.grants(permission):
                return True
        return False

    def effective_permissions(self, held: HeldPermissions) -> frozenset[str]:
        """Every permission ``held`` amounts to, including the held ones.

        Meant for listing and debugging, not for the authorization hot path.
        """
        effective: set[str] = set()
        for permission in self._qualify_all(held):
            effective.add(permission)
            effective.update(self._graph.grants(permission))
        return frozenset(effective)

    def who_grants(self, permission: str) -> frozenset[str]:
        """Permissions that imply ``permission``, itself included when it is known.

        A bare role id is read as ``role:<id>``, as in :meth:`has_permission`.
        """
        permission = self._qualify(permission)
        if permission not in self._catalog:
            return frozenset()
        return self._graph.granted_by(permission) | {permission}

    def what_grants(self, permission: str) -> frozenset[str]:
        """Permissions implied by ``permission`` (empty when unknown).

        A bare role id is read as ``role:<id>``.
        """
        return self._graph.grants(self._qualify(permission))

    def stats(self) -> GraphStats:
        return self._stats

    def visualize(self) -> str:
        """Sorted text dump of the closed graph, stable across runs.

        Format::

            users:update grants:
              └─ users.profile:create
              └─ users.profile:read
              ...
        """
        lines: list[str] = []
        for grantor in sorted(self._graph.forward):
            grants = self._graph.forward[grantor]
            if not grants:
                continue
            lines.append(f"{grantor} grants:")
            lines.extend(f"  └─ {grantee}" for grantee in sorted(grants))
            lines.append("")
        return "\n".join(lines)

    def check_detailed(self, held: HeldPermissions, required: str) -> PermissionCheckResult:
        """Like :meth:`has_permission`, with the inputs and a reason attached."""
        held = (held,) if isinstance(held, str) else tuple(held)
        allowed = self.has_permission(held, required)
        if not allowed and logger.isEnabledFor(logging.DEBUG):
            logger.debug("Permission %s denied for %s", required, safe_preview(held))
        return PermissionCheckResult(
            allowed=allowed,
            permission=required,
            held=held,
            reason="Permission granted" if allowed else f"Missing required permission: {required}",
        )

    def can(self, accessor: str, held: HeldPermissions) -> bool:
        """Check a permission by accessor name: ``engine.can("read_store", held)``.

        Raises:
            UnknownAccessorError: ``accessor`` is not in :attr:`accessors`.
        """
        try:
            permission = self._accessors[accessor]
        except KeyError:
            raise UnknownAccessorError(accessor) from None
        return self.has_permission(held, permission)

    def __repr__(self) -> str:
        return (
            f"PermissionEngine(graph_id={self.graph_id!r}, permissions={len(self._catalog)}, "
            f"edges={self._graph.edge_count()})"
        )


__all__ = ["HeldPermissions", "PermissionEngine"]
