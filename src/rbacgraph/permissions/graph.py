"""Permission graph: direct edges, cycle detection, transitive closure.

Provides:
- ``PermissionGraph`` — mutable forward/reverse adjacency kept in lockstep.
- ``FrozenPermissionGraph`` — the read-only graph queries run against.
- ``build_direct_graph()`` — one-hop implication edges from a configuration.
- ``detect_cycles()`` — rejects cyclic configurations before closure.
- ``transitive_closure()`` — folds every path into a direct edge.

An edge ``a → b`` reads "holding ``a`` implies holding ``b``".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from ..exceptions import CircularDependencyError
from .constants import WILDCARD, Permissions
from .models import RBACConfig
from .references import parse_permission_ref

logger = logging.getLogger(__name__)

_EMPTY: frozenset[str] = frozenset()


class PermissionGraph:
    """Forward and reverse adjacency sets, mirrored on every insertion.

    ``forward[a]`` holds everything ``a`` implies; ``reverse[b]`` holds
    everything implying ``b``. Self edges are never stored: every
    permission satisfies itself at query time.
    """

    __slots__ = ("forward", "reverse")

    def __init__(self) -> None:
        self.forward: dict[str, set[str]] = {}
        self.reverse: dict[str, set[str]] = {}

    def add_edge(self, source: str, target: str) -> bool:
        """Insert ``source → target``. Returns False if the edge already existed."""
        targets = self.forward.setdefault(source, set())
        if target in targets:
            return False
        targets.add(target)
        self.reverse.setdefault(target, set()).add(source)
        return True

    def has_edge(self, source: str, target: str) -> bool:
        return target in self.forward.get(source, _EMPTY)

    def edge_count(self) -> int:
        return sum(len(targets) for targets in self.forward.values())

    def nodes(self) -> set[str]:
        """Every node touching at least one edge."""
        return set(self.forward) | set(self.reverse)

    def freeze(self) -> FrozenPermissionGraph:
        return FrozenPermissionGraph(
            forward=MappingProxyType({k: frozenset(v) for k, v in self.forward.items()}),
            reverse=MappingProxyType({k: frozenset(v) for k, v in self.reverse.items()}),
        )


@dataclass(frozen=True)
class FrozenPermissionGraph:
    """Immutable snapshot of a (closed) permission graph.

    Safe for concurrent unsynchronised reads.
    """

    forward: Mapping[str, frozenset[str]]
    reverse: Mapping[str, frozenset[str]]

    def grants(self, permission: str) -> frozenset[str]:
        """Everything ``permission`` implies (empty if unknown)."""
        return self.forward.get(permission, _EMPTY)

    def granted_by(self, permission: str) -> frozenset[str]:
        """Everything implying ``permission`` (empty if unknown)."""
        return self.reverse.get(permission, _EMPTY)

    def edge_count(self) -> int:
        return sum(len(targets) for targets in self.forward.values())


# ── Direct edges ────────────────────────────────────────


def build_direct_graph(config: RBACConfig) -> PermissionGraph:
    """Build the one-hop implication edges for ``config``.

    Edges added:
    1. Action hierarchy at every scope (``*``, each module, each
       ``module.resource``): ``scope:A → scope:B`` for each B implied by A,
       and ``scope:* → scope:A`` for every action A.
    2. Cascades: ``*:A → module:A``, ``*:* → module:*``,
       ``module:A → module.resource:A``, ``module:* → module.resource:*``.
    3. Roles: ``role:id → p`` for each direct grant, ``role:id → role:parent``
       for each inherited parent.

    Role references are assumed valid (see :func:`validate_roles`).
    """
    graph = PermissionGraph()
    hierarchy = config.effective_hierarchy
    actions = config.actions

    def apply_hierarchy(scope: str) -> None:
        scope_wildcard = Permissions.at(scope, WILDCARD)
        for action, implied in hierarchy.items():
            source = Permissions.at(scope, action)
            for target in implied:
                graph.add_edge(source, Permissions.at(scope, target))
            graph.add_edge(scope_wildcard, source)

    apply_hierarchy(WILDCARD)

    for module, resources in config.modules.items():
        apply_hierarchy(module)
        module_wildcard = Permissions.module_wildcard(module)
        graph.add_edge(Permissions.GLOBAL_WILDCARD, module_wildcard)
        for action in actions:
            graph.add_edge(Permissions.wildcard(action), Permissions.module(module, action))

        for resource in resources:
            apply_hierarchy(Permissions.scope(module, resource))
            graph.add_edge(module_wildcard, Permissions.resource_wildcard(module, resource))
            for action in actions:
                graph.add_edge(
                    Permissions.module(module, action),
                    Permissions.resource(module, resource, action),
                )

    for role_id, role in config.roles.items():
        role_node = Permissions.role(role_id)
        for permission in role.permissions:
            graph.add_edge(role_node, parse_permission_ref(permission).node)
        for parent in role.inherits:
            graph.add_edge(role_node, Permissions.role(parent))

    return graph


# ── Cycle detection ─────────────────────────────────────

_ON_PATH = 1
_DONE = 2


def detect_cycles(graph: PermissionGraph, nodes: Iterable[str] | None = None) -> None:
    """Fail if the direct-edge graph contains a cycle.

    Iterative depth-first search from every node in ``nodes`` (default: every
    node of the graph), in sorted order, marking nodes "on path" while their
    subtree is explored and "done" afterwards. An edge into an on-path node
    closes a cycle. O(V + E).

    Raises:
        CircularDependencyError: with one node on the cycle and the cycle path.
    """
    roots = graph.nodes() if nodes is None else set(nodes)
    state: dict[str, int] = {}

    for root in sorted(roots):
        if root in state:
            continue
        state[root] = _ON_PATH
        path = [root]
        stack = [iter(sorted(graph.forward.get(root, ())))]

        while stack:
            for target in stack[-1]:
                mark = state.get(target)
                if mark == _ON_PATH:
                    cycle = path[path.index(target) :] + [target]
                    raise CircularDependencyError(target, cycle)
                if mark is None:
                    state[target] = _ON_PATH
                    path.append(target)
                    stack.append(iter(sorted(graph.forward.get(target, ()))))
                    break
            else:
                state[path.pop()] = _DONE
                stack.pop()


# ── Transitive closure ──────────────────────────────────


def transitive_closure(graph: PermissionGraph, nodes: Iterable[str] | None = None) -> int:
    """Close ``graph`` under transitivity in place.

    Floyd–Warshall ordering: each node ``k`` is taken as the intermediate in
    the outermost loop, and every ``i → k → j`` adds ``i → j``. Because the
    edges through earlier intermediates are already folded in when ``k`` is
    processed, a single pass reaches the fixed point. Iterating over the
    reverse and forward sets of ``k`` instead of all node pairs keeps the
    worst case at O(V³) while sparse graphs stay cheap.

    The graph must be acyclic (see :func:`detect_cycles`).

    Returns:
        Number of edges added; 0 when the graph was already closed.
    """
    intermediates = graph.nodes() if nodes is None else set(nodes)
    added = 0

    for k in sorted(intermediates):
        sources = graph.reverse.get(k)
        targets = graph.forward.get(k)
        if not sources or not targets:
            continue
        for i in tuple(sources):
            for j in tuple(targets):
                if graph.add_edge(i, j):
                    added += 1

    logger.debug("Transitive closure added %d edges over %d nodes", added, len(intermediates))
    return added


__all__ = [
    "FrozenPermissionGraph",
    "PermissionGraph",
    "build_direct_graph",
    "detect_cycles",
    "transitive_closure",
]
