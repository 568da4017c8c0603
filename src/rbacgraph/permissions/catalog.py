"""Permission catalog generation.

The catalog is the finite set of every valid permission string for a
configuration. It is the universe that role grants are validated against and
that cycle detection and closure run over.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from .constants import Permissions


def generate_catalog(
    modules: Mapping[str, Sequence[str]],
    actions: Iterable[str],
    role_ids: Iterable[str] = (),
) -> frozenset[str]:
    """Derive all permission strings from a module declaration.

    Generates:
    - ``*:*`` and ``*:{action}`` for every action
    - ``{module}:*`` and ``{module}:{action}`` for every module
    - ``{module}.{resource}:*`` and ``{module}.{resource}:{action}`` for every resource
    - ``role:{id}`` for every declared role

    Example::

        >>> sorted(generate_catalog({"users": ["profile"]}, ["read"]))
        ['*:*', '*:read', 'users.profile:*', 'users.profile:read', 'users:*', 'users:read']
    """
    actions = tuple(actions)
    catalog: set[str] = {Permissions.GLOBAL_WILDCARD}
    catalog.update(Permissions.wildcard(action) for action in actions)

    for module, resources in modules.items():
        catalog.add(Permissions.module_wildcard(module))
        catalog.update(Permissions.module(module, action) for action in actions)

        for resource in resources:
            catalog.add(Permissions.resource_wildcard(module, resource))
            catalog.update(Permissions.resource(module, resource, action) for action in actions)

    catalog.update(Permissions.role(role_id) for role_id in role_ids)
    return frozenset(catalog)


__all__ = ["generate_catalog"]
