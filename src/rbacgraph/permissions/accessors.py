"""Named accessors for permission strings.

A lookup table generated once per engine, mapping readable names to
canonical permissions::

    "read_store"          → "store:read"
    "create_store_orders" → "store.orders:create"
    "read_dashboard"      → "admin.dashboard:read"   (resource name is unique)

Names that two different permissions would claim are left out of the table.
"""

from __future__ import annotations

import re
from collections import Counter, defaultdict
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from .constants import Permissions

_NON_IDENTIFIER = re.compile(r"[^0-9a-zA-Z]+")


def accessor_name(action: str, *scope: str) -> str:
    """Build an accessor name: ``accessor_name("create", "store", "orders")`` → ``create_store_orders``."""
    return "_".join(_NON_IDENTIFIER.sub("_", part).strip("_").lower() for part in (action, *scope))


def build_accessor_table(
    modules: Mapping[str, Sequence[str]],
    actions: Iterable[str],
) -> Mapping[str, str]:
    """Generate the accessor → permission table for a module declaration.

    Only concrete actions get accessors; wildcards and roles do not.
    """
    actions = tuple(actions)
    owners = Counter(resource for resources in modules.values() for resource in resources)
    claims: dict[str, set[str]] = defaultdict(set)

    for module, resources in modules.items():
        for action in actions:
            claims[accessor_name(action, module)].add(Permissions.module(module, action))

        for resource in resources:
            for action in actions:
                permission = Permissions.resource(module, resource, action)
                claims[accessor_name(action, module, resource)].add(permission)
                if owners[resource] == 1:
                    claims[accessor_name(action, resource)].add(permission)

    table = {name: next(iter(perms)) for name, perms in sorted(claims.items()) if len(perms) == 1}
    return MappingProxyType(table)


__all__ = ["accessor_name", "build_accessor_table"]
