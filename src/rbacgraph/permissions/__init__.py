"""Permission graph engine.

Defines:
- Permissions / Actions: permission-string builders and default CRUD actions
- generate_catalog(): every valid permission string of a configuration
- validate_roles(): strict role reference checks
- build_direct_graph() / detect_cycles() / transitive_closure(): graph pipeline
- PermissionEngine: the closed graph and its O(1) queries
- EngineHolder: atomic swap of a live engine on reconfiguration
"""

from .accessors import accessor_name, build_accessor_table
from .catalog import generate_catalog
from .constants import DEFAULT_ACTION_HIERARCHY, Actions, Permissions
from .defaults import DEFAULT_RBAC_CONFIG, DEFAULT_ROLES
from .engine import HeldPermissions, PermissionEngine
from .graph import (
    FrozenPermissionGraph,
    PermissionGraph,
    build_direct_graph,
    detect_cycles,
    transitive_closure,
)
from .holder import EngineHolder
from .models import GraphStats, PermissionCheckResult, RBACConfig, RoleDefinition
from .references import (
    PermissionLiteral,
    PermissionRef,
    RoleReference,
    is_role_node,
    parse_permission_ref,
)
from .validation import validate_roles

__all__ = [
    "Actions",
    "DEFAULT_ACTION_HIERARCHY",
    "DEFAULT_RBAC_CONFIG",
    "DEFAULT_ROLES",
    "EngineHolder",
    "FrozenPermissionGraph",
    "GraphStats",
    "HeldPermissions",
    "PermissionCheckResult",
    "PermissionEngine",
    "PermissionGraph",
    "PermissionLiteral",
    "PermissionRef",
    "Permissions",
    "RBACConfig",
    "RoleDefinition",
    "RoleReference",
    "accessor_name",
    "build_accessor_table",
    "build_direct_graph",
    "detect_cycles",
    "generate_catalog",
    "is_role_node",
    "parse_permission_ref",
    "transitive_closure",
    "validate_roles",
]
