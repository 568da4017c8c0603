from .config import LogLevel, SharedConfig, load_shared_config_from_env
from .exceptions import (
    CircularDependencyError,
    ConfigurationError,
    RBACGraphError,
    UnknownAccessorError,
    UnknownParentRoleError,
    UnknownPermissionError,
    UnknownRoleReferenceError,
    error_registry,
    register_error,
)
from .logging import (
    GraphLogFormatter,
    GraphLoggerAdapter,
    LoggingBuildObserver,
    get_graph_logger,
    safe_preview,
    setup_logging,
)
from .permissions import (
    DEFAULT_ACTION_HIERARCHY,
    DEFAULT_RBAC_CONFIG,
    Actions,
    EngineHolder,
    GraphStats,
    PermissionCheckResult,
    PermissionEngine,
    Permissions,
    RBACConfig,
    RoleDefinition,
)

__all__ = [
    'Actions',
    'CircularDependencyError',
    'ConfigurationError',
    'DEFAULT_ACTION_HIERARCHY',
    'DEFAULT_RBAC_CONFIG',
    'EngineHolder',
    'GraphLogFormatter',
    'GraphLoggerAdapter',
    'GraphStats',
    'LogLevel',
    'LoggingBuildObserver',
    'PermissionCheckResult',
    'PermissionEngine',
    'Permissions',
    'RBACConfig',
    'RBACGraphError',
    'RoleDefinition',
    'SharedConfig',
    'UnknownAccessorError',
    'UnknownParentRoleError',
    'UnknownPermissionError',
    'UnknownRoleReferenceError',
    'error_registry',
    'get_graph_logger',
    'load_shared_config_from_env',
    'register_error',
    'safe_preview',
    'setup_logging',
]
