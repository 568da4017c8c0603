"""Default RBAC configuration.

A ready-made setup with common content-management modules and four roles.
Customize by copying, or start from scratch with :class:`RBACConfig`.
"""

from __future__ import annotations

from .models import RBACConfig

DEFAULT_RBAC_CONFIG = RBACConfig(
    modules={
        # User Management
        "users": ["profile", "settings", "roles"],
        # Content Management
        "posts": ["draft", "published", "comments"],
        "pages": ["content", "metadata", "versions"],
        # Community
        "comments": ["content", "moderation"],
        "tags": ["management"],
        # Administration
        "admin": ["users", "content", "settings", "logs"],
        # Analytics
        "analytics": ["dashboard", "reports", "exports"],
    },
    roles={
        # Super admin - can do everything
        "super_admin": {
            "name": "Super Administrator",
            "permissions": ["*:*"],
            "description": "Complete system access",
        },
        # System admin - admin module plus everything an editor can do
        "system_admin": {
            "name": "System Administrator",
            "permissions": ["admin:*"],
            "inherits": ["editor"],
            "description": "Admin access + Editor access",
        },
        # Editor - viewer plus content editing
        "editor": {
            "name": "Editor",
            "permissions": ["posts:update", "pages:update", "comments.moderation:update"],
            "inherits": ["viewer"],
            "description": "Can edit content",
        },
        # Viewer - base role
        "viewer": {
            "name": "Viewer",
            "permissions": ["posts:read", "pages:read", "comments:read"],
            "description": "Read-only access",
        },
    },
)

DEFAULT_ROLES = DEFAULT_RBAC_CONFIG.roles


__all__ = ["DEFAULT_RBAC_CONFIG", "DEFAULT_ROLES"]
