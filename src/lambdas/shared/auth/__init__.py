"""System roles and permission enums.

Default role profiles live in src.lambdas.shared.auth.roles, which depends on
the permission models and is imported directly.
"""

from src.lambdas.shared.auth.enums import (
    SYSTEM_ROLE_NAMES,
    Permission,
    PermissionType,
    SystemRole,
    is_system_role,
)

__all__ = [
    "SYSTEM_ROLE_NAMES",
    "Permission",
    "PermissionType",
    "SystemRole",
    "is_system_role",
]
