"""Default permission profiles for system roles.

Every system role has a default profile used to materialize its record the
first time it is looked up or during initialization:

- ADMIN: every prompt and bookmark flag enabled
- USER: prompts usable and creatable but not shared globally; bookmarks usable
"""

from __future__ import annotations

from src.lambdas.shared.auth.enums import Permission, PermissionType, SystemRole
from src.lambdas.shared.models.permissions import default_permissions
from src.lambdas.shared.models.role import Role

ROLE_DEFAULTS: dict[str, dict] = {
    SystemRole.ADMIN: {
        "name": SystemRole.ADMIN.value,
        PermissionType.PROMPTS.value: {
            Permission.SHARED_GLOBAL.value: True,
            Permission.USE.value: True,
            Permission.CREATE.value: True,
        },
        PermissionType.BOOKMARKS.value: {
            Permission.USE.value: True,
        },
    },
    SystemRole.USER: {
        "name": SystemRole.USER.value,
        PermissionType.PROMPTS.value: default_permissions(PermissionType.PROMPTS),
        PermissionType.BOOKMARKS.value: default_permissions(PermissionType.BOOKMARKS),
    },
}


def get_default_role(role_name: str) -> Role:
    """Build a fresh Role from a system role's default profile.

    Args:
        role_name: A system role name

    Returns:
        New Role instance (safe to mutate)

    Raises:
        KeyError: If the name is not a system role

    Examples:
        >>> get_default_role("USER").prompts
        {'SHARED_GLOBAL': False, 'USE': True, 'CREATE': True}
    """
    return Role.model_validate(ROLE_DEFAULTS[role_name])
