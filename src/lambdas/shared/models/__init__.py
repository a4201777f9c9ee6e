"""Shared models for role access.

This module exports the entity models used across the role access Lambda:
- Role: Named permission profile stored in DynamoDB
- PromptPermissions / BookmarkPermissions: Permission category schemas
"""

from src.lambdas.shared.models.permissions import (
    PERMISSION_SCHEMAS,
    BookmarkPermissions,
    PromptPermissions,
    default_permissions,
    get_permission_schema,
    register_permission_schema,
    validate_partial_permissions,
)
from src.lambdas.shared.models.role import ROLE_METADATA_FIELDS, ROLE_SK, Role, role_pk

__all__ = [
    "PERMISSION_SCHEMAS",
    "BookmarkPermissions",
    "PromptPermissions",
    "default_permissions",
    "get_permission_schema",
    "register_permission_schema",
    "validate_partial_permissions",
    "ROLE_METADATA_FIELDS",
    "ROLE_SK",
    "Role",
    "role_pk",
]
