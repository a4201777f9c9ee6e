"""Canonical enum definitions for role access.

This module defines the reserved system roles, the permission categories a
role carries, and the permission flags inside each category.

All role-related enums should be defined here to ensure a single source of truth.
"""

from __future__ import annotations

from enum import StrEnum


class SystemRole(StrEnum):
    """Reserved role names guaranteed to exist after initialization.

    Declaration order is the order roles are initialized in.
    """

    ADMIN = "ADMIN"
    USER = "USER"


class PermissionType(StrEnum):
    """Permission categories stored as top-level fields on a role."""

    PROMPTS = "prompts"
    BOOKMARKS = "bookmarks"


class Permission(StrEnum):
    """Permission flags used inside a permission category."""

    SHARED_GLOBAL = "SHARED_GLOBAL"
    USE = "USE"
    CREATE = "CREATE"


# Immutable set for O(1) lookup of reserved names
SYSTEM_ROLE_NAMES: frozenset[str] = frozenset(role.value for role in SystemRole)


def is_system_role(role_name: str) -> bool:
    """Check whether a role name is one of the reserved system roles."""
    return role_name in SYSTEM_ROLE_NAMES
