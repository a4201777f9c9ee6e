"""Permission schemas and the permission type registry.

Each permission type has a pydantic model describing its flags and their
defaults. The same model validates full profiles (defaults applied) and
partial updates (only the keys provided are returned).
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, StrictBool

from src.lambdas.shared.auth.enums import PermissionType


class PromptPermissions(BaseModel):
    """Flags controlling prompt usage and sharing."""

    model_config = ConfigDict(extra="forbid")

    SHARED_GLOBAL: StrictBool = False
    USE: StrictBool = True
    CREATE: StrictBool = True


class BookmarkPermissions(BaseModel):
    """Flags controlling bookmark usage."""

    model_config = ConfigDict(extra="forbid")

    USE: StrictBool = True


# Registry: permission type tag -> validator model
PERMISSION_SCHEMAS: dict[str, type[BaseModel]] = {
    PermissionType.PROMPTS: PromptPermissions,
    PermissionType.BOOKMARKS: BookmarkPermissions,
}


def register_permission_schema(
    permission_type: str, schema: type[BaseModel]
) -> None:
    """Register (or replace) the validator for a permission type."""
    PERMISSION_SCHEMAS[permission_type] = schema


def get_permission_schema(permission_type: str) -> type[BaseModel] | None:
    """Look up the validator for a permission type, None if unregistered."""
    return PERMISSION_SCHEMAS.get(permission_type)


def validate_partial_permissions(
    permission_type: str, permissions: dict[str, Any]
) -> dict[str, bool]:
    """Validate a subset of flags for a permission type.

    Args:
        permission_type: Registered permission type tag
        permissions: Flag name -> value, any subset of the schema's flags

    Returns:
        Only the validated flags that were provided

    Raises:
        KeyError: If the permission type is not registered
        pydantic.ValidationError: On unknown flags or non-boolean values
    """
    schema = PERMISSION_SCHEMAS[permission_type]
    validated = schema.model_validate(permissions)
    return validated.model_dump(exclude_unset=True)


def default_permissions(permission_type: str) -> dict[str, bool]:
    """Full flag set for a permission type with schema defaults applied."""
    return PERMISSION_SCHEMAS[permission_type]().model_dump()
