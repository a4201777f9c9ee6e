"""Role access service.

Role lookup-or-create, field updates and permission merges over the roles
table, with a cache-aside read path.

For On-Call Engineers:
    Roles are stored with PK=ROLE#{name}, SK=ROLE.
    System roles (ADMIN, USER) are created from their default profiles on
    first lookup if missing. Permission updates never raise; look for
    "Failed to update role permissions" in the logs.

For Developers:
    - Pass the table and cache in explicitly; the service holds no globals.
    - Returned documents never include PK, SK, entity_type or version.
    - Permission merges are read-then-write without optimistic locking.
"""

import logging
from typing import Any, Literal

from aws_xray_sdk.core import xray_recorder
from pydantic import BaseModel, Field

from src.lambdas.shared.auth.enums import PermissionType, SystemRole, is_system_role
from src.lambdas.shared.auth.roles import get_default_role
from src.lambdas.shared.cache.role_cache import RoleCache
from src.lambdas.shared.dynamodb import (
    build_projection,
    build_role_key,
    is_conditional_check_failure,
    to_dynamodb_value,
    to_role_document,
)
from src.lambdas.shared.errors.role_errors import (
    InvalidRoleUpdateError,
    RoleRetrievalError,
    RoleUpdateError,
)
from src.lambdas.shared.logging_utils import get_safe_error_info, sanitize_for_log
from src.lambdas.shared.models.permissions import (
    get_permission_schema,
    validate_partial_permissions,
)
from src.lambdas.shared.models.role import ROLE_METADATA_FIELDS

logger = logging.getLogger(__name__)

PermissionUpdateStatus = Literal["applied", "skipped", "failed"]


class PermissionUpdateResult(BaseModel):
    """Outcome of a permission merge."""

    status: PermissionUpdateStatus
    role_name: str
    permission_type: str
    changes: dict[str, bool] = Field(default_factory=dict)
    reason: str | None = None
    error: str | None = None
    role: dict[str, Any] | None = None

    @property
    def applied(self) -> bool:
        """True if the merged permissions were written."""
        return self.status == "applied"


def _normalize_fields(fields_to_select: str | list[str] | None) -> list[str]:
    """Accept a single field, a space-separated string or a list of fields."""
    if not fields_to_select:
        return []
    if isinstance(fields_to_select, str):
        return fields_to_select.split()
    return list(fields_to_select)


def _select_fields(role: dict[str, Any] | None, fields: list[str]) -> dict[str, Any] | None:
    """Apply include / "-"-prefixed exclude field selection to a document."""
    if role is None or not fields:
        return role
    include = [f for f in fields if not f.startswith("-")]
    exclude = {f[1:] for f in fields if f.startswith("-")}
    if include:
        role = {k: v for k, v in role.items() if k in include}
    return {k: v for k, v in role.items() if k not in exclude}


def _check_updatable(role_name: str, updates: dict[str, Any]) -> None:
    """Reject renames and writes to store-internal attributes."""
    for field in updates:
        if field in ROLE_METADATA_FIELDS:
            raise InvalidRoleUpdateError(
                role_name, field, f"Field cannot be updated: {field}"
            )
    if "name" in updates and updates["name"] != role_name:
        raise InvalidRoleUpdateError(role_name, "name", "Role name cannot be changed")


def remove_nullish_values(values: dict[str, Any] | None) -> dict[str, Any]:
    """Drop keys whose value is None."""
    return {k: v for k, v in (values or {}).items() if v is not None}


class RoleAccessService:
    """Role lookup, update and permission merge over a DynamoDB table."""

    def __init__(self, table: Any, cache: RoleCache):
        """Initialize role access service.

        Args:
            table: boto3 DynamoDB Table resource holding role items
            cache: Role cache shared by all operations of this service
        """
        self._table = table
        self._cache = cache

    @property
    def cache(self) -> RoleCache:
        return self._cache

    def _read_role(self, role_name: str, fields: list[str]) -> dict[str, Any] | None:
        include = [f for f in fields if not f.startswith("-")]

        get_kwargs: dict[str, Any] = {"Key": build_role_key(role_name)}
        if include:
            projection, names = build_projection(include)
            get_kwargs["ProjectionExpression"] = projection
            get_kwargs["ExpressionAttributeNames"] = names

        response = self._table.get_item(**get_kwargs)
        return _select_fields(to_role_document(response.get("Item")), fields)

    def _lookup_full_role(self, role_name: str) -> dict[str, Any] | None:
        """Cache-aside read of the whole document, creating system roles."""
        cached = self._cache.get(role_name)
        if cached:
            return cached

        role = self._read_role(role_name, [])
        if role is None and is_system_role(role_name):
            role = self._create_default_role(role_name)

        self._cache.set(role_name, role)
        return role

    def _create_default_role(self, role_name: str) -> dict[str, Any]:
        """Persist a system role's default profile (first write wins)."""
        role = get_default_role(role_name)
        try:
            self._table.put_item(
                Item=role.to_dynamodb_item(),
                ConditionExpression="attribute_not_exists(PK)",
            )
        except Exception as e:
            if not is_conditional_check_failure(e):
                raise
            # Another writer created it first; return the stored record
            logger.debug(
                "Role already created concurrently",
                extra={"role_name": sanitize_for_log(role_name)},
            )
            existing = self._read_role(role_name, [])
            if existing is not None:
                return existing
            raise

        logger.info(
            "Created system role from defaults",
            extra={"role_name": sanitize_for_log(role_name)},
        )
        return role.to_dict()

    @xray_recorder.capture("get_role_by_name")
    def get_role_by_name(
        self,
        role_name: str,
        fields_to_select: str | list[str] | None = None,
    ) -> dict[str, Any] | None:
        """Retrieve a role by name, creating system roles on first access.

        Only whole documents are cached. A projected lookup is served from a
        cached document when there is one, and otherwise reads just the
        selected fields without caching them.

        Args:
            role_name: Name of the role to find or create
            fields_to_select: Field name(s) to include, or to exclude when
                prefixed with "-"

        Returns:
            Role document, or None if the role does not exist and is not a
            system role

        Raises:
            RoleRetrievalError: If the cache or role store fails
        """
        try:
            fields = _normalize_fields(fields_to_select)
            if not fields:
                return self._lookup_full_role(role_name)

            cached = self._cache.get(role_name)
            if cached:
                return _select_fields(cached, fields)

            role = self._read_role(role_name, fields)
            if role is None and is_system_role(role_name):
                created = self._create_default_role(role_name)
                self._cache.set(role_name, created)
                role = _select_fields(created, fields)
            return role
        except Exception as e:
            logger.error(
                "Failed to retrieve or create role",
                extra={"role_name": sanitize_for_log(role_name), **get_safe_error_info(e)},
            )
            raise RoleRetrievalError(role_name, e) from e

    @xray_recorder.capture("update_role_by_name")
    def update_role_by_name(
        self, role_name: str, updates: dict[str, Any]
    ) -> dict[str, Any] | None:
        """Replace top-level fields of a role.

        Each key in ``updates`` replaces the corresponding field; other fields
        are left untouched. The cache is refreshed with the result.

        Args:
            role_name: Name of the role to update
            updates: Top-level field -> new value

        Returns:
            Updated role document, or None if the role does not exist

        Raises:
            InvalidRoleUpdateError: If updates rename the role or touch
                store-internal metadata
            RoleUpdateError: If the store fails
        """
        _check_updatable(role_name, updates)

        try:
            set_parts = []
            attr_names: dict[str, str] = {"#version": "version"}
            attr_values: dict[str, Any] = {":one": 1}
            for i, (field, value) in enumerate(updates.items()):
                if field == "name":
                    continue
                set_parts.append(f"#f{i} = :v{i}")
                attr_names[f"#f{i}"] = field
                attr_values[f":v{i}"] = to_dynamodb_value(value)

            update_expr = "ADD #version :one"
            if set_parts:
                update_expr = "SET " + ", ".join(set_parts) + " " + update_expr

            try:
                response = self._table.update_item(
                    Key=build_role_key(role_name),
                    UpdateExpression=update_expr,
                    ConditionExpression="attribute_exists(PK)",
                    ExpressionAttributeNames=attr_names,
                    ExpressionAttributeValues=attr_values,
                    ReturnValues="ALL_NEW",
                )
                role = to_role_document(response.get("Attributes"))
            except Exception as e:
                if not is_conditional_check_failure(e):
                    raise
                logger.debug(
                    "Role not found for update",
                    extra={"role_name": sanitize_for_log(role_name)},
                )
                role = None

            self._cache.set(role_name, role)
            return role
        except Exception as e:
            logger.error(
                "Failed to update role",
                extra={"role_name": sanitize_for_log(role_name), **get_safe_error_info(e)},
            )
            raise RoleUpdateError(role_name, e) from e

    def update_access_permissions(
        self,
        role_name: str,
        permission_type: str,
        permissions: dict[str, Any] | None,
    ) -> PermissionUpdateResult:
        """Merge permission flags into a role's permission category.

        Nullish flags are dropped. Unspecified flags keep their stored values.
        Never raises: failures are logged and reported in the result.

        Args:
            role_name: Role to update
            permission_type: Permission category (e.g. "prompts")
            permissions: Flag name -> new value

        Returns:
            PermissionUpdateResult with status applied, skipped or failed
        """
        result = PermissionUpdateResult(
            status="skipped", role_name=role_name, permission_type=permission_type
        )

        values = remove_nullish_values(permissions)
        if not values:
            result.reason = "no_permissions"
            return result

        try:
            role = self.get_role_by_name(role_name)
            if not role:
                result.reason = "role_not_found"
                return result
            if get_permission_schema(permission_type) is None:
                result.reason = "unknown_permission_type"
                return result

            validated = validate_partial_permissions(permission_type, values)
            existing = role.get(permission_type) or {}
            merged = {**existing, **validated}
            changes = {
                k: v for k, v in validated.items() if k not in existing or existing[k] != v
            }

            updated = self.update_role_by_name(role_name, {permission_type: merged})

            for permission, value in changes.items():
                logger.info(
                    "Updated role permission",
                    extra={
                        "role_name": sanitize_for_log(role_name),
                        "permission_type": sanitize_for_log(permission_type),
                        "permission": permission,
                        "new_value": value,
                    },
                )

            result.status = "applied"
            result.changes = changes
            result.role = updated
            return result
        except Exception as e:
            logger.error(
                "Failed to update role permissions",
                extra={
                    "role_name": sanitize_for_log(role_name),
                    "permission_type": sanitize_for_log(permission_type),
                    **get_safe_error_info(e),
                },
            )
            result.status = "failed"
            result.error = str(e)
            return result

    def update_prompts_access(
        self, role_name: str, permissions: dict[str, Any] | None
    ) -> PermissionUpdateResult:
        """Merge prompt permission flags for a role."""
        return self.update_access_permissions(
            role_name, PermissionType.PROMPTS.value, permissions
        )

    def update_bookmarks_access(
        self, role_name: str, permissions: dict[str, Any] | None
    ) -> PermissionUpdateResult:
        """Merge bookmark permission flags for a role."""
        return self.update_access_permissions(
            role_name, PermissionType.BOOKMARKS.value, permissions
        )

    @xray_recorder.capture("initialize_roles")
    def initialize_roles(self) -> list[str]:
        """Create any missing system roles from their default profiles.

        Reads the table directly and leaves the cache untouched. Idempotent.

        Returns:
            Names of the roles created by this call
        """
        created = []
        for system_role in SystemRole:
            role_name = system_role.value
            projection, names = build_projection(["name"])
            response = self._table.get_item(
                Key=build_role_key(role_name),
                ProjectionExpression=projection,
                ExpressionAttributeNames=names,
            )
            if response.get("Item"):
                continue

            role = get_default_role(role_name)
            try:
                self._table.put_item(
                    Item=role.to_dynamodb_item(),
                    ConditionExpression="attribute_not_exists(PK)",
                )
            except Exception as e:
                if not is_conditional_check_failure(e):
                    raise
                continue
            created.append(role_name)

        if created:
            logger.info("Initialized system roles", extra={"roles": created})
        return created
