"""
Role Access Lambda Handler
==========================

Admin entry point for role records. Invoked directly (console, Step
Functions, other Lambdas) with an action event.

For On-Call Engineers:
    System roles are initialized once per container, before the first event
    is handled. If ADMIN or USER is missing from the table, check the
    "Initialized system roles" log line on cold start.

    Event examples:
    {"action": "get_role", "role_name": "ADMIN"}
    {"action": "get_role", "role_name": "ADMIN", "fields": ["name", "prompts"]}
    {"action": "update_role", "role_name": "ADMIN", "updates": {"description": "..."}}
    {"action": "update_permissions", "role_name": "USER",
     "permission_type": "prompts", "permissions": {"SHARED_GLOBAL": true}}
    {"action": "initialize_roles"}

For Developers:
    Handler workflow:
    1. Validate the event shape (400 on failure)
    2. Initialize system roles if this container has not yet done so
    3. Dispatch to RoleAccessService
    4. Map InvalidRoleUpdateError to VALIDATION_ERROR (400), other
       RoleAccessError to DATABASE_ERROR (500)
"""

import logging
from typing import Any, Literal

from botocore.exceptions import ClientError
from pydantic import BaseModel, ValidationError

from src.lambdas.shared.dependencies import get_role_access_service
from src.lambdas.shared.errors import (
    InvalidRoleUpdateError,
    RoleAccessError,
    database_error,
    internal_error,
    not_found_error,
    validation_error,
)
from src.lambdas.shared.logging_utils import get_safe_error_info, sanitize_for_log
from src.lambdas.shared.utils.response_builder import json_response

logger = logging.getLogger(__name__)

# Set once system roles exist for this container
_roles_initialized = False


class RoleAccessEvent(BaseModel):
    """Direct-invocation event for the role access Lambda."""

    action: Literal["get_role", "update_role", "update_permissions", "initialize_roles"]
    role_name: str | None = None
    fields: str | list[str] | None = None
    updates: dict[str, Any] | None = None
    permission_type: str | None = None
    permissions: dict[str, Any] | None = None


# Fields each action needs beyond "action"
REQUIRED_FIELDS: dict[str, tuple[str, ...]] = {
    "get_role": ("role_name",),
    "update_role": ("role_name", "updates"),
    "update_permissions": ("role_name", "permission_type", "permissions"),
    "initialize_roles": (),
}


def ensure_roles_initialized(service: Any) -> None:
    """Run initialize_roles once per container."""
    global _roles_initialized
    if not _roles_initialized:
        service.initialize_roles()
        _roles_initialized = True


def _dispatch(service: Any, request: RoleAccessEvent, request_id: str) -> dict:
    if request.action == "get_role":
        role = service.get_role_by_name(request.role_name, request.fields)
        if not role:
            return not_found_error(
                "Role not found", request_id, resource=request.role_name
            )
        return json_response(200, {"role": role})

    if request.action == "update_role":
        role = service.update_role_by_name(request.role_name, request.updates)
        if not role:
            return not_found_error(
                "Role not found", request_id, resource=request.role_name
            )
        return json_response(200, {"role": role})

    if request.action == "update_permissions":
        result = service.update_access_permissions(
            request.role_name, request.permission_type, request.permissions
        )
        return json_response(200, result.model_dump())

    created = service.initialize_roles()
    return json_response(200, {"created": created})


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    Lambda handler for role access actions.

    Args:
        event: Action event (see module docstring)
        context: Lambda context

    Returns:
        Lambda response dict with statusCode, headers and JSON body
    """
    request_id = getattr(context, "aws_request_id", "local")

    try:
        request = RoleAccessEvent.model_validate(event or {})
    except ValidationError as e:
        return validation_error(
            "Invalid role access event",
            request_id,
            details={"errors": [err["msg"] for err in e.errors()]},
        )

    missing = [f for f in REQUIRED_FIELDS[request.action] if getattr(request, f) is None]
    if missing:
        return validation_error(
            f"Missing required field: {missing[0]}", request_id, field=missing[0]
        )

    logger.info(
        "Role access action invoked",
        extra={
            "action": request.action,
            "role_name": sanitize_for_log(request.role_name or ""),
            "request_id": request_id,
        },
    )

    try:
        service = get_role_access_service()
        ensure_roles_initialized(service)
        return _dispatch(service, request, request_id)
    except InvalidRoleUpdateError as e:
        return validation_error(str(e), request_id, field=e.field)
    except (RoleAccessError, ClientError) as e:
        return database_error(
            request_id, request.action, details=get_safe_error_info(e)
        )
    except Exception as e:
        logger.error(
            "Role access action failed",
            extra={"action": request.action, **get_safe_error_info(e)},
        )
        return internal_error(request_id)
