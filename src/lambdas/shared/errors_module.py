"""
Standardized Error Response Helper
==================================

Provides consistent error response formatting for the role access Lambda.

For On-Call Engineers:
    Error codes and their meanings:
    - VALIDATION_ERROR: Malformed event (missing action or fields)
    - NOT_FOUND: Role does not exist
    - DATABASE_ERROR: DynamoDB operation failure on the roles table
    - INTERNAL_ERROR: Unexpected server error

    Search logs by error code:
    aws logs filter-log-events \
      --log-group-name /aws/lambda/dev-role-access \
      --filter-pattern "DATABASE_ERROR"

For Developers:
    - Use error_response() for all handler error responses
    - Include request_id from Lambda context for correlation
    - Add details dict for debugging info

Security Notes:
    - Never expose internal error details to end users
    - request_id enables correlation without exposing internals
"""

import json
import logging
from enum import Enum
from typing import Any

# Structured logging
logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """
    Standardized error codes for machine-readable error handling.

    On-Call Note:
        These codes appear in logs and can be used for filtering:
        filter @message like /DATABASE_ERROR/
    """

    # Input/validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"

    # Infrastructure errors
    DATABASE_ERROR = "DATABASE_ERROR"

    # Internal errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


def error_response(
    status_code: int,
    message: str,
    code: str | ErrorCode,
    request_id: str,
    details: dict[str, Any] | None = None,
    log_error: bool = True,
) -> dict[str, Any]:
    """
    Create a standardized error response for Lambda responses.

    Response format:
    {
        "statusCode": 500,
        "body": {
            "error": "Human readable message",
            "code": "MACHINE_READABLE_CODE",
            "details": {},
            "request_id": "lambda-request-id-123"
        }
    }

    Args:
        status_code: HTTP status code (400, 404, 500, etc.)
        message: Human-readable error message
        code: Machine-readable error code (from ErrorCode enum)
        request_id: Lambda request ID for correlation
        details: Additional details for debugging
        log_error: Whether to log the error (default True)

    Returns:
        Lambda-compatible response dict with statusCode and JSON body
    """
    error_code = code.value if isinstance(code, ErrorCode) else code

    body = {
        "error": message,
        "code": error_code,
        "request_id": request_id,
    }

    if details:
        body["details"] = details

    # Log error metadata only - details are returned but not logged
    if log_error:
        log_level = logging.ERROR if status_code >= 500 else logging.WARNING
        logger.log(
            log_level,
            message,
            extra={
                "status_code": status_code,
                "error_code": error_code,
                "request_id": request_id,
            },
        )

    return {
        "statusCode": status_code,
        "headers": {
            "Content-Type": "application/json",
            "X-Request-Id": request_id,
        },
        "body": json.dumps(body),
    }


def validation_error(
    message: str,
    request_id: str,
    field: str | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Create a 400 validation error response.

    Example:
        >>> return validation_error(
        ...     "role_name is required",
        ...     context.aws_request_id,
        ...     field="role_name",
        ... )
    """
    error_details = details or {}
    if field:
        error_details["field"] = field

    return error_response(
        400,
        message,
        ErrorCode.VALIDATION_ERROR,
        request_id,
        details=error_details if error_details else None,
    )


def not_found_error(
    message: str,
    request_id: str,
    resource: str | None = None,
) -> dict[str, Any]:
    """Create a 404 not found error response."""
    details = {"resource": resource} if resource else None

    return error_response(
        404,
        message,
        ErrorCode.NOT_FOUND,
        request_id,
        details=details,
    )


def internal_error(
    request_id: str,
    message: str = "Internal server error",
) -> dict[str, Any]:
    """
    Create a 500 internal server error response.

    Use for unexpected errors. Only request_id is logged for correlation.

    Security Note:
        Never expose internal error details to end users.
    """
    logger.error(
        f"Internal error: {message}",
        extra={"request_id": request_id},
    )

    return error_response(
        500,
        message,
        ErrorCode.INTERNAL_ERROR,
        request_id,
        details=None,
        log_error=False,  # Already logged above
    )


def database_error(
    request_id: str,
    operation: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Create a 500 database error response.

    Args:
        request_id: Lambda request ID
        operation: Database operation that failed
        details: Error details for logging

    On-Call Note:
        Check DynamoDB CloudWatch metrics and alarms for the roles table.
    """
    return error_response(
        500,
        f"Database operation failed: {operation}",
        ErrorCode.DATABASE_ERROR,
        request_id,
        details=details,
    )
