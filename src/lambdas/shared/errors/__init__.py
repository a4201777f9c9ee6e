"""Shared error types for the role access Lambda.

Re-exports the error response helpers alongside the role access exceptions.
"""

from src.lambdas.shared.errors.role_errors import (
    InvalidRoleUpdateError,
    RoleAccessError,
    RoleRetrievalError,
    RoleUpdateError,
)
from src.lambdas.shared.errors_module import (
    ErrorCode,
    database_error,
    error_response,
    internal_error,
    not_found_error,
    validation_error,
)

__all__ = [
    # Error response helpers
    "ErrorCode",
    "database_error",
    "error_response",
    "internal_error",
    "not_found_error",
    "validation_error",
    # Role access errors
    "InvalidRoleUpdateError",
    "RoleAccessError",
    "RoleRetrievalError",
    "RoleUpdateError",
]
