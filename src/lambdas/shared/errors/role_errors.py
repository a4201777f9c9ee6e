"""Role access error types.

Store failures in role lookup and update paths are wrapped in these
exceptions. The original cause is chained and its message embedded.
"""


class RoleAccessError(Exception):
    """Base class for role access errors."""

    pass


class RoleRetrievalError(RoleAccessError):
    """Looking up or lazily creating a role failed.

    Raised when the role store (or cache) raises during get_role_by_name.
    """

    def __init__(self, role_name: str, cause: Exception):
        self.role_name = role_name
        self.cause = cause
        super().__init__(f"Failed to retrieve or create role: {cause}")


class RoleUpdateError(RoleAccessError):
    """Updating a role's fields failed."""

    def __init__(self, role_name: str, cause: Exception):
        self.role_name = role_name
        self.cause = cause
        super().__init__(f"Failed to update role: {cause}")


class InvalidRoleUpdateError(RoleAccessError):
    """An update touches a field callers may not change.

    Raised before any store call, so nothing is written.
    """

    def __init__(self, role_name: str, field: str, message: str):
        self.role_name = role_name
        self.field = field
        super().__init__(message)
