"""Role model with DynamoDB keys."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Store-internal attributes never returned to callers
ROLE_METADATA_FIELDS: frozenset[str] = frozenset({"PK", "SK", "entity_type", "version"})


def role_pk(role_name: str) -> str:
    """DynamoDB partition key for a role name."""
    return f"ROLE#{role_name}"


ROLE_SK = "ROLE"


class Role(BaseModel):
    """Named permission profile.

    Permission categories are top-level fields (e.g. ``prompts``). Any other
    attributes are carried through as extra fields.
    """

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., min_length=1, description="Unique role name")
    prompts: dict[str, bool] | None = None
    bookmarks: dict[str, bool] | None = None

    @property
    def pk(self) -> str:
        """DynamoDB partition key."""
        return role_pk(self.name)

    @property
    def sk(self) -> str:
        """DynamoDB sort key."""
        return ROLE_SK

    def to_dict(self) -> dict[str, Any]:
        """Plain-data representation without unset permission categories."""
        return self.model_dump(exclude_none=True)

    def to_dynamodb_item(self, version: int = 0) -> dict[str, Any]:
        """Convert to DynamoDB item format."""
        item = self.to_dict()
        item.update(
            {
                "PK": self.pk,
                "SK": self.sk,
                "entity_type": "ROLE",
                "version": version,
            }
        )
        return item
