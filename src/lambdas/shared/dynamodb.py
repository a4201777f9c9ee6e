"""
DynamoDB Helper Module
======================

Provides DynamoDB table access with retry configuration for the role store.

For On-Call Engineers:
    - If you see `ProvisionedThroughputExceededException`, check the table's
      write throttle alarm. Table uses on-demand billing.
    - Retry logic handles transient failures automatically (3 attempts with backoff).

For Developers:
    - All functions use parameterized expressions to prevent NoSQL injection.
    - Role keys use single-table format: PK=ROLE#{name}, SK=ROLE.
    - Attribute names always go through ExpressionAttributeNames; `name` is a
      DynamoDB reserved word.

Security Notes:
    - No user input is directly interpolated into expressions.
"""

import logging
import os
from decimal import Decimal
from typing import Any

import boto3
from botocore.config import Config

from src.lambdas.shared.models.role import ROLE_METADATA_FIELDS, ROLE_SK, role_pk

# Structured logging for CloudWatch
logger = logging.getLogger(__name__)

# Retry configuration for transient failures
# On-Call Note: Increase max_attempts if seeing intermittent throttling
RETRY_CONFIG = Config(
    retries={
        "max_attempts": 3,
        "mode": "adaptive",  # Automatically adjusts to throttling
    },
    connect_timeout=5,
    read_timeout=10,
)


def get_dynamodb_resource(region_name: str | None = None) -> Any:
    """
    Get a DynamoDB resource with retry configuration.

    Args:
        region_name: AWS region (defaults to AWS_REGION / AWS_DEFAULT_REGION env var)

    Returns:
        boto3 DynamoDB resource

    On-Call Note:
        If this fails with credential errors, check:
        1. Lambda execution role has dynamodb:* permissions on the roles table
        2. Region matches table location
    """
    region = (
        region_name
        or os.environ.get("AWS_REGION")
        or os.environ.get("AWS_DEFAULT_REGION")
    )
    if not region:
        raise ValueError(
            "AWS_DEFAULT_REGION or AWS_REGION environment variable must be set"
        )

    return boto3.resource(
        "dynamodb",
        region_name=region,
        config=RETRY_CONFIG,
    )


def get_table(table_name: str | None = None, region_name: str | None = None) -> Any:
    """
    Get a DynamoDB table resource.

    Args:
        table_name: Table name (defaults to ROLES_TABLE env var)
        region_name: AWS region

    Returns:
        boto3 DynamoDB Table resource

    On-Call Note:
        If table not found, verify:
        1. ROLES_TABLE env var is set correctly
        2. Table exists: aws dynamodb describe-table --table-name <name>
    """
    name = table_name or os.environ.get("ROLES_TABLE")
    if not name:
        raise ValueError(
            "Table name required: set ROLES_TABLE env var or pass table_name"
        )

    resource = get_dynamodb_resource(region_name)
    return resource.Table(name)


def build_role_key(role_name: str) -> dict[str, str]:
    """
    Build a DynamoDB key for a role item.

    Example:
        >>> build_role_key("ADMIN")
        {'PK': 'ROLE#ADMIN', 'SK': 'ROLE'}
    """
    return {
        "PK": role_pk(role_name),
        "SK": ROLE_SK,
    }


def build_projection(fields: list[str]) -> tuple[str, dict[str, str]]:
    """
    Build a ProjectionExpression with placeholder names.

    Args:
        fields: Top-level attribute names to include

    Returns:
        Tuple of (projection expression, ExpressionAttributeNames)

    Example:
        >>> build_projection(["name", "prompts"])
        ('#p0, #p1', {'#p0': 'name', '#p1': 'prompts'})
    """
    names = {f"#p{i}": field for i, field in enumerate(fields)}
    return ", ".join(names), names


def parse_dynamodb_item(item: dict[str, Any] | None) -> dict[str, Any]:
    """
    Convert DynamoDB item to standard Python dict.

    Handles:
    - Decimal → int/float conversion for JSON serialization
    - Set → list conversion
    - Nested structures

    Args:
        item: DynamoDB item (from Table.get_item, update_item)

    Returns:
        Python dict with JSON-serializable types
    """
    if not item:
        return {}

    result = {}
    for key, value in item.items():
        result[key] = _convert_value(value)

    return result


def _convert_value(value: Any) -> Any:
    """
    Recursively convert DynamoDB types to Python types.

    Internal helper for parse_dynamodb_item.
    """
    if isinstance(value, Decimal):
        # Convert Decimal to int if whole number, else float
        if value % 1 == 0:
            return int(value)
        return float(value)
    elif isinstance(value, set):
        return list(value)
    elif isinstance(value, dict):
        return {k: _convert_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_convert_value(v) for v in value]
    return value


def to_dynamodb_value(value: Any) -> Any:
    """
    Recursively convert Python values to types boto3 accepts.

    boto3 rejects float; floats become Decimal via their string form.

    Example:
        >>> to_dynamodb_value({"weight": 0.5, "tags": ["a"]})
        {'weight': Decimal('0.5'), 'tags': ['a']}
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: to_dynamodb_value(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [to_dynamodb_value(v) for v in value]
    return value


def to_role_document(item: dict[str, Any] | None) -> dict[str, Any] | None:
    """
    Convert a raw role item to the plain document returned to callers.

    Parses DynamoDB types and strips store-internal metadata
    (PK, SK, entity_type, version).

    Returns:
        Role document, or None when there is no item
    """
    if not item:
        return None
    parsed = parse_dynamodb_item(item)
    return {k: v for k, v in parsed.items() if k not in ROLE_METADATA_FIELDS}


def is_conditional_check_failure(error: Exception) -> bool:
    """Check whether a botocore error is a failed ConditionExpression."""
    response = getattr(error, "response", None) or {}
    return (
        response.get("Error", {}).get("Code") == "ConditionalCheckFailedException"
    )
