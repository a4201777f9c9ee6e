"""
Pytest Configuration and Shared Fixtures
=========================================

Common fixtures used across all test modules.

For On-Call Engineers:
    If tests fail with AWS credential errors:
    1. Ensure moto is properly mocking (check mock_aws usage)
    2. Verify AWS env vars are set in fixtures

For Developers:
    - Import fixtures by name in test files (pytest auto-discovers conftest.py)
    - All fixtures use moto mocks (no real AWS calls)
    - Add new shared fixtures here, test-specific fixtures in test files
"""

import logging
import os

import boto3
import pytest
from moto import mock_aws

# Set default test environment variables at module load time
# This allows test files to import modules that read env vars at import time
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")

# Disable X-Ray SDK in tests. Without a Lambda segment the SDK logs an ERROR
# for every captured call; disabled, capture() is a pass-through.
os.environ.setdefault("AWS_XRAY_SDK_ENABLED", "false")

if "ROLES_TABLE" not in os.environ:
    os.environ["ROLES_TABLE"] = "test-roles"

ROLES_TABLE_NAME = "test-roles"


@pytest.fixture(autouse=True)
def reset_env_vars():
    """
    Reset environment variables before each test.

    Ensures tests don't pollute each other's environment.
    """
    original_env = os.environ.copy()

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def aws_credentials():
    """
    Set up mock AWS credentials for moto.

    Use this fixture when testing AWS SDK calls.
    """
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_REGION"] = "us-east-1"

    yield


@pytest.fixture
def roles_table(aws_credentials):
    """
    Create a mocked roles table with the single-table key schema.

    - PK: ROLE#{name} (String)
    - SK: ROLE (String)
    """
    with mock_aws():
        os.environ["ROLES_TABLE"] = ROLES_TABLE_NAME

        client = boto3.client("dynamodb", region_name="us-east-1")
        client.create_table(
            TableName=ROLES_TABLE_NAME,
            KeySchema=[
                {"AttributeName": "PK", "KeyType": "HASH"},
                {"AttributeName": "SK", "KeyType": "RANGE"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "PK", "AttributeType": "S"},
                {"AttributeName": "SK", "AttributeType": "S"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )

        resource = boto3.resource("dynamodb", region_name="us-east-1")
        yield resource.Table(ROLES_TABLE_NAME)


@pytest.fixture
def lambda_context():
    """Minimal Lambda context with a request ID."""

    class _Context:
        aws_request_id = "test-request-id"
        function_name = "test-role-access"

    return _Context()


# =============================================================================
# Log Assertion Helpers
# =============================================================================
# Production code logs normally (never test-aware); tests explicitly assert on
# expected logs using caplog.


def assert_error_logged(caplog, pattern: str):
    """
    Helper to assert an ERROR log was captured.

    Args:
        caplog: pytest caplog fixture
        pattern: String pattern to search for in log messages

    Raises:
        AssertionError: If no ERROR log matches the pattern
    """
    assert any(
        pattern in record.message
        for record in caplog.records
        if record.levelno >= logging.ERROR
    ), f"Expected ERROR log matching '{pattern}' not found"


def assert_info_logged(caplog, pattern: str):
    """Helper to assert an INFO log was captured."""
    assert any(
        pattern in record.message
        for record in caplog.records
        if record.levelno == logging.INFO
    ), f"Expected INFO log matching '{pattern}' not found"
