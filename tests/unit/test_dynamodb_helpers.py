"""
Unit Tests for DynamoDB Helper Module
=====================================

Tests the role store helpers using moto mocks.

For On-Call Engineers:
    If tests fail in CI but pass locally:
    1. Check moto version (mock_aws requires moto>=5)
    2. Verify the roles_table fixture matches the deployed key schema
    3. Check AWS_REGION is set to us-east-1

For Developers:
    - All tests use moto to mock DynamoDB (no real AWS calls)
    - Fixture creates table with single-table keys (PK=ROLE#{name}, SK=ROLE)
    - Test both success and failure cases
"""

import os
from decimal import Decimal

import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

from src.lambdas.shared.dynamodb import (
    RETRY_CONFIG,
    build_projection,
    build_role_key,
    get_dynamodb_resource,
    get_table,
    is_conditional_check_failure,
    parse_dynamodb_item,
    to_dynamodb_value,
    to_role_document,
)


class TestBuildRoleKey:
    """Tests for build_role_key function."""

    def test_build_key_format(self):
        """Test key structure is correct."""
        assert build_role_key("ADMIN") == {"PK": "ROLE#ADMIN", "SK": "ROLE"}

    def test_build_key_custom_role(self):
        """Test custom role names are not normalized."""
        assert build_role_key("content-editor")["PK"] == "ROLE#content-editor"


class TestBuildProjection:
    """Tests for build_projection function."""

    def test_placeholders_for_every_field(self):
        expression, names = build_projection(["name", "prompts"])

        assert expression == "#p0, #p1"
        assert names == {"#p0": "name", "#p1": "prompts"}

    def test_single_field(self):
        expression, names = build_projection(["bookmarks"])

        assert expression == "#p0"
        assert names == {"#p0": "bookmarks"}

    def test_projection_against_table(self, roles_table):
        """Reserved word 'name' works through the placeholder."""
        roles_table.put_item(
            Item={**build_role_key("USER"), "name": "USER", "prompts": {"USE": True}}
        )
        expression, names = build_projection(["name"])

        response = roles_table.get_item(
            Key=build_role_key("USER"),
            ProjectionExpression=expression,
            ExpressionAttributeNames=names,
        )

        assert response["Item"] == {"name": "USER"}


class TestParseDynamoDBItem:
    """Tests for parse_dynamodb_item function."""

    def test_parse_empty_item(self):
        assert parse_dynamodb_item({}) == {}
        assert parse_dynamodb_item(None) == {}

    def test_parse_decimal_to_int(self):
        """Test whole-number Decimal converts to int."""
        result = parse_dynamodb_item({"version": Decimal("3")})

        assert result["version"] == 3
        assert isinstance(result["version"], int)

    def test_parse_decimal_to_float(self):
        """Test Decimal with decimals converts to float."""
        result = parse_dynamodb_item({"weight": Decimal("0.5")})

        assert result["weight"] == 0.5
        assert isinstance(result["weight"], float)

    def test_parse_set_to_list(self):
        result = parse_dynamodb_item({"tags": {"ops", "billing"}})

        assert isinstance(result["tags"], list)
        assert set(result["tags"]) == {"ops", "billing"}

    def test_parse_nested_dict(self):
        item = {"limits": {"max": Decimal("10"), "nested": {"ratio": Decimal("0.25")}}}
        result = parse_dynamodb_item(item)

        assert result["limits"]["max"] == 10
        assert result["limits"]["nested"]["ratio"] == 0.25

    def test_parse_booleans_unchanged(self):
        result = parse_dynamodb_item({"prompts": {"USE": True, "CREATE": False}})

        assert result["prompts"] == {"USE": True, "CREATE": False}


class TestToDynamoDBValue:
    """Tests for to_dynamodb_value function."""

    def test_float_to_decimal(self):
        assert to_dynamodb_value(0.1) == Decimal("0.1")

    def test_bool_and_int_unchanged(self):
        assert to_dynamodb_value(True) is True
        assert to_dynamodb_value(7) == 7

    def test_nested_structures(self):
        result = to_dynamodb_value({"weights": [0.5, 1], "meta": {"ratio": 0.25}})

        assert result == {
            "weights": [Decimal("0.5"), 1],
            "meta": {"ratio": Decimal("0.25")},
        }

    def test_tuple_becomes_list(self):
        assert to_dynamodb_value(("a", 1.5)) == ["a", Decimal("1.5")]


class TestToRoleDocument:
    """Tests for to_role_document function."""

    def test_strips_metadata(self):
        item = {
            "PK": "ROLE#USER",
            "SK": "ROLE",
            "entity_type": "ROLE",
            "version": Decimal("2"),
            "name": "USER",
            "bookmarks": {"USE": True},
        }

        assert to_role_document(item) == {"name": "USER", "bookmarks": {"USE": True}}

    def test_missing_item(self):
        assert to_role_document(None) is None
        assert to_role_document({}) is None


class TestIsConditionalCheckFailure:
    """Tests for is_conditional_check_failure function."""

    def _client_error(self, code: str) -> ClientError:
        return ClientError({"Error": {"Code": code, "Message": "msg"}}, "PutItem")

    def test_conditional_failure(self):
        error = self._client_error("ConditionalCheckFailedException")
        assert is_conditional_check_failure(error) is True

    def test_other_client_error(self):
        error = self._client_error("ProvisionedThroughputExceededException")
        assert is_conditional_check_failure(error) is False

    def test_non_client_error(self):
        assert is_conditional_check_failure(RuntimeError("boom")) is False

    def test_real_conditional_put(self, roles_table):
        roles_table.put_item(Item={**build_role_key("ADMIN"), "name": "ADMIN"})

        with pytest.raises(ClientError) as exc_info:
            roles_table.put_item(
                Item={**build_role_key("ADMIN"), "name": "ADMIN"},
                ConditionExpression="attribute_not_exists(PK)",
            )

        assert is_conditional_check_failure(exc_info.value)


class TestGetDynamoDBResource:
    """Tests for get_dynamodb_resource function."""

    def test_get_resource_default_region(self, aws_credentials):
        with mock_aws():
            resource = get_dynamodb_resource()
            assert resource.meta.client.meta.region_name == "us-east-1"

    def test_get_resource_custom_region(self, aws_credentials):
        with mock_aws():
            resource = get_dynamodb_resource(region_name="us-west-2")
            assert resource.meta.client.meta.region_name == "us-west-2"

    def test_falls_back_to_default_region(self, aws_credentials):
        os.environ.pop("AWS_REGION", None)
        os.environ["AWS_DEFAULT_REGION"] = "eu-west-1"

        with mock_aws():
            resource = get_dynamodb_resource()
            assert resource.meta.client.meta.region_name == "eu-west-1"

    def test_missing_region_raises(self, aws_credentials):
        os.environ.pop("AWS_REGION", None)
        os.environ.pop("AWS_DEFAULT_REGION", None)

        with pytest.raises(ValueError, match="AWS_REGION"):
            get_dynamodb_resource()

    def test_retry_config(self):
        assert RETRY_CONFIG.retries == {"max_attempts": 3, "mode": "adaptive"}


class TestGetTable:
    """Tests for get_table function."""

    def test_get_table_from_env(self, roles_table):
        """Test getting table from ROLES_TABLE env var."""
        assert get_table().table_name == "test-roles"

    def test_get_table_explicit_name(self, roles_table):
        assert get_table(table_name="test-roles").table_name == "test-roles"

    def test_get_table_no_name_raises(self, aws_credentials):
        """Test that missing ROLES_TABLE env var raises ValueError."""
        os.environ.pop("ROLES_TABLE", None)

        with pytest.raises(ValueError, match="ROLES_TABLE"):
            get_table()
