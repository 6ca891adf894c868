"""
Pytest configuration and shared fixtures.

Environment variables are set at import time so that Powertools and the
environment model see them before any ``user_orders`` module is imported.
"""

import json
import os
from typing import Any, Callable, Dict, Optional
from unittest.mock import Mock

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

TABLE_NAME = "test-user-orders-table"

os.environ.update({
    "AWS_DEFAULT_REGION": "us-east-1",
    "AWS_REGION": "us-east-1",
    "AWS_ACCESS_KEY_ID": "test",
    "AWS_SECRET_ACCESS_KEY": "test",
    "AWS_SECURITY_TOKEN": "test",
    "AWS_SESSION_TOKEN": "test",
    "TABLE_NAME": TABLE_NAME,
    "POWERTOOLS_SERVICE_NAME": "test-user-orders",
    "POWERTOOLS_TRACE_DISABLED": "true",  # Disable X-Ray in tests
    "LOG_LEVEL": "DEBUG",
})

from user_orders.dal import BaseStore  # noqa: E402
from user_orders.dal.dynamodb_handler import DynamoDBHandler  # noqa: E402
from user_orders.dal.table_schema import table_definition  # noqa: E402
from user_orders.handlers.api_handler import get_dispatcher  # noqa: E402
from user_orders.handlers.utils.observability import metrics  # noqa: E402


# DynamoDB fixtures
@pytest.fixture
def dynamodb_table():
    """Create a mock users/orders table with the status index."""
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")
        table = dynamodb.create_table(**table_definition(TABLE_NAME))
        table.wait_until_exists()
        yield table


@pytest.fixture
def store(dynamodb_table) -> DynamoDBHandler:
    """DynamoDB store bound to the mock table."""
    return DynamoDBHandler(TABLE_NAME, region_name="us-east-1")


@pytest.fixture
def mock_store() -> Mock:
    """Store double with every lookup missing; records every call."""
    store = Mock(spec=BaseStore)
    store.get_item.return_value = None
    store.query_items.return_value = []
    return store


@pytest.fixture
def lambda_context():
    """Create a mock Lambda context for testing."""
    context = Mock()
    context.function_name = "test-user-orders-function"
    context.function_version = "$LATEST"
    context.invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:test-user-orders-function"
    context.memory_limit_in_mb = 256
    context.aws_request_id = "test-lambda-request-id"
    context.get_remaining_time_in_millis.return_value = 30000
    return context


@pytest.fixture
def api_gateway_event() -> Callable[..., Dict[str, Any]]:
    """Factory for API Gateway REST proxy events."""

    def make_event(
        resource: str,
        method: str,
        path_parameters: Optional[Dict[str, str]] = None,
        body: Any = None,
    ) -> Dict[str, Any]:
        path = resource
        for name, value in (path_parameters or {}).items():
            path = path.replace("{" + name + "}", value)

        return {
            "resource": resource,
            "path": path,
            "httpMethod": method,
            "headers": {"Content-Type": "application/json"},
            "multiValueHeaders": {},
            "queryStringParameters": None,
            "multiValueQueryStringParameters": None,
            "pathParameters": path_parameters,
            "stageVariables": None,
            "requestContext": {
                "requestId": "test-request-id-123",
                "resourcePath": resource,
                "httpMethod": method,
                "stage": "test",
                "accountId": "123456789012",
            },
            "body": body if body is None or isinstance(body, str) else json.dumps(body),
            "isBase64Encoded": False,
        }

    return make_event


# Error simulation fixtures
@pytest.fixture
def mock_dynamodb_error():
    """Build botocore ClientErrors for testing error handling."""

    def create_error(error_code: str, message: str = "Test error"):
        return ClientError(
            error_response={
                "Error": {
                    "Code": error_code,
                    "Message": message,
                }
            },
            operation_name="TestOperation"
        )

    return create_error


@pytest.fixture(autouse=True)
def reset_singletons():
    """Drop the cached dispatcher and buffered metrics between tests."""
    get_dispatcher.cache_clear()
    metrics.clear_metrics()
    yield
    get_dispatcher.cache_clear()
    metrics.clear_metrics()


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
