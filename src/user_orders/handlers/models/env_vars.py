"""
Environment variable models for type-safe configuration.

Parsed once per process with aws-lambda-env-modeler, which caches the
validated model.
"""

from typing import Annotated, Optional

from aws_lambda_env_modeler import get_environment_variables
from pydantic import BaseModel, Field

from user_orders.dal.keys import STATUS_INDEX_NAME


class ApiEnvVars(BaseModel):
    """Environment variables for the user/order API handler."""

    # Single DynamoDB table holding both users and orders
    TABLE_NAME: Annotated[str, Field(
        description='DynamoDB table name for users and orders',
        min_length=1
    )]

    AWS_REGION: Annotated[str, Field(
        description='AWS region of the table'
    )] = 'us-east-1'

    # Points the client at DynamoDB Local
    DYNAMODB_ENDPOINT: Annotated[Optional[str], Field(
        description='Override endpoint URL for DynamoDB'
    )] = None

    STATUS_INDEX_NAME: Annotated[str, Field(
        description='Global secondary index keyed by (orderStatus, pk)',
        min_length=1
    )] = STATUS_INDEX_NAME

    POWERTOOLS_SERVICE_NAME: Annotated[str, Field(
        description='Service name for AWS Powertools'
    )] = 'user-orders'

    LOG_LEVEL: Annotated[str, Field(
        description='Log level for application logging',
        pattern=r'^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$'
    )] = 'INFO'


def get_api_env_vars() -> ApiEnvVars:
    """
    Get typed environment variables for the API handler.

    Returns:
        Validated environment variables model instance
    """
    return get_environment_variables(model=ApiEnvVars)
