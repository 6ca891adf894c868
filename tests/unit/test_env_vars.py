"""Unit tests for the environment variable model."""

import pytest
from pydantic import ValidationError

from user_orders.handlers.models.env_vars import ApiEnvVars, get_api_env_vars
from user_orders.handlers.utils.observability import METRICS_NAMESPACE


class TestApiEnvVars:
    """Test cases for ApiEnvVars."""

    def test_defaults(self):
        env_vars = ApiEnvVars.model_validate({"TABLE_NAME": "users-orders"})

        assert env_vars.AWS_REGION == "us-east-1"
        assert env_vars.DYNAMODB_ENDPOINT is None
        assert env_vars.STATUS_INDEX_NAME == "statusIdx"
        assert env_vars.LOG_LEVEL == "INFO"

    def test_table_name_is_required(self):
        with pytest.raises(ValidationError):
            ApiEnvVars.model_validate({})

    def test_rejects_unknown_log_level(self):
        with pytest.raises(ValidationError):
            ApiEnvVars.model_validate({"TABLE_NAME": "users-orders", "LOG_LEVEL": "VERBOSE"})

    def test_metrics_namespace_is_fixed_in_code(self):
        assert "POWERTOOLS_METRICS_NAMESPACE" not in ApiEnvVars.model_fields
        assert METRICS_NAMESPACE == "UserOrders"

    def test_reads_process_environment(self):
        assert get_api_env_vars().TABLE_NAME == "test-user-orders-table"
