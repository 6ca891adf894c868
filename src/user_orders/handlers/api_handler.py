"""
Users/Orders API handler - Lambda entry point behind API Gateway.

Turns an API Gateway REST proxy event into an ``ApiRequest``, dispatches it,
and shapes the proxy response. Store faults escaping the dispatcher become
5xx responses here.
"""

import json
from decimal import Decimal
from functools import lru_cache
from typing import Any, Dict

from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.data_classes import APIGatewayProxyEvent
from aws_lambda_powertools.utilities.typing import LambdaContext

from user_orders.dal import get_store
from user_orders.handlers.models.env_vars import get_api_env_vars
from user_orders.handlers.router import ApiRequest, ApiResponse, Dispatcher
from user_orders.handlers.utils.errors import (
    StoreFault,
    create_api_response,
    create_error_context,
    format_error_response,
    get_http_status_code,
    log_error_metrics,
)
from user_orders.handlers.utils.observability import logger, metrics, tracer


@lru_cache(maxsize=1)
def get_dispatcher() -> Dispatcher:
    """Build the process-wide dispatcher from the environment, once per container."""
    env_vars = get_api_env_vars()
    store = get_store(
        table_name=env_vars.TABLE_NAME,
        region_name=env_vars.AWS_REGION,
        endpoint_url=env_vars.DYNAMODB_ENDPOINT,
    )
    return Dispatcher(store, status_index_name=env_vars.STATUS_INDEX_NAME)


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_api_request(event: APIGatewayProxyEvent) -> ApiRequest:
    return ApiRequest(
        resource=event.resource,
        method=event.http_method,
        path_parameters=event.path_parameters or {},
        body=event.body,
    )


def to_proxy_response(response: ApiResponse) -> Dict[str, Any]:
    return create_api_response(
        status_code=response.status_code,
        body=json.dumps(response.body, default=_json_default),
    )


@metrics.log_metrics(capture_cold_start_metric=True)
@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Main Lambda handler function.

    Args:
        event: API Gateway REST proxy event
        context: Lambda context object

    Returns:
        API Gateway proxy response
    """
    metrics.add_metric(name="RequestCount", unit=MetricUnit.Count, value=1)
    api_event = APIGatewayProxyEvent(event)

    logger.info("Request received", extra={
        "resource": api_event.resource,
        "http_method": api_event.http_method,
    })

    try:
        response = get_dispatcher().dispatch(to_api_request(api_event))

    except StoreFault as e:
        if e.context is None:
            e.context = create_error_context(
                request_id=context.aws_request_id,
                operation=e.operation,
                table_name=e.table_name,
                resource=api_event.resource,
            )
        log_error_metrics(e)
        metrics.add_metric(name="RequestError", unit=MetricUnit.Count, value=1)

        headers = {"Retry-After": str(e.retry_after)} if e.retry_after else None
        return create_api_response(
            status_code=get_http_status_code(e),
            body=json.dumps(format_error_response(e.error_id, "A database error occurred. Please try again later.")),
            headers=headers,
        )

    except Exception:
        metrics.add_metric(name="RequestError", unit=MetricUnit.Count, value=1)
        logger.exception("Unhandled error in lambda handler", extra={
            "resource": api_event.resource,
            "http_method": api_event.http_method,
        })

        return create_api_response(
            status_code=500,
            body=json.dumps(format_error_response(context.aws_request_id)),
        )

    metrics.add_metric(name="RequestSuccess", unit=MetricUnit.Count, value=1)
    logger.info("Request completed", extra={"status_code": response.status_code})
    return to_proxy_response(response)
