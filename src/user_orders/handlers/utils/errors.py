"""
Error taxonomy and API response helpers for the user/order handlers.

Business outcomes (not found, bad request) are raised as service errors and
turned into 404/400 responses by the router. Store faults share the same base
class but are left to propagate to the Lambda entry point, which maps them to
a 5xx response.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from aws_lambda_powertools.metrics import MetricUnit
from pydantic import BaseModel, Field

from user_orders.handlers.utils.observability import logger, metrics, tracer


class ErrorSeverity(str, Enum):
    """Error severity levels for classification."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ErrorCategory(str, Enum):
    """Error categories for classification."""
    VALIDATION = "VALIDATION"
    BUSINESS_LOGIC = "BUSINESS_LOGIC"
    INFRASTRUCTURE = "INFRASTRUCTURE"


class ErrorContext(BaseModel):
    """Context information for errors."""

    request_id: str = Field(description="Unique request identifier")
    operation: str = Field(description="Operation being performed")
    resource_id: Optional[str] = Field(default=None, description="Resource identifier")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    additional_data: Dict[str, Any] = Field(default_factory=dict)


class BaseServiceError(Exception):
    """Base exception class for service errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.BUSINESS_LOGIC,
        context: Optional[ErrorContext] = None,
        retry_after: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.severity = severity
        self.category = category
        self.context = context
        self.retry_after = retry_after
        self.error_id = str(uuid.uuid4())

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "error_id": self.error_id,
            "error_code": self.error_code,
            "message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
            "retry_after": self.retry_after,
            "context": self.context.model_dump(mode="json") if self.context else None,
        }


class BadRequestError(BaseServiceError):
    """Raised when the resource/method pair is unknown or the body is malformed."""

    def __init__(
        self,
        message: str,
        field_errors: Optional[List[Dict[str, str]]] = None,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            message=message,
            error_code="BAD_REQUEST",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
            context=context,
        )
        self.field_errors = field_errors or []

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "field_errors": self.field_errors}


class ResourceNotFoundError(BaseServiceError):
    """Raised when a referenced user or order does not exist."""

    def __init__(
        self,
        message: str,
        resource_type: str,
        resource_id: str,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(
            message=message,
            error_code="RESOURCE_NOT_FOUND",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.BUSINESS_LOGIC,
            context=context,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class StoreFault(BaseServiceError):
    """Raised when the key-value store itself fails. Never retried locally."""

    def __init__(
        self,
        message: str,
        operation: str,
        table_name: str,
        error_code: str = "STORE_FAULT",
        severity: ErrorSeverity = ErrorSeverity.HIGH,
        context: Optional[ErrorContext] = None,
        retry_after: Optional[int] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            severity=severity,
            category=ErrorCategory.INFRASTRUCTURE,
            context=context,
            retry_after=retry_after,
        )
        self.operation = operation
        self.table_name = table_name


def create_error_context(
    request_id: str,
    operation: str,
    resource_id: Optional[str] = None,
    **additional_data: Any,
) -> ErrorContext:
    """Create an error context for consistent error handling."""
    return ErrorContext(
        request_id=request_id,
        operation=operation,
        resource_id=resource_id,
        additional_data=additional_data,
    )


@tracer.capture_method
def log_error_metrics(error: BaseServiceError) -> None:
    """Log error metrics for monitoring and alerting."""
    metrics.add_metric(name="ErrorCount", unit=MetricUnit.Count, value=1)
    metrics.add_metric(name=f"Error{error.category.value}Count", unit=MetricUnit.Count, value=1)

    tracer.put_annotation("error_code", error.error_code)
    tracer.put_metadata("error_details", error.to_dict())

    log = logger.error if error.category == ErrorCategory.INFRASTRUCTURE else logger.info
    log(
        "Service error occurred",
        extra={
            "error_id": error.error_id,
            "error_code": error.error_code,
            "error_category": error.category.value,
            "error_message": error.message,
        },
    )


def get_http_status_code(error: BaseServiceError) -> int:
    """Get appropriate HTTP status code for error."""

    status_mapping = {
        "BAD_REQUEST": 400,
        "RESOURCE_NOT_FOUND": 404,
        "THROTTLING_ERROR": 503,
        "THROUGHPUT_EXCEEDED": 503,
    }

    return status_mapping.get(error.error_code, 500)


def format_error_response(error_id: str, message: str = "An unexpected error occurred") -> Dict[str, Any]:
    """Format an unhandled fault for API response."""
    return {
        "error": {
            "code": "INTERNAL_SERVER_ERROR",
            "message": message,
            "error_id": error_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    }


def create_api_response(
    status_code: int,
    body: Any,
    headers: Optional[Dict[str, str]] = None,
    cors_enabled: bool = True,
) -> Dict[str, Any]:
    """Create standardized API Gateway proxy response."""

    default_headers = {
        "Content-Type": "application/json",
    }

    if cors_enabled:
        default_headers.update({
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Headers": "Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token",
            "Access-Control-Allow-Methods": "OPTIONS,POST,GET,PUT,DELETE",
        })

    if headers:
        default_headers.update(headers)

    return {
        "statusCode": status_code,
        "headers": default_headers,
        "body": body if isinstance(body, str) else str(body),
    }
