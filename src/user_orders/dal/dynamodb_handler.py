"""
DynamoDB implementation of the key-value store.

Thin wrapper over a boto3 Table resource. Errors raised by boto3/botocore are
logged, counted and re-raised as ``StoreFault``; nothing is retried here.
"""

import functools
import time
from typing import Any, Callable, Dict, List, Optional, TypeVar

import boto3
from aws_lambda_powertools.metrics import MetricUnit
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from user_orders.dal import BaseStore
from user_orders.dal.keys import QueryPredicate, TableKey
from user_orders.handlers.utils.errors import ErrorSeverity, StoreFault
from user_orders.handlers.utils.observability import logger, metrics, tracer

R = TypeVar('R')


def _handle_dynamodb_errors(operation: str) -> Callable[[Callable[..., R]], Callable[..., R]]:
    """Decorator translating boto3 failures of a store method into StoreFault."""

    def decorator(func: Callable[..., R]) -> Callable[..., R]:
        @functools.wraps(func)
        def wrapper(self: 'DynamoDBHandler', *args: Any, **kwargs: Any) -> R:
            operation_start = time.time()
            metrics.add_metric(name=f"DynamoDB{operation}Count", unit=MetricUnit.Count, value=1)

            try:
                result = func(self, *args, **kwargs)
            except ClientError as e:
                error_code = e.response['Error']['Code']
                error_message = e.response['Error'].get('Message', '')

                metrics.add_metric(name=f"DynamoDB{operation}Error", unit=MetricUnit.Count, value=1)
                logger.error(f"DynamoDB {operation} error", extra={
                    "error_code": error_code,
                    "error_message": error_message,
                    "table_name": self.table_name,
                    "operation": operation,
                })

                if error_code == 'ResourceNotFoundException':
                    raise StoreFault(
                        message=f"Table {self.table_name} not found",
                        operation=operation,
                        table_name=self.table_name,
                        error_code="TABLE_NOT_FOUND",
                    ) from e
                if error_code == 'ProvisionedThroughputExceededException':
                    raise StoreFault(
                        message="DynamoDB throughput exceeded",
                        operation=operation,
                        table_name=self.table_name,
                        error_code="THROUGHPUT_EXCEEDED",
                        retry_after=60,
                    ) from e
                if error_code == 'ThrottlingException':
                    raise StoreFault(
                        message="DynamoDB throttling detected",
                        operation=operation,
                        table_name=self.table_name,
                        error_code="THROTTLING_ERROR",
                        retry_after=30,
                    ) from e
                raise StoreFault(
                    message=f"DynamoDB error: {error_message}",
                    operation=operation,
                    table_name=self.table_name,
                    error_code=f"DYNAMODB_{error_code}",
                ) from e

            except BotoCoreError as e:
                metrics.add_metric(name=f"DynamoDB{operation}Error", unit=MetricUnit.Count, value=1)
                logger.error(f"DynamoDB connection error during {operation}", extra={
                    "error": str(e),
                    "table_name": self.table_name,
                })
                raise StoreFault(
                    message=f"Database connection error: {e}",
                    operation=operation,
                    table_name=self.table_name,
                    error_code="DATABASE_CONNECTION_ERROR",
                    severity=ErrorSeverity.CRITICAL,
                ) from e

            operation_duration = (time.time() - operation_start) * 1000
            metrics.add_metric(name=f"DynamoDB{operation}Duration", unit=MetricUnit.Milliseconds, value=operation_duration)
            tracer.put_annotation("dynamodb_operation", operation)
            return result

        return wrapper

    return decorator


class DynamoDBHandler(BaseStore):
    """Key-value store backed by a single DynamoDB table."""

    def __init__(
        self,
        table_name: str,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
    ):
        """
        Initialize DynamoDB handler.

        Args:
            table_name: Name of the DynamoDB table
            region_name: AWS region name
            endpoint_url: DynamoDB endpoint URL (for local testing)
        """
        self.table_name = table_name

        session_config: Dict[str, Any] = {}
        if region_name:
            session_config['region_name'] = region_name
        if endpoint_url:
            session_config['endpoint_url'] = endpoint_url

        self.dynamodb = boto3.resource('dynamodb', **session_config)
        self.table = self.dynamodb.Table(table_name)

        logger.info("DynamoDB handler initialized", extra={
            "table_name": table_name,
            "region_name": region_name,
            "endpoint_url": endpoint_url,
        })

    @tracer.capture_method
    @_handle_dynamodb_errors("GetItem")
    def get_item(self, key: TableKey) -> Optional[Dict[str, Any]]:
        response = self.table.get_item(Key=key.as_dict())
        item = response.get('Item')

        logger.debug("Item lookup completed", extra={
            "table_name": self.table_name,
            "key": key.as_dict(),
            "found": item is not None,
        })
        return item

    @tracer.capture_method
    @_handle_dynamodb_errors("PutItem")
    def put_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        self.table.put_item(Item=item)

        logger.info("Item stored successfully", extra={
            "table_name": self.table_name,
            "pk": item.get('pk'),
            "sk": item.get('sk'),
        })
        return item

    @tracer.capture_method
    @_handle_dynamodb_errors("UpdateItem")
    def update_item(self, key: TableKey, attributes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Set the given attributes on an item.

        Attribute names go through placeholders, so reserved words such as
        ``items`` are safe.

        Args:
            key: Primary key of the item to update
            attributes: Attribute name to new value

        Returns:
            The updated attribute values
        """
        if not attributes:
            raise ValueError("update_item requires at least one attribute")

        names: Dict[str, str] = {}
        values: Dict[str, Any] = {}
        assignments: List[str] = []
        for position, (name, value) in enumerate(attributes.items()):
            names[f'#a{position}'] = name
            values[f':v{position}'] = value
            assignments.append(f'#a{position} = :v{position}')

        response = self.table.update_item(
            Key=key.as_dict(),
            UpdateExpression='SET ' + ', '.join(assignments),
            ExpressionAttributeNames=names,
            ExpressionAttributeValues=values,
            ReturnValues='UPDATED_NEW',
        )

        logger.info("Item updated successfully", extra={
            "table_name": self.table_name,
            "key": key.as_dict(),
            "attributes": sorted(attributes),
        })
        return response.get('Attributes')

    @tracer.capture_method
    @_handle_dynamodb_errors("DeleteItem")
    def delete_item(self, key: TableKey) -> None:
        self.table.delete_item(Key=key.as_dict())

        logger.info("Item deleted successfully", extra={
            "table_name": self.table_name,
            "key": key.as_dict(),
        })

    @tracer.capture_method
    @_handle_dynamodb_errors("Query")
    def query_items(self, predicate: QueryPredicate) -> List[Dict[str, Any]]:
        key_condition = None
        for name, value in predicate.conditions:
            condition = Key(name).eq(value)
            key_condition = condition if key_condition is None else key_condition & condition

        query_kwargs: Dict[str, Any] = {'KeyConditionExpression': key_condition}
        if predicate.index_name:
            query_kwargs['IndexName'] = predicate.index_name

        response = self.table.query(**query_kwargs)
        items = response.get('Items', [])

        logger.info("Query completed successfully", extra={
            "table_name": self.table_name,
            "index_name": predicate.index_name,
            "items_count": len(items),
        })
        return items

    @tracer.capture_method
    @_handle_dynamodb_errors("Scan")
    def scan_items(self) -> List[Dict[str, Any]]:
        response = self.table.scan()
        items = response.get('Items', [])

        logger.info("Scan completed successfully", extra={
            "table_name": self.table_name,
            "items_count": len(items),
        })
        return items
