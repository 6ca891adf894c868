"""
Data Access Layer (DAL) for the single users/orders table.

Defines the key-value store contract the business logic depends on, and a
factory for the DynamoDB implementation.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from user_orders.dal.keys import QueryPredicate, TableKey


class BaseStore(ABC):
    """
    Key-value store contract used by the services.

    Every call is an independent network operation: no locking, no retries,
    and no conditional writes. Failures surface as ``StoreFault``.
    """

    @abstractmethod
    def get_item(self, key: TableKey) -> Optional[Dict[str, Any]]:
        """Get a single item by key, or None when absent."""
        pass

    @abstractmethod
    def put_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """Unconditionally create or replace an item."""
        pass

    @abstractmethod
    def update_item(self, key: TableKey, attributes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Unconditionally set the given attributes on an item."""
        pass

    @abstractmethod
    def delete_item(self, key: TableKey) -> None:
        """Delete an item by key."""
        pass

    @abstractmethod
    def query_items(self, predicate: QueryPredicate) -> List[Dict[str, Any]]:
        """Query the table, or the predicate's index, by key equality."""
        pass

    @abstractmethod
    def scan_items(self) -> List[Dict[str, Any]]:
        """Read every item of the table."""
        pass


def get_store(table_name: str, region_name: Optional[str] = None, endpoint_url: Optional[str] = None) -> BaseStore:
    """
    Factory function to get the DynamoDB store.

    Args:
        table_name: Name of the DynamoDB table
        region_name: AWS region name
        endpoint_url: DynamoDB endpoint URL (for local testing)

    Returns:
        Store instance
    """
    # Import here to avoid circular imports
    from user_orders.dal.dynamodb_handler import DynamoDBHandler

    return DynamoDBHandler(table_name=table_name, region_name=region_name, endpoint_url=endpoint_url)


__all__ = [
    'BaseStore',
    'get_store',
]
