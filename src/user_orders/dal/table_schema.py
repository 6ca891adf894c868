"""Physical definition of the single table, as boto3 create_table arguments."""

from typing import Any, Dict

from user_orders.dal.keys import ORDER_STATUS_ATTRIBUTE, PARTITION_KEY, SORT_KEY, STATUS_INDEX_NAME


def table_definition(table_name: str, status_index_name: str = STATUS_INDEX_NAME) -> Dict[str, Any]:
    """
    Build the create_table keyword arguments for the users/orders table.

    Args:
        table_name: Name of the DynamoDB table
        status_index_name: Name of the (orderStatus, pk) global secondary index

    Returns:
        Keyword arguments for ``create_table``
    """
    return {
        'TableName': table_name,
        'KeySchema': [
            {'AttributeName': PARTITION_KEY, 'KeyType': 'HASH'},
            {'AttributeName': SORT_KEY, 'KeyType': 'RANGE'},
        ],
        'AttributeDefinitions': [
            {'AttributeName': PARTITION_KEY, 'AttributeType': 'S'},
            {'AttributeName': SORT_KEY, 'AttributeType': 'S'},
            {'AttributeName': ORDER_STATUS_ATTRIBUTE, 'AttributeType': 'S'},
        ],
        'GlobalSecondaryIndexes': [
            {
                'IndexName': status_index_name,
                'KeySchema': [
                    {'AttributeName': ORDER_STATUS_ATTRIBUTE, 'KeyType': 'HASH'},
                    {'AttributeName': PARTITION_KEY, 'KeyType': 'RANGE'},
                ],
                'Projection': {'ProjectionType': 'ALL'},
            }
        ],
        'BillingMode': 'PAY_PER_REQUEST',
    }
