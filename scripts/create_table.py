#!/usr/bin/env python3
"""
Create the single users/orders table, typically against DynamoDB Local.

Usage:
    python scripts/create_table.py --table-name user-orders --endpoint-url http://localhost:8000
"""

import argparse
import sys

import boto3
from botocore.exceptions import ClientError

from user_orders.dal.keys import STATUS_INDEX_NAME
from user_orders.dal.table_schema import table_definition


def main():
    """Main function for the table creation script."""
    parser = argparse.ArgumentParser(
        description="Create the DynamoDB table for users and orders"
    )
    parser.add_argument(
        "--table-name",
        required=True,
        help="Name of the table to create"
    )
    parser.add_argument(
        "--endpoint-url",
        help="DynamoDB endpoint (e.g. http://localhost:8000 for DynamoDB Local)"
    )
    parser.add_argument(
        "--region",
        default="us-east-1",
        help="AWS region (default: us-east-1)"
    )
    parser.add_argument(
        "--status-index-name",
        default=STATUS_INDEX_NAME,
        help=f"Name of the order status index (default: {STATUS_INDEX_NAME})"
    )

    args = parser.parse_args()

    dynamodb = boto3.resource("dynamodb", region_name=args.region, endpoint_url=args.endpoint_url)

    try:
        table = dynamodb.create_table(**table_definition(args.table_name, args.status_index_name))
        table.wait_until_exists()
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceInUseException":
            print(f"Table {args.table_name} already exists")
            return
        print(f"Error creating table {args.table_name}: {e}")
        sys.exit(1)

    print(f"Table {args.table_name} created with index {args.status_index_name}")


if __name__ == "__main__":
    main()
