"""
Single-table user/order service.

User profiles and their orders share one DynamoDB table, disambiguated by key
prefixes, behind an API Gateway + Lambda request router:

- handlers: Lambda entry point and request routing
- logic: existence checks and entity operations
- dal: key layout and the key-value store
- models: entities and request bodies
"""

__version__ = "1.0.0"
__description__ = "Single-table DynamoDB data access layer for users and orders"
