"""
Lambda Handlers Module.

Entry points and request routing for the users/orders API:

1. Handler Layer (this module): event parsing, routing, response shaping
2. Logic Layer: existence checks and entity operations
3. Data Access Layer: the single DynamoDB table

Deployed handler: ``user_orders.handlers.api_handler.lambda_handler``.
"""
