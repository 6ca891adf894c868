"""
Business Logic Layer Module.

Services that sit between the router and the key-value store and enforce the
existence checks that must pass before any write.
"""

from user_orders.logic.order_service import OrderNotFoundError, OrderService
from user_orders.logic.user_service import UserNotFoundError, UserService

__all__ = [
    "OrderNotFoundError",
    "OrderService",
    "UserNotFoundError",
    "UserService",
]
