"""
Service Models Package

Pydantic models for the two entities sharing the table and for request bodies.
"""

from .input import CreateUserRequest, OrderRequest, UpdateUserRequest
from .order import Order
from .user import UserProfile

__all__ = [
    # Input models
    "CreateUserRequest",
    "UpdateUserRequest",
    "OrderRequest",

    # Domain models
    "UserProfile",
    "Order",
]
