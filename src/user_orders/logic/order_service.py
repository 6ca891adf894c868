"""
Business logic for orders.

Every operation confirms that the owning user exists before touching orders,
and single-order updates and deletes fetch the order before writing. The
owner check and the order write are separate store calls, so a user deleted
in between still gets the write.
"""

from typing import List, Optional

from user_orders.dal import BaseStore
from user_orders.dal.keys import (
    STATUS_INDEX_NAME,
    all_orders_of_user_predicate,
    order_key,
    orders_by_status_predicate,
)
from user_orders.handlers.utils.errors import ErrorContext, ResourceNotFoundError
from user_orders.handlers.utils.observability import logger, tracer
from user_orders.logic.user_service import UserService
from user_orders.models.input import OrderRequest
from user_orders.models.order import Order


class OrderNotFoundError(ResourceNotFoundError):
    """Raised when an order is not found."""

    def __init__(self, order_id: str, context: Optional[ErrorContext] = None):
        super().__init__(
            message=f"Order with id {order_id} not found",
            resource_type="Order",
            resource_id=order_id,
            context=context,
        )


class OrderService:
    """Operations on the orders of one user."""

    def __init__(
        self,
        store: BaseStore,
        users: UserService,
        status_index_name: str = STATUS_INDEX_NAME,
    ):
        """
        Initialize order service.

        Args:
            store: Key-value store holding users and orders
            users: Service used to resolve the owning user
            status_index_name: Name of the (orderStatus, pk) index
        """
        self.store = store
        self.users = users
        self.status_index_name = status_index_name

    @tracer.capture_method
    def list_orders(self, username: str) -> List[Order]:
        """List every order of a user. An existing user with no orders gets an empty list."""
        self.users.get_user(username)

        items = self.store.query_items(all_orders_of_user_predicate(username))
        logger.info("Orders listed", extra={"username": username, "order_count": len(items)})
        return [Order.from_item(item) for item in items]

    @tracer.capture_method
    def list_orders_by_status(self, username: str, status: str) -> List[Order]:
        self.users.get_user(username)

        predicate = orders_by_status_predicate(username, status, index_name=self.status_index_name)
        items = self.store.query_items(predicate)

        tracer.put_annotation("status_filter", status)
        logger.info("Orders listed by status", extra={
            "username": username,
            "status": status,
            "order_count": len(items),
        })
        return [Order.from_item(item) for item in items]

    @tracer.capture_method
    def create_order(self, username: str, request: OrderRequest) -> Order:
        owner = self.users.get_user(username)

        order = Order.for_owner(owner, order_status=request.order_status, items=request.items)
        self.store.put_item(order.to_item())

        tracer.put_annotation("order_id", order.id)
        logger.info("Order created", extra={"username": username, "order_id": order.id})
        return order

    @tracer.capture_method
    def get_order(self, username: str, order_id: str) -> Order:
        self.users.get_user(username)
        return self._fetch_order(username, order_id)

    @tracer.capture_method
    def update_order(self, username: str, order_id: str, request: OrderRequest) -> Order:
        """Replace status and items, and refresh the owner snapshot. The id never changes."""
        owner = self.users.get_user(username)
        self._fetch_order(username, order_id)

        order = Order.for_owner(
            owner,
            order_status=request.order_status,
            items=request.items,
            order_id=order_id,
        )
        self.store.update_item(order.key, order.order_attributes())

        logger.info("Order updated", extra={"username": username, "order_id": order_id})
        return order

    @tracer.capture_method
    def delete_order(self, username: str, order_id: str) -> None:
        self.users.get_user(username)
        self._fetch_order(username, order_id)

        self.store.delete_item(order_key(username, order_id))
        logger.info("Order deleted", extra={"username": username, "order_id": order_id})

    def _fetch_order(self, username: str, order_id: str) -> Order:
        item = self.store.get_item(order_key(username, order_id))
        if item is None:
            logger.info("Order not found", extra={"username": username, "order_id": order_id})
            raise OrderNotFoundError(order_id)
        return Order.from_item(item)
