"""
Order domain model.

An order is stored at pk="ORDER#<username>", sk="ORDER#<orderId>".
``full_name`` and ``address`` are point-in-time copies of the owning user's
profile taken at the last order write; later profile edits do not reach them.
"""

from typing import Annotated, Any, Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from user_orders.dal.keys import (
    TableKey,
    order_id_from_sort_key,
    order_key,
    username_from_order_partition_key,
)
from user_orders.models.user import UserProfile


class Order(BaseModel):
    """Order as exposed by the API."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Annotated[str, Field(
        description='Order identifier, generated once at creation',
        examples=['6f1c2a9e-4b5d-4f6e-9a8b-0c1d2e3f4a5b']
    )]

    username: Annotated[str, Field(
        description='Owning user',
        examples=['bob']
    )]

    order_status: Annotated[str, Field(
        description='Free-form status string, keys the status index',
        examples=['pending', 'shipped']
    )]

    items: Annotated[List[Any], Field(
        default_factory=list,
        description='Line items of the order',
        examples=[['itemA']]
    )]

    full_name: Annotated[Optional[str], Field(
        description="Snapshot of the owner's full name"
    )] = None

    address: Annotated[Optional[Any], Field(
        description="Snapshot of the owner's first address"
    )] = None

    @classmethod
    def for_owner(
        cls,
        owner: UserProfile,
        order_status: str,
        items: List[Any],
        order_id: Optional[str] = None,
    ) -> 'Order':
        """
        Build an order carrying a snapshot of its owner's profile.

        Args:
            owner: Profile the order belongs to
            order_status: Status of the order
            items: Line items
            order_id: Existing order id, or None to generate a new one

        Returns:
            Order instance
        """
        return cls(
            id=order_id or str(uuid4()),
            username=owner.username,
            order_status=order_status,
            items=items,
            full_name=owner.full_name,
            address=owner.primary_address,
        )

    @property
    def key(self) -> TableKey:
        return order_key(self.username, self.id)

    def order_attributes(self) -> Dict[str, Any]:
        """Stored non-key attributes, under their table attribute names."""
        return {
            'orderStatus': self.order_status,
            'items': self.items,
            'fullName': self.full_name,
            'address': self.address,
        }

    def to_item(self) -> Dict[str, Any]:
        return {**self.key.as_dict(), **self.order_attributes()}

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> 'Order':
        return cls(
            id=order_id_from_sort_key(item['sk']),
            username=username_from_order_partition_key(item['pk']),
            order_status=item['orderStatus'],
            items=list(item.get('items') or []),
            full_name=item.get('fullName'),
            address=item.get('address'),
        )
