"""
UserProfile domain model.

A profile is stored at pk="USER#", sk="PROFILE#<username>". The username is
not a stored attribute; it is recovered from the sort key on read.
"""

from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from user_orders.dal.keys import TableKey, user_key, username_from_user_sort_key


class UserProfile(BaseModel):
    """User profile as exposed by the API."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    username: Annotated[str, Field(
        description='Unique, immutable user name',
        examples=['alice']
    )]

    full_name: Annotated[Optional[str], Field(
        description='Full name of the user',
        examples=['Alice A']
    )] = None

    email: Annotated[Optional[str], Field(
        description='Contact email address',
        examples=['a@x.com']
    )] = None

    addresses: Annotated[List[Any], Field(
        default_factory=list,
        description='Ordered list of addresses; the first one is copied onto new orders',
        examples=[['123 Main St']]
    )]

    @property
    def key(self) -> TableKey:
        return user_key(self.username)

    @property
    def primary_address(self) -> Optional[Any]:
        return self.addresses[0] if self.addresses else None

    def profile_attributes(self) -> Dict[str, Any]:
        """Stored non-key attributes, under their table attribute names."""
        return {
            'fullName': self.full_name,
            'email': self.email,
            'addresses': self.addresses,
        }

    def to_item(self) -> Dict[str, Any]:
        return {**self.key.as_dict(), **self.profile_attributes()}

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> 'UserProfile':
        return cls(
            username=username_from_user_sort_key(item['sk']),
            full_name=item.get('fullName'),
            email=item.get('email'),
            addresses=list(item.get('addresses') or []),
        )
