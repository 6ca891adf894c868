"""
Request body models.

These only give the JSON body a shape; field values are stored as sent.
Unknown fields are ignored.
"""

from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _RequestModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')


class UpdateUserRequest(_RequestModel):
    """Request model for replacing a user's profile attributes."""

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
        description='Ordered list of addresses',
        examples=[['123 Main St']]
    )]


class CreateUserRequest(UpdateUserRequest):
    """Request model for creating a user."""

    username: Annotated[str, Field(
        description='Unique user name, immutable once created',
        examples=['alice']
    )]


class OrderRequest(_RequestModel):
    """Request model for creating or replacing an order."""

    order_status: Annotated[str, Field(
        description='Status of the order, keys the status index so it cannot be empty',
        min_length=1,
        examples=['pending']
    )]

    items: Annotated[List[Any], Field(
        default_factory=list,
        description='Line items of the order',
        examples=[['itemA']]
    )]
