"""
Business logic for user profiles.

Update and delete always read the profile first; a missing profile stops the
operation before any write is sent to the store.
"""

from typing import List, Optional

from user_orders.dal import BaseStore
from user_orders.dal.keys import all_users_predicate, user_key
from user_orders.handlers.utils.errors import ErrorContext, ResourceNotFoundError
from user_orders.handlers.utils.observability import logger, tracer
from user_orders.models.input import CreateUserRequest, UpdateUserRequest
from user_orders.models.user import UserProfile


class UserNotFoundError(ResourceNotFoundError):
    """Raised when a user profile does not exist."""

    def __init__(self, username: str, context: Optional[ErrorContext] = None):
        super().__init__(
            message=f"User {username} not found",
            resource_type="User",
            resource_id=username,
            context=context,
        )


class UserService:
    """Operations on user profiles."""

    def __init__(self, store: BaseStore):
        self.store = store

    @tracer.capture_method
    def list_users(self) -> List[UserProfile]:
        items = self.store.query_items(all_users_predicate())
        logger.info("Users listed", extra={"user_count": len(items)})
        return [UserProfile.from_item(item) for item in items]

    @tracer.capture_method
    def create_user(self, request: CreateUserRequest) -> UserProfile:
        """Store a new profile. An existing profile with the same username is replaced."""
        user = UserProfile(
            username=request.username,
            full_name=request.full_name,
            email=request.email,
            addresses=request.addresses,
        )
        self.store.put_item(user.to_item())

        tracer.put_annotation("username", user.username)
        logger.info("User created", extra={"username": user.username})
        return user

    @tracer.capture_method
    def get_user(self, username: str) -> UserProfile:
        """
        Fetch one profile.

        Raises:
            UserNotFoundError: If no profile is stored under the username
        """
        item = self.store.get_item(user_key(username))
        if item is None:
            logger.info("User not found", extra={"username": username})
            raise UserNotFoundError(username)
        return UserProfile.from_item(item)

    @tracer.capture_method
    def update_user(self, username: str, request: UpdateUserRequest) -> UserProfile:
        self.get_user(username)

        user = UserProfile(
            username=username,
            full_name=request.full_name,
            email=request.email,
            addresses=request.addresses,
        )
        self.store.update_item(user.key, user.profile_attributes())

        logger.info("User updated", extra={"username": username})
        return user

    @tracer.capture_method
    def delete_user(self, username: str) -> None:
        """Delete a profile. The user's orders are left in place."""
        self.get_user(username)
        self.store.delete_item(user_key(username))
        logger.info("User deleted", extra={"username": username})
