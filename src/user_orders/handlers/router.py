"""
Request router for the users/orders API.

The five resource shapes form a closed enumeration. The dispatcher keeps a
routing table keyed by (resource, method) and refuses to start if a resource
has no route, so adding a shape without wiring it fails at construction time
instead of silently falling through to 400.

Outcomes:
    200/201  the operation ran; the body is the entity, a list, or a message
    404      the user or order does not exist (checked before any write)
    400      unknown resource/method, missing path parameter, malformed body
    store faults are not caught here and propagate to the caller
"""

import json
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from user_orders.dal import BaseStore
from user_orders.dal.keys import STATUS_INDEX_NAME
from user_orders.handlers.utils.errors import (
    BadRequestError,
    ResourceNotFoundError,
    get_http_status_code,
    log_error_metrics,
)
from user_orders.handlers.utils.observability import logger, tracer
from user_orders.logic.order_service import OrderService
from user_orders.logic.user_service import UserService
from user_orders.models.input import CreateUserRequest, OrderRequest, UpdateUserRequest

T = TypeVar('T', bound=BaseModel)


class Resource(str, Enum):
    """API Gateway resource templates served by the router."""

    USERS = '/users'
    USER = '/users/{username}'
    USER_ORDERS = '/orders/{username}'
    USER_ORDERS_BY_STATUS = '/orders/{username}/status/{status}'
    USER_ORDER = '/orders/{username}/{id}'

    @classmethod
    def from_template(cls, template: Optional[str]) -> Optional['Resource']:
        try:
            return cls(template)
        except ValueError:
            return None


class HttpMethod(str, Enum):
    GET = 'GET'
    POST = 'POST'
    PUT = 'PUT'
    DELETE = 'DELETE'

    @classmethod
    def from_verb(cls, verb: Optional[str]) -> Optional['HttpMethod']:
        try:
            return cls((verb or '').upper())
        except ValueError:
            return None


class ApiRequest(BaseModel):
    """Transport-independent view of an inbound request."""

    resource: Optional[str] = Field(description='Resource template, e.g. /orders/{username}/{id}')
    method: Optional[str] = Field(description='HTTP method')
    path_parameters: Dict[str, str] = Field(default_factory=dict)
    body: Optional[str] = Field(default=None, description='Raw JSON body')


class ApiResponse(BaseModel):
    status_code: int
    body: Any = None


RouteHandler = Callable[[ApiRequest], ApiResponse]


def _reject_constant(name: str) -> Any:
    # NaN and Infinity have no DynamoDB number representation
    raise BadRequestError(message=f"Invalid JSON in request body: unsupported constant {name}")


def _parse_body(request: ApiRequest, model: Type[T]) -> T:
    """Parse the JSON body into a request model. Numbers become Decimal, as DynamoDB expects."""
    try:
        payload = json.loads(request.body or '{}', parse_float=Decimal, parse_constant=_reject_constant)
        return model.model_validate(payload)
    except json.JSONDecodeError as exc:
        raise BadRequestError(message=f"Invalid JSON in request body: {exc.msg}")
    except PydanticValidationError as exc:
        field_errors = [
            {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
            for error in exc.errors()
        ]
        raise BadRequestError(message="Invalid request body", field_errors=field_errors)


def _path_parameter(request: ApiRequest, name: str) -> str:
    value = request.path_parameters.get(name)
    if not value:
        raise BadRequestError(message=f"Missing path parameter: {name}")
    return value


class Dispatcher:
    """Maps (resource, method) pairs onto user and order operations."""

    def __init__(self, store: BaseStore, status_index_name: str = STATUS_INDEX_NAME):
        """
        Initialize the dispatcher.

        Args:
            store: Key-value store shared by every operation
            status_index_name: Name of the (orderStatus, pk) index

        Raises:
            RuntimeError: If a resource shape has no route
        """
        self.users = UserService(store)
        self.orders = OrderService(store, self.users, status_index_name=status_index_name)

        self.routes = self._build_routes()

        unrouted = set(Resource) - {resource for resource, _ in self.routes}
        if unrouted:
            raise RuntimeError(f"Resources without routes: {sorted(r.value for r in unrouted)}")

    def _build_routes(self) -> Dict[Tuple[Resource, HttpMethod], RouteHandler]:
        return {
            (Resource.USERS, HttpMethod.GET): self._list_users,
            (Resource.USERS, HttpMethod.POST): self._create_user,
            (Resource.USER, HttpMethod.GET): self._get_user,
            (Resource.USER, HttpMethod.PUT): self._update_user,
            (Resource.USER, HttpMethod.DELETE): self._delete_user,
            (Resource.USER_ORDERS, HttpMethod.GET): self._list_orders,
            (Resource.USER_ORDERS, HttpMethod.POST): self._create_order,
            (Resource.USER_ORDERS_BY_STATUS, HttpMethod.GET): self._list_orders_by_status,
            (Resource.USER_ORDER, HttpMethod.GET): self._get_order,
            (Resource.USER_ORDER, HttpMethod.PUT): self._update_order,
            (Resource.USER_ORDER, HttpMethod.DELETE): self._delete_order,
        }

    @tracer.capture_method
    def dispatch(self, request: ApiRequest) -> ApiResponse:
        """
        Run the single operation selected by the request's resource and method.

        Args:
            request: Inbound request

        Returns:
            Status code and JSON-serializable body

        Raises:
            StoreFault: If the store fails; never converted to a business outcome
        """
        resource = Resource.from_template(request.resource)
        method = HttpMethod.from_verb(request.method)

        tracer.put_annotation("resource", request.resource or "unknown")
        tracer.put_annotation("http_method", request.method or "unknown")
        logger.debug("Dispatching request", extra={
            "resource": request.resource,
            "http_method": request.method,
            "path_parameters": request.path_parameters,
        })

        try:
            handler = self.routes.get((resource, method)) if resource and method else None
            if handler is None:
                raise BadRequestError(message=f"Unsupported operation: {request.method} {request.resource}")
            return handler(request)
        except (BadRequestError, ResourceNotFoundError) as exc:
            log_error_metrics(exc)
            return ApiResponse(status_code=get_http_status_code(exc), body=exc.message)

    def _list_users(self, request: ApiRequest) -> ApiResponse:
        users = self.users.list_users()
        return ApiResponse(status_code=200, body=[_dump(user) for user in users])

    def _create_user(self, request: ApiRequest) -> ApiResponse:
        user = self.users.create_user(_parse_body(request, CreateUserRequest))
        return ApiResponse(status_code=201, body=_dump(user))

    def _get_user(self, request: ApiRequest) -> ApiResponse:
        user = self.users.get_user(_path_parameter(request, 'username'))
        return ApiResponse(status_code=200, body=_dump(user))

    def _update_user(self, request: ApiRequest) -> ApiResponse:
        username = _path_parameter(request, 'username')
        user = self.users.update_user(username, _parse_body(request, UpdateUserRequest))
        return ApiResponse(status_code=200, body=_dump(user))

    def _delete_user(self, request: ApiRequest) -> ApiResponse:
        username = _path_parameter(request, 'username')
        self.users.delete_user(username)
        return ApiResponse(status_code=200, body=f"User {username} was deleted")

    def _list_orders(self, request: ApiRequest) -> ApiResponse:
        orders = self.orders.list_orders(_path_parameter(request, 'username'))
        return ApiResponse(status_code=200, body=[_dump(order) for order in orders])

    def _list_orders_by_status(self, request: ApiRequest) -> ApiResponse:
        orders = self.orders.list_orders_by_status(
            _path_parameter(request, 'username'),
            _path_parameter(request, 'status'),
        )
        return ApiResponse(status_code=200, body=[_dump(order) for order in orders])

    def _create_order(self, request: ApiRequest) -> ApiResponse:
        username = _path_parameter(request, 'username')
        order = self.orders.create_order(username, _parse_body(request, OrderRequest))
        return ApiResponse(status_code=201, body=_dump(order))

    def _get_order(self, request: ApiRequest) -> ApiResponse:
        order = self.orders.get_order(_path_parameter(request, 'username'), _path_parameter(request, 'id'))
        return ApiResponse(status_code=200, body=_dump(order))

    def _update_order(self, request: ApiRequest) -> ApiResponse:
        username = _path_parameter(request, 'username')
        order_id = _path_parameter(request, 'id')
        order = self.orders.update_order(username, order_id, _parse_body(request, OrderRequest))
        return ApiResponse(status_code=200, body=_dump(order))

    def _delete_order(self, request: ApiRequest) -> ApiResponse:
        username = _path_parameter(request, 'username')
        order_id = _path_parameter(request, 'id')
        self.orders.delete_order(username, order_id)
        return ApiResponse(status_code=200, body=f"Order with id {order_id} was deleted")


def _dump(model: BaseModel) -> Dict[str, Any]:
    return model.model_dump(by_alias=True)


__all__ = [
    'ApiRequest',
    'ApiResponse',
    'Dispatcher',
    'HttpMethod',
    'Resource',
]
