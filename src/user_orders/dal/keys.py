"""
Key layout of the single table.

Users and orders live in one table and are told apart by key prefixes:

    UserProfile  pk = "USER#"             sk = "PROFILE#<username>"
    Order        pk = "ORDER#<username>"  sk = "ORDER#<orderId>"

Every user profile shares the "USER#" partition, so listing users is a query
on that partition. Each user's orders share one partition. The status index
is keyed by (orderStatus, pk) and answers "orders of user X with status S".

The functions here do no validation; any string yields a well-formed key.
"""

from typing import Dict, NamedTuple, Optional, Tuple

PARTITION_KEY = 'pk'
SORT_KEY = 'sk'
ORDER_STATUS_ATTRIBUTE = 'orderStatus'

USER_PARTITION = 'USER#'
PROFILE_PREFIX = 'PROFILE#'
ORDER_PREFIX = 'ORDER#'

STATUS_INDEX_NAME = 'statusIdx'


class TableKey(NamedTuple):
    """Primary key of one item."""

    pk: str
    sk: str

    def as_dict(self) -> Dict[str, str]:
        return {PARTITION_KEY: self.pk, SORT_KEY: self.sk}


class QueryPredicate(NamedTuple):
    """
    Equality conditions on key attributes, optionally against an index.

    `conditions` is an ordered tuple of (attribute name, value) pairs that are
    all required to match.
    """

    conditions: Tuple[Tuple[str, str], ...]
    index_name: Optional[str] = None


def user_key(username: str) -> TableKey:
    return TableKey(pk=USER_PARTITION, sk=f'{PROFILE_PREFIX}{username}')


def order_key(username: str, order_id: str) -> TableKey:
    return TableKey(pk=f'{ORDER_PREFIX}{username}', sk=f'{ORDER_PREFIX}{order_id}')


def all_users_predicate() -> QueryPredicate:
    return QueryPredicate(conditions=((PARTITION_KEY, USER_PARTITION),))


def all_orders_of_user_predicate(username: str) -> QueryPredicate:
    return QueryPredicate(conditions=((PARTITION_KEY, f'{ORDER_PREFIX}{username}'),))


def orders_by_status_predicate(
    username: str,
    status: str,
    index_name: str = STATUS_INDEX_NAME,
) -> QueryPredicate:
    """Orders of one user with the given status, answered by the status index."""
    return QueryPredicate(
        conditions=(
            (ORDER_STATUS_ATTRIBUTE, status),
            (PARTITION_KEY, f'{ORDER_PREFIX}{username}'),
        ),
        index_name=index_name,
    )


def _strip_prefix(value: str, prefix: str) -> str:
    if not value.startswith(prefix):
        raise ValueError(f"Key '{value}' does not start with '{prefix}'")
    return value[len(prefix):]


def username_from_user_sort_key(sk: str) -> str:
    return _strip_prefix(sk, PROFILE_PREFIX)


def username_from_order_partition_key(pk: str) -> str:
    return _strip_prefix(pk, ORDER_PREFIX)


def order_id_from_sort_key(sk: str) -> str:
    return _strip_prefix(sk, ORDER_PREFIX)
