"""Unit tests for the single-table key layout."""

import pytest

from user_orders.dal.keys import (
    STATUS_INDEX_NAME,
    QueryPredicate,
    TableKey,
    all_orders_of_user_predicate,
    all_users_predicate,
    order_id_from_sort_key,
    order_key,
    orders_by_status_predicate,
    user_key,
    username_from_order_partition_key,
    username_from_user_sort_key,
)
from user_orders.dal.table_schema import table_definition


class TestEntityKeys:
    """Key derivation for users and orders."""

    def test_user_key_shares_user_partition(self):
        assert user_key("alice") == TableKey(pk="USER#", sk="PROFILE#alice")
        assert user_key("bob").pk == user_key("alice").pk

    def test_order_key_partitions_by_user(self):
        key = order_key("bob", "1234")

        assert key == TableKey(pk="ORDER#bob", sk="ORDER#1234")
        assert order_key("bob", "5678").pk == key.pk
        assert order_key("carol", "1234").pk != key.pk

    def test_as_dict_uses_table_attribute_names(self):
        assert order_key("bob", "1").as_dict() == {"pk": "ORDER#bob", "sk": "ORDER#1"}

    def test_derivation_is_deterministic(self):
        assert user_key("alice") == user_key("alice")
        assert order_key("alice", "x") == order_key("alice", "x")

    @pytest.mark.parametrize("username", ["alice", "bob", "USER#", "PROFILE#x", "ORDER#", "", "a b/c"])
    @pytest.mark.parametrize("order_id", ["1", "", "PROFILE#alice"])
    def test_user_and_order_keys_never_collide(self, username, order_id):
        assert user_key(username) != order_key(username, order_id)
        assert user_key(username).pk != order_key(username, order_id).pk

    def test_empty_username_still_yields_a_key(self):
        assert user_key("") == TableKey(pk="USER#", sk="PROFILE#")
        assert order_key("", "") == TableKey(pk="ORDER#", sk="ORDER#")


class TestQueryPredicates:
    """Predicates for the three list access patterns."""

    def test_all_users_predicate(self):
        assert all_users_predicate() == QueryPredicate(conditions=(("pk", "USER#"),))
        assert all_users_predicate().index_name is None

    def test_all_orders_of_user_predicate(self):
        predicate = all_orders_of_user_predicate("bob")

        assert predicate.conditions == (("pk", "ORDER#bob"),)
        assert predicate.index_name is None

    def test_orders_by_status_predicate_targets_status_index(self):
        predicate = orders_by_status_predicate("bob", "pending")

        assert predicate.index_name == STATUS_INDEX_NAME == "statusIdx"
        assert predicate.conditions == (("orderStatus", "pending"), ("pk", "ORDER#bob"))

    def test_orders_by_status_predicate_custom_index(self):
        assert orders_by_status_predicate("bob", "shipped", index_name="orderStatusIdx").index_name == "orderStatusIdx"


class TestKeyParsing:
    """Recovering identifiers from stored keys."""

    def test_round_trip_identifiers(self):
        assert username_from_user_sort_key(user_key("alice").sk) == "alice"
        key = order_key("bob", "abc-123")
        assert username_from_order_partition_key(key.pk) == "bob"
        assert order_id_from_sort_key(key.sk) == "abc-123"

    def test_wrong_prefix_is_rejected(self):
        with pytest.raises(ValueError):
            username_from_user_sort_key("ORDER#1")
        with pytest.raises(ValueError):
            order_id_from_sort_key("PROFILE#alice")


class TestTableDefinition:
    """Physical table definition."""

    def test_primary_key_is_pk_sk(self):
        definition = table_definition("users-orders")

        assert definition["TableName"] == "users-orders"
        assert definition["KeySchema"] == [
            {"AttributeName": "pk", "KeyType": "HASH"},
            {"AttributeName": "sk", "KeyType": "RANGE"},
        ]

    def test_status_index_keyed_by_status_then_partition(self):
        (index,) = table_definition("users-orders")["GlobalSecondaryIndexes"]

        assert index["IndexName"] == "statusIdx"
        assert index["KeySchema"] == [
            {"AttributeName": "orderStatus", "KeyType": "HASH"},
            {"AttributeName": "pk", "KeyType": "RANGE"},
        ]
        assert index["Projection"] == {"ProjectionType": "ALL"}
