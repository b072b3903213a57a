"""Catalog tests — settings merge, product ranking, order deletion."""

import pytest

from storefront.core.catalog import (
    NEW_PRODUCT_RANK, delete_order, delete_product, merge_settings,
    newest_first, reorder_products, sorted_products, upsert_product,
)
from storefront.core.errors import InputValidationError, ResourceNotFoundError


def test_sorted_products_treats_missing_rank_as_zero():
    products = {"a": {"id": "a", "order": 2}, "b": {"id": "b"}, "c": {"id": "c", "order": 1}}
    assert [p["id"] for p in sorted_products(products)] == ["b", "c", "a"]


def test_merge_settings_is_shallow():
    settings = {"bannerText": "old", "contact": {"phone": "1", "mail": "x"}}
    merge_settings(settings, {"contact": {"phone": "2"}})
    assert settings == {"bannerText": "old", "contact": {"phone": "2"}}


def test_merge_settings_rejects_non_object():
    with pytest.raises(InputValidationError):
        merge_settings({}, ["nope"])


def test_new_product_gets_default_rank():
    products = {}
    record = upsert_product(products, {"id": "p1", "name": "Lemon"})
    assert record["order"] == NEW_PRODUCT_RANK
    assert products["p1"]["name"] == "Lemon"


def test_upsert_keeps_existing_rank_and_replaces_fields():
    products = {"p1": {"id": "p1", "name": "Old", "badge": "NEW", "order": 3}}
    upsert_product(products, {"id": "p1", "name": "New", "order": 50})
    assert products["p1"] == {"id": "p1", "name": "New", "order": 3}


def test_upsert_requires_id():
    with pytest.raises(InputValidationError):
        upsert_product({}, {"name": "No id"})


def test_delete_product_is_idempotent():
    products = {"p1": {"id": "p1"}}
    assert delete_product(products, "p1")
    assert not delete_product(products, "p1")


def test_reorder_ignores_unknown_ids():
    products = {"a": {"order": 0}, "b": {"order": 1}}
    assert reorder_products(products, ["b", "unknown", "a"]) == 2
    assert products["b"]["order"] == 0
    assert products["a"]["order"] == 2


def test_newest_first_does_not_mutate():
    orders = [{"id": 1}, {"id": 2}]
    assert newest_first(orders) == [{"id": 2}, {"id": 1}]
    assert orders[0]["id"] == 1


def test_delete_order_by_either_id():
    orders = [{"id": 1700, "orderId": 4321}, {"id": 1800, "orderId": 1234}]
    assert delete_order(orders, "4321") == [{"id": 1800, "orderId": 1234}]
    assert delete_order(orders, "1800") == [{"id": 1700, "orderId": 4321}]


def test_delete_unknown_order_is_not_found():
    with pytest.raises(ResourceNotFoundError):
        delete_order([{"id": 1, "orderId": 1001}], "9999")
