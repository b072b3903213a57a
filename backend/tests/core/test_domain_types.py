"""Domain Types — verifies bounds and enum values shared across the codebase."""

from storefront.core.domain_types import (
    MAX_RETAINED_ORDERS, PUBLIC_ID_MAX, PUBLIC_ID_MIN,
    PointsAction, Resource, StorageBackend,
)


def test_public_ids_are_four_digits():
    assert (PUBLIC_ID_MIN, PUBLIC_ID_MAX) == (1000, 9999)


def test_retention_cap():
    assert MAX_RETAINED_ORDERS == 200


def test_resources_save_in_fixed_order():
    assert [r.value for r in Resource] == ["orders", "users", "core"]


def test_points_actions():
    assert {a.value for a in PointsAction} == {"set", "add", "reset"}


def test_storage_backend_parses_from_env_string():
    assert StorageBackend("sql") is StorageBackend.SQL
