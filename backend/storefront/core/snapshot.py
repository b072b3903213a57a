"""Snapshot — the per-request working copy of all persisted state, plus structural repair.

Invariants:
    - A Snapshot is assembled from three independent documents (core, orders, users)
      and split back into exactly those three for saving
    - After repair_snapshot: admin.passwordHash present, settings.categories
      non-empty, settings.bannerText present, every product has an integer `order`
    - Repair never overwrites a value that is already present
    - Wrong-typed documents are replaced by their empty defaults (never raise)

Design Decisions:
    - Documents stay plain dicts: product/order records carry arbitrary admin and
      storefront fields that must round-trip untouched
    - Password hashing injected as a callable so this module stays pure and cheap
      to test (bcrypt lives in admin_gate)
"""

from dataclasses import dataclass, field
from typing import Any, Callable

from storefront.core.domain_types import Resource


@dataclass
class Snapshot:
    """Complete in-memory representation of persisted state for one request."""
    admin: dict = field(default_factory=dict)
    settings: dict = field(default_factory=dict)
    products: dict[str, dict] = field(default_factory=dict)
    orders: list[dict] = field(default_factory=list)
    users: dict[str, dict] = field(default_factory=dict)
    # Unknown top-level keys of the core document, preserved on save
    extra: dict[str, Any] = field(default_factory=dict)


_CORE_KEYS = ("admin", "settings", "products")


def empty_document(resource: Resource) -> dict | list:
    """Default value a resource degrades to when missing or unreadable."""
    if resource is Resource.ORDERS:
        return []
    return {}


def document_is_well_typed(resource: Resource, document: Any) -> bool:
    """Top-level type check applied to every freshly parsed document."""
    if resource is Resource.ORDERS:
        return isinstance(document, list)
    return isinstance(document, dict)


def snapshot_from_documents(
    core: dict | None, orders: list | None, users: dict | None,
) -> Snapshot:
    """Assemble a Snapshot from raw documents. Pure, no repair yet."""
    core = core or {}
    extra = {k: v for k, v in core.items() if k not in _CORE_KEYS}
    return Snapshot(
        admin=core.get("admin"),
        settings=core.get("settings"),
        products=core.get("products"),
        orders=orders if orders is not None else [],
        users=users if users is not None else {},
        extra=extra,
    )


def snapshot_to_documents(snapshot: Snapshot) -> dict[Resource, dict | list]:
    """Split a Snapshot into its three persisted documents. Pure, no IO."""
    core = {
        **snapshot.extra,
        "admin": snapshot.admin,
        "settings": snapshot.settings,
        "products": snapshot.products,
    }
    return {
        Resource.ORDERS: snapshot.orders or [],
        Resource.USERS: snapshot.users or {},
        Resource.CORE: core,
    }


def repair_snapshot(
    snapshot: Snapshot,
    *,
    default_password_hash: Callable[[], str],
    default_categories: list[str],
    default_banner_text: str,
) -> Snapshot:
    """Backfill structural defaults in place and return the snapshot.

    default_password_hash is only called when the admin hash is missing
    (bcrypt is slow; well-formed stores never pay for it).
    """
    if not isinstance(snapshot.admin, dict):
        snapshot.admin = {}
    if not snapshot.admin.get("passwordHash"):
        snapshot.admin["passwordHash"] = default_password_hash()

    if not isinstance(snapshot.settings, dict):
        snapshot.settings = {}
    if not snapshot.settings.get("categories"):
        snapshot.settings["categories"] = list(default_categories)
    if not snapshot.settings.get("bannerText"):
        snapshot.settings["bannerText"] = default_banner_text

    if not isinstance(snapshot.products, dict):
        snapshot.products = {}
    for index, product in enumerate(snapshot.products.values()):
        if isinstance(product, dict) and "order" not in product:
            product["order"] = index

    if not isinstance(snapshot.orders, list):
        snapshot.orders = []
    if not isinstance(snapshot.users, dict):
        snapshot.users = {}
    return snapshot
