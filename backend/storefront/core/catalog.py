"""Catalog — settings merge, product CRUD ranking, and order-list administration.

Invariants:
    - sorted_products orders by `order` rank; products without a numeric rank sort as 0
    - upsert keeps an existing product's rank; a new product gets NEW_PRODUCT_RANK
    - reorder assigns rank = position for known ids and ignores unknown ids
    - delete_order matches either the internal timestamp id or the 4-digit public id

Design Decisions:
    - Settings update is a shallow merge (nested objects are replaced, not merged)
    - Deleting an absent product is a no-op success; deleting an absent order is
      a NotFound (the admin panel shows "order not found")
"""

from storefront.core.errors import InputValidationError, ResourceNotFoundError

NEW_PRODUCT_RANK: int = 999


def _rank(product: dict) -> float:
    rank = product.get("order")
    if isinstance(rank, bool) or not isinstance(rank, (int, float)):
        return 0
    return rank


def sorted_products(products: dict[str, dict]) -> list[dict]:
    return sorted(
        (p for p in products.values() if isinstance(p, dict)), key=_rank,
    )


def merge_settings(settings: dict, partial: dict) -> dict:
    if not isinstance(partial, dict):
        raise InputValidationError("Settings payload must be an object", "settings")
    settings.update(partial)
    return settings


def upsert_product(products: dict[str, dict], product: dict) -> dict:
    """Insert or replace a product record, preserving its rank."""
    product_id = product.get("id") if isinstance(product, dict) else None
    if product_id in (None, ""):
        raise InputValidationError("Product id is required", "id")
    key = str(product_id)
    existing = products.get(key)
    rank = existing.get("order") if isinstance(existing, dict) else None
    record = {**product, "order": rank if rank is not None else NEW_PRODUCT_RANK}
    products[key] = record
    return record


def delete_product(products: dict[str, dict], product_id: str) -> bool:
    return products.pop(str(product_id), None) is not None


def reorder_products(products: dict[str, dict], ordered_ids: list) -> int:
    """Rank products by list position. Returns how many were re-ranked."""
    moved = 0
    for index, product_id in enumerate(ordered_ids):
        product = products.get(str(product_id))
        if isinstance(product, dict):
            product["order"] = index
            moved += 1
    return moved


def newest_first(orders: list[dict]) -> list[dict]:
    return list(reversed(orders))


def delete_order(orders: list[dict], id_or_public_id: str) -> list[dict]:
    """Return the order list without the matching order(s); NotFound if none match."""
    target = str(id_or_public_id)
    kept = [
        o for o in orders
        if not isinstance(o, dict)
        or (str(o.get("id")) != target and str(o.get("orderId")) != target)
    ]
    if len(kept) == len(orders):
        raise ResourceNotFoundError("Order", target)
    return kept
