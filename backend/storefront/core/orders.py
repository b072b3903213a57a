"""Order Admission — validate, decorate and admit a storefront order into a Snapshot.

Invariants:
    - An order without a non-empty `items` list is rejected before ANY mutation
    - Bot-verified identity beats the web pseudonym; neither → anonymous order
    - Every admitted order gets: id (ms timestamp), orderId (4 digits), status "pending"
    - Stock only moves for products that exist and track stock (stockGrams > 0);
      the result is floored at 0 and never restored
    - Only finite, positive gram amounts move stock: a negative, NaN or infinite
      weight or quantity leaves stock untouched
    - Loyalty accrues (+1 point, +total spent) only for bot-verified identities
    - Retained orders never exceed MAX_RETAINED_ORDERS (oldest evicted first)

Design Decisions:
    - admit_order mutates the snapshot working copy in place; the shell persists it.
      Stock, loyalty and the append are NOT transactional with the save
    - Weight labels are free text ("3.5g", "1/8 oz"): strip to digits/dots, parse the
      leading number, default 0, so bad labels never block a checkout
"""

import math
import random
import re
from dataclasses import dataclass, field

from storefront.core.domain_types import (
    MAX_RETAINED_ORDERS, InternalOrderId, OrderStatus, PublicOrderId, UserKey,
)
from storefront.core.errors import InputValidationError
from storefront.core.identity import derive_pseudonym_key
from storefront.core.loyalty import accrue_order
from storefront.core.order_ids import draw_order_id
from storefront.core.snapshot import Snapshot

_NOT_NUMERIC = re.compile(r"[^0-9.]")
_LEADING_NUMBER = re.compile(r"\d+(?:\.\d*)?|\.\d+")


@dataclass
class AdmissionResult:
    public_id: PublicOrderId
    internal_id: InternalOrderId
    points_after: int | None = None
    order_id_exhausted: bool = False
    stock_movements: list[dict] = field(default_factory=list)


def validate_order_items(raw_order: object) -> list:
    """Return the item list or raise: the only gate before mutation."""
    if not isinstance(raw_order, dict):
        raise InputValidationError("Order payload must be an object", "order")
    items = raw_order.get("items")
    if not isinstance(items, list) or not items:
        raise InputValidationError("Order has no items", "items")
    return items


def parse_weight_grams(label: object) -> float:
    """Numeric weight from a free-text label; 0 when nothing parses.

    Never negative and never NaN/inf: labels lose their sign when stripped, and
    numeric weights outside [0, inf) count as 0.
    """
    if isinstance(label, bool):
        return 0.0
    if isinstance(label, (int, float)):
        value = float(label)
        return value if math.isfinite(value) and value > 0 else 0.0
    if not isinstance(label, str):
        return 0.0
    match = _LEADING_NUMBER.match(_NOT_NUMERIC.sub("", label))
    return float(match.group()) if match else 0.0


def _quantity(item: dict) -> float:
    raw = item.get("quantity") or 1
    try:
        return float(raw)
    except (TypeError, ValueError):
        return 1.0


def _as_number(value: float) -> int | float:
    """Keep whole gram counts as ints in the JSON documents."""
    return int(value) if float(value).is_integer() else value


def apply_stock_decrement(products: dict[str, dict], items: list) -> list[dict]:
    """Subtract ordered grams from tracked stock. Returns the applied movements."""
    movements = []
    for item in items:
        if not isinstance(item, dict):
            continue
        product_id = item.get("productId") or item.get("id")
        product = products.get(str(product_id)) if product_id is not None else None
        if not isinstance(product, dict):
            continue
        stock = product.get("stockGrams")
        if isinstance(stock, bool) or not isinstance(stock, (int, float)):
            continue
        if not math.isfinite(stock) or stock <= 0:
            continue

        weight = parse_weight_grams(item.get("weight") or item.get("selectedWeight") or "0")
        grams = weight * _quantity(item)
        # Stock only ever goes down
        if not math.isfinite(grams) or grams <= 0:
            continue
        product["stockGrams"] = _as_number(max(0.0, stock - grams))
        movements.append({
            "product_id": str(product_id), "grams": grams,
            "remaining": product["stockGrams"],
        })
    return movements


def resolve_customer(raw_order: dict, verified_user: dict | None) -> UserKey | None:
    """Decorate the order with its customer identity; return the key (or None)."""
    if verified_user:
        raw_order["telegramUserId"] = verified_user.get("id")
        raw_order["telegramUsername"] = verified_user.get("username")
        key = UserKey(str(verified_user.get("id")))
        raw_order["customerKey"] = key
        return key

    user_info = raw_order.get("userInfo")
    pseudo = user_info.get("pseudo") if isinstance(user_info, dict) else None
    key = derive_pseudonym_key(pseudo)
    if key:
        raw_order["telegramUsername"] = f"{pseudo.strip()} (Web)"
        raw_order["customerKey"] = key
    return key


def admit_order(
    snapshot: Snapshot,
    raw_order: dict,
    verified_user: dict | None,
    *,
    now_ms: int,
    rng: random.Random | None = None,
) -> AdmissionResult:
    """Admit one order into the snapshot working copy."""
    items = validate_order_items(raw_order)

    resolve_customer(raw_order, verified_user)

    draw = draw_order_id(snapshot.orders, rng)
    raw_order["id"] = InternalOrderId(now_ms)
    raw_order["orderId"] = draw.order_id
    raw_order["status"] = OrderStatus.PENDING.value

    movements = apply_stock_decrement(snapshot.products, items)

    points_after = None
    if verified_user:
        points_after = accrue_order(
            snapshot.users, UserKey(str(verified_user.get("id"))),
            raw_order.get("total"),
        )

    snapshot.orders.append(raw_order)
    while len(snapshot.orders) > MAX_RETAINED_ORDERS:
        snapshot.orders.pop(0)

    return AdmissionResult(
        public_id=draw.order_id,
        internal_id=InternalOrderId(now_ms),
        points_after=points_after,
        order_id_exhausted=draw.exhausted,
        stock_movements=movements,
    )
