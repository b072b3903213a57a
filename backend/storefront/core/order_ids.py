"""Order Id Allocation — 4-digit public order codes.

Invariants:
    - Candidates are uniform over [PUBLIC_ID_MIN, PUBLIC_ID_MAX]
    - At most MAX_ATTEMPTS draws; the last candidate is returned even if it collides
    - Never raises: exhaustion degrades to a possibly-duplicate id and is reported
      through the `exhausted` flag for the shell to log

Design Decisions:
    - Bounded best-effort uniqueness kept for compatibility: with <= 200 retained
      orders out of 9000 codes, 100 consecutive collisions are practically impossible
    - rng injectable (random.Random) so tests can seed draws
"""

import random
from typing import NamedTuple, Sequence

from storefront.core.domain_types import PUBLIC_ID_MAX, PUBLIC_ID_MIN, PublicOrderId

MAX_ATTEMPTS: int = 100


class OrderIdDraw(NamedTuple):
    order_id: PublicOrderId
    attempts: int
    exhausted: bool


def draw_order_id(
    existing_orders: Sequence[dict], rng: random.Random | None = None,
) -> OrderIdDraw:
    """Draw a public id not used by any retained order (best effort)."""
    rng = rng or random
    taken = {o.get("orderId") for o in existing_orders if isinstance(o, dict)}
    candidate = rng.randint(PUBLIC_ID_MIN, PUBLIC_ID_MAX)
    attempts = 1
    while candidate in taken:
        if attempts >= MAX_ATTEMPTS:
            return OrderIdDraw(PublicOrderId(candidate), attempts, True)
        candidate = rng.randint(PUBLIC_ID_MIN, PUBLIC_ID_MAX)
        attempts += 1
    return OrderIdDraw(PublicOrderId(candidate), attempts, False)


def next_order_id(
    existing_orders: Sequence[dict], rng: random.Random | None = None,
) -> PublicOrderId:
    return draw_order_id(existing_orders, rng).order_id
