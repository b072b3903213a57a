"""Order Handlers — storefront checkout and admin order management.

Invariants:
    - Item validation happens BEFORE the writer lock is taken: a rejected order
      never loads or saves anything
    - The identity token is verified once, before admission; a bad token downgrades
      the order to pseudonym/anonymous rather than rejecting it
    - Stock decrement, loyalty accrual and the append are persisted together in one
      save; a partial save surfaces as PersistenceError, not as success

Design Decisions:
    - rng/clock injectable for deterministic tests; production uses module random
      and wall-clock milliseconds
    - No cancellation: once admission starts it runs to completion
"""

import logging
import random
import time
from typing import Callable

from storefront.core.catalog import delete_order, newest_first
from storefront.core.identity import IdentityVerifier
from storefront.core.order_ids import MAX_ATTEMPTS
from storefront.core.orders import admit_order, validate_order_items
from storefront.services.store_access import SnapshotAccess

logger = logging.getLogger(__name__)


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


class OrderHandlers:
    """Order admission and the admin order list."""

    def __init__(
        self,
        access: SnapshotAccess,
        verifier: IdentityVerifier,
        rng: random.Random | None = None,
        clock_ms: Callable[[], int] = _wall_clock_ms,
    ):
        self.access = access
        self.verifier = verifier
        self.rng = rng
        self.clock_ms = clock_ms

    async def submit_order(self, raw_order: dict, init_data: str | None = None) -> dict:
        """Admit a storefront order. Returns public id, internal id and points."""
        validate_order_items(raw_order)
        verified_user = self.verifier.verify(init_data) if init_data else None
        if init_data and not verified_user:
            logger.warning(
                "Order carried an identity token that failed verification",
                extra={"error_code": "IDENTITY_REJECTED"},
            )

        async with self.access.mutate() as snapshot:
            result = admit_order(
                snapshot, raw_order, verified_user,
                now_ms=self.clock_ms(), rng=self.rng,
            )

        if result.order_id_exhausted:
            logger.warning(
                f"Order id allocation exhausted {MAX_ATTEMPTS} attempts, "
                f"{result.public_id} may collide",
                extra={"error_code": "ORDER_ID_EXHAUSTED", "attempts": MAX_ATTEMPTS},
            )
        for move in result.stock_movements:
            logger.info(
                f"Stock {move['product_id']}: -{move['grams']}g "
                f"(remaining {move['remaining']}g)",
            )
        logger.info(
            f"Order {result.public_id} admitted",
            extra={
                "order_id": result.public_id,
                "user_key": raw_order.get("customerKey"),
            },
        )

        response = {"orderId": result.public_id, "internalId": result.internal_id}
        if result.points_after is not None:
            response["points"] = result.points_after
        return response

    async def list_orders(self) -> list[dict]:
        snapshot = await self.access.read()
        return newest_first(snapshot.orders)

    async def delete_order(self, id_or_public_id: str) -> None:
        async with self.access.mutate() as snapshot:
            snapshot.orders = delete_order(snapshot.orders, id_or_public_id)
        logger.info(f"Order {id_or_public_id} deleted")

    async def clear_orders(self) -> None:
        async with self.access.mutate() as snapshot:
            cleared = len(snapshot.orders)
            snapshot.orders = []
        logger.info(f"Cleared {cleared} orders")
