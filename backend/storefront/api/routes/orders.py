"""Order Routes — storefront checkout and admin order management.

Invariants:
    - POST /api/orders is public; identity token optional (header or initData)
    - Response carries the 4-digit public orderId and the internal timestamp id
    - DELETE /api/orders/{id} accepts either id form; unknown → 404
"""

import logging

from fastapi import APIRouter, Depends

from storefront.api.dependencies import get_identity_verifier, init_data_header, require_admin
from storefront.core.identity import IdentityVerifier
from storefront.schemas.orders import OrderCreate
from storefront.services.handle_orders import OrderHandlers
from storefront.services.store_access import SnapshotAccess, get_snapshot_access

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/orders", tags=["orders"])


def get_order_handlers(
    access: SnapshotAccess = Depends(get_snapshot_access),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> OrderHandlers:
    return OrderHandlers(access, verifier)


@router.post("")
async def submit_order(
    body: OrderCreate,
    header_init_data: str | None = Depends(init_data_header),
    orders: OrderHandlers = Depends(get_order_handlers),
):
    """Admit a new order from the storefront."""
    result = await orders.submit_order(
        body.to_record(), header_init_data or body.initData,
    )
    return {"success": True, **result}


@router.get("")
async def list_orders(
    _: str = Depends(require_admin),
    orders: OrderHandlers = Depends(get_order_handlers),
):
    """Retained orders, newest first."""
    return {"success": True, "data": await orders.list_orders()}


@router.delete("/{order_id}")
async def delete_order(
    order_id: str,
    _: str = Depends(require_admin),
    orders: OrderHandlers = Depends(get_order_handlers),
):
    await orders.delete_order(order_id)
    return {"success": True}


@router.delete("")
async def clear_orders(
    _: str = Depends(require_admin),
    orders: OrderHandlers = Depends(get_order_handlers),
):
    await orders.clear_orders()
    return {"success": True}
