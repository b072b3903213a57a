"""Loyalty Routes — customer balance/redemption, reward tiers, admin client list.

Invariants:
    - /api/loyalty and /api/loyalty/redeem require a verified identity token
    - Reward tiers are public to read, admin-only to write
    - /api/clients/* are admin-only
"""

import logging

from fastapi import APIRouter, Depends, Query

from storefront.api.dependencies import get_identity_verifier, init_data_header, require_admin
from storefront.core.identity import IdentityVerifier
from storefront.schemas.loyalty import LoyaltyConfigUpdate, PointsAdjustment, RedeemRequest
from storefront.services.handle_loyalty import LoyaltyHandlers
from storefront.services.store_access import SnapshotAccess, get_snapshot_access

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["loyalty"])


def get_loyalty_handlers(
    access: SnapshotAccess = Depends(get_snapshot_access),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> LoyaltyHandlers:
    return LoyaltyHandlers(access, verifier)


@router.get("/loyalty")
async def get_loyalty(
    init_data: str | None = Query(None, alias="initData"),
    header_init_data: str | None = Depends(init_data_header),
    loyalty: LoyaltyHandlers = Depends(get_loyalty_handlers),
):
    """Points and reward codes of the verified customer."""
    account = await loyalty.get_loyalty(header_init_data or init_data)
    return {"success": True, **account}


@router.post("/loyalty/redeem")
async def redeem(
    body: RedeemRequest | None = None,
    header_init_data: str | None = Depends(init_data_header),
    loyalty: LoyaltyHandlers = Depends(get_loyalty_handlers),
):
    result = await loyalty.redeem(
        header_init_data or (body.initData if body else None),
    )
    return {"success": True, **result}


@router.get("/loyalty/config")
async def get_loyalty_config(
    loyalty: LoyaltyHandlers = Depends(get_loyalty_handlers),
):
    return {"success": True, "data": await loyalty.get_config()}


@router.post("/loyalty/config")
async def set_loyalty_config(
    body: LoyaltyConfigUpdate,
    _: str = Depends(require_admin),
    loyalty: LoyaltyHandlers = Depends(get_loyalty_handlers),
):
    config = await loyalty.set_config(body.rewards)
    return {"success": True, "data": config}


@router.get("/clients")
async def list_clients(
    _: str = Depends(require_admin),
    loyalty: LoyaltyHandlers = Depends(get_loyalty_handlers),
):
    return {"success": True, "data": await loyalty.list_clients()}


@router.post("/clients/{user_id}/points")
async def adjust_client_points(
    user_id: str,
    body: PointsAdjustment,
    _: str = Depends(require_admin),
    loyalty: LoyaltyHandlers = Depends(get_loyalty_handlers),
):
    balance = await loyalty.adjust_points(user_id, body.action, body.value)
    return {"success": True, "points": balance}
