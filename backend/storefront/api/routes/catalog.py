"""Catalog Routes — public settings/products reads, admin writes.

Invariants:
    - GET routes are public; every POST/DELETE depends on require_admin
    - Settings update is a shallow merge of the posted object
    - Deleting an unknown product still answers success
"""

import logging

from fastapi import APIRouter, Depends

from storefront.api.dependencies import require_admin
from storefront.schemas.catalog import ProductUpsert, ReorderRequest, SettingsUpdate
from storefront.services.handle_catalog import CatalogHandlers
from storefront.services.store_access import SnapshotAccess, get_snapshot_access

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["catalog"])


def get_catalog(
    access: SnapshotAccess = Depends(get_snapshot_access),
) -> CatalogHandlers:
    return CatalogHandlers(access)


@router.get("/settings")
async def get_settings(catalog: CatalogHandlers = Depends(get_catalog)):
    return {"success": True, "data": await catalog.get_settings()}


@router.post("/settings")
async def update_settings(
    body: SettingsUpdate,
    _: str = Depends(require_admin),
    catalog: CatalogHandlers = Depends(get_catalog),
):
    await catalog.set_settings(body.root)
    return {"success": True}


@router.get("/products")
async def list_products(catalog: CatalogHandlers = Depends(get_catalog)):
    """Products sorted by rank."""
    return {"success": True, "data": await catalog.list_products()}


@router.post("/products/reorder")
async def reorder_products(
    body: ReorderRequest,
    _: str = Depends(require_admin),
    catalog: CatalogHandlers = Depends(get_catalog),
):
    await catalog.reorder_products(body.product_ids)
    return {"success": True}


@router.post("/products")
async def upsert_product(
    body: ProductUpsert,
    _: str = Depends(require_admin),
    catalog: CatalogHandlers = Depends(get_catalog),
):
    record = await catalog.upsert_product(body.to_record())
    return {"success": True, "data": record}


@router.delete("/products/{product_id}")
async def delete_product(
    product_id: str,
    _: str = Depends(require_admin),
    catalog: CatalogHandlers = Depends(get_catalog),
):
    await catalog.delete_product(product_id)
    return {"success": True}
