"""Catalog Handlers — shop settings and product administration.

Invariants:
    - Reads never take the writer lock
    - Every write is one SnapshotAccess.mutate() cycle
"""

import logging

from storefront.core.catalog import (
    delete_product, merge_settings, reorder_products, sorted_products, upsert_product,
)
from storefront.services.store_access import SnapshotAccess

logger = logging.getLogger(__name__)


class CatalogHandlers:
    """Settings and product CRUD."""

    def __init__(self, access: SnapshotAccess):
        self.access = access

    async def get_settings(self) -> dict:
        snapshot = await self.access.read()
        return snapshot.settings

    async def set_settings(self, partial: dict) -> dict:
        async with self.access.mutate() as snapshot:
            merged = merge_settings(snapshot.settings, partial)
        logger.info(f"Settings updated: {sorted(partial)}")
        return merged

    async def list_products(self) -> list[dict]:
        snapshot = await self.access.read()
        return sorted_products(snapshot.products)

    async def upsert_product(self, product: dict) -> dict:
        async with self.access.mutate() as snapshot:
            record = upsert_product(snapshot.products, product)
        logger.info(f"Product {record['id']} saved (rank {record['order']})")
        return record

    async def delete_product(self, product_id: str) -> bool:
        async with self.access.mutate() as snapshot:
            removed = delete_product(snapshot.products, product_id)
        if removed:
            logger.info(f"Product {product_id} deleted")
        return removed

    async def reorder_products(self, product_ids: list) -> int:
        async with self.access.mutate() as snapshot:
            moved = reorder_products(snapshot.products, product_ids)
        return moved
