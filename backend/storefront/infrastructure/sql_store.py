"""SQL Snapshot Store — the three resources as rows of `snapshot_documents`.

Invariants:
    - Same contract as JsonSnapshotStore: load never raises, save attempts every
      resource and returns the ones that failed
    - Each resource is written in its OWN transaction; a failed users write does
      not roll back an orders write (per-resource partial durability)
    - A missing row loads as the empty default; a wrong-typed body is logged and
      degraded to the empty default

Design Decisions:
    - Drop-in transactional backend for the load-mutate-save contract, selected
      with STORAGE_BACKEND=sql; schema managed by alembic
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select

from storefront.core.domain_types import Resource
from storefront.core.errors import PersistenceError
from storefront.core.snapshot import (
    Snapshot, document_is_well_typed, empty_document,
    snapshot_from_documents, snapshot_to_documents,
)
from storefront.infrastructure.database import DatabaseSessionManager
from storefront.models.snapshot_document import SnapshotDocument

logger = logging.getLogger(__name__)


class SqlSnapshotStore:
    """SnapshotStore backed by one JSON row per resource."""

    def __init__(self, db_manager: DatabaseSessionManager):
        self.db_manager = db_manager

    async def load(self) -> Snapshot:
        rows: dict[str, object] = {}
        try:
            async with self.db_manager.session() as db:
                result = await db.execute(select(SnapshotDocument))
                rows = {row.name: row.body for row in result.scalars().all()}
        except PersistenceError as e:
            logger.error(
                f"Snapshot load failed, every resource degrades to defaults: {e.message}",
                extra={"error_code": "LOAD_FAILED"},
            )
        docs = {resource: self._document(resource, rows) for resource in Resource}
        return snapshot_from_documents(
            docs[Resource.CORE], docs[Resource.ORDERS], docs[Resource.USERS],
        )

    def _document(self, resource: Resource, rows: dict) -> dict | list:
        if resource.value not in rows:
            logger.info(
                f"No {resource.value} document found, starting empty",
                extra={"resource": resource.value},
            )
            return empty_document(resource)
        body = rows[resource.value]
        if not document_is_well_typed(resource, body):
            logger.error(
                f"Unexpected body type for {resource.value}: {type(body).__name__}",
                extra={"resource": resource.value, "error_code": "LOAD_FAILED"},
            )
            return empty_document(resource)
        return body

    async def save(self, snapshot: Snapshot) -> list[Resource]:
        failed = []
        for resource, document in snapshot_to_documents(snapshot).items():
            try:
                await self._write(resource, document)
            except (PersistenceError, ValueError) as e:
                logger.error(
                    f"Failed to write {resource.value}: {e}",
                    extra={"resource": resource.value, "error_code": "SAVE_FAILED"},
                )
                failed.append(resource)
        return failed

    async def _write(self, resource: Resource, document: dict | list) -> None:
        async with self.db_manager.session(resource.value) as db:
            row = await db.get(SnapshotDocument, resource.value)
            if row is None:
                row = SnapshotDocument(name=resource.value, body=document, revision=1)
                db.add(row)
            else:
                row.body = document
                row.revision += 1
                row.updated_at = datetime.now(timezone.utc)
            await db.commit()

    async def health_check(self) -> bool:
        return await self.db_manager.health_check()
