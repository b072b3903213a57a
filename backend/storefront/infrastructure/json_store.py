"""JSON Snapshot Store — three flat JSON files with independent failure domains.

Invariants:
    - data.json (core), orders.json, users.json are read and written independently
    - A missing file loads as its empty default (info log); an unreadable or
      wrong-typed file loads as its empty default (error log); load never raises
    - Every write is atomic: serialize to a sibling temp file, then os.replace
    - Documents are strict JSON (no NaN/Infinity); a document that cannot be
      serialized counts as a failed write
    - save() attempts all three writes (orders → users → core) and returns the
      resources that failed; it never raises

Design Decisions:
    - File IO runs in a worker thread (asyncio.to_thread) so a slow disk does not
      stall the event loop
    - Temp file + replace keeps readers from ever seeing a half-written document
"""

import asyncio
import json
import logging
import os
from pathlib import Path

from storefront.core.domain_types import Resource
from storefront.core.snapshot import (
    Snapshot, document_is_well_typed, empty_document,
    snapshot_from_documents, snapshot_to_documents,
)

logger = logging.getLogger(__name__)

DEFAULT_FILENAMES: dict[Resource, str] = {
    Resource.CORE: "data.json",
    Resource.ORDERS: "orders.json",
    Resource.USERS: "users.json",
}


class JsonSnapshotStore:
    """SnapshotStore backed by three JSON documents in one directory."""

    def __init__(self, data_dir: str | Path, filenames: dict[Resource, str] | None = None):
        self.data_dir = Path(data_dir)
        names = {**DEFAULT_FILENAMES, **(filenames or {})}
        self.paths: dict[Resource, Path] = {
            resource: self.data_dir / name for resource, name in names.items()
        }

    async def load(self) -> Snapshot:
        return await asyncio.to_thread(self._load_sync)

    async def save(self, snapshot: Snapshot) -> list[Resource]:
        return await asyncio.to_thread(self._save_sync, snapshot)

    async def health_check(self) -> bool:
        return self.data_dir.is_dir() and os.access(self.data_dir, os.W_OK)

    def _load_sync(self) -> Snapshot:
        docs = {resource: self._read_document(resource) for resource in Resource}
        return snapshot_from_documents(
            docs[Resource.CORE], docs[Resource.ORDERS], docs[Resource.USERS],
        )

    def _read_document(self, resource: Resource) -> dict | list:
        path = self.paths[resource]
        if not path.exists():
            logger.info(
                f"No {path.name} found, starting empty",
                extra={"resource": resource.value},
            )
            return empty_document(resource)
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(
                f"Failed to read {path.name}: {e}",
                extra={"resource": resource.value, "error_code": "LOAD_FAILED"},
            )
            return empty_document(resource)
        if not document_is_well_typed(resource, document):
            logger.error(
                f"Unexpected top-level type in {path.name}: {type(document).__name__}",
                extra={"resource": resource.value, "error_code": "LOAD_FAILED"},
            )
            return empty_document(resource)
        return document

    def _save_sync(self, snapshot: Snapshot) -> list[Resource]:
        failed = []
        for resource, document in snapshot_to_documents(snapshot).items():
            try:
                self._write_document(resource, document)
            except (OSError, TypeError, ValueError) as e:
                logger.error(
                    f"Failed to write {self.paths[resource].name}: {e}",
                    extra={"resource": resource.value, "error_code": "SAVE_FAILED"},
                )
                failed.append(resource)
        return failed

    def _write_document(self, resource: Resource, document: dict | list) -> None:
        path = self.paths[resource]
        # Strict JSON: a NaN/Infinity fails this resource instead of poisoning reads
        body = json.dumps(document, indent=2, ensure_ascii=False, allow_nan=False)
        tmp = path.with_name(f".{path.name}.tmp")
        tmp.write_text(body, encoding="utf-8")
        os.replace(tmp, path)
