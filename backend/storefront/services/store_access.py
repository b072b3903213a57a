"""Snapshot Access — single-writer load/mutate/save discipline over a SnapshotStore.

Invariants:
    - read() returns a freshly loaded AND repaired snapshot; it takes no lock
    - mutate() holds the writer lock for the whole load → transform → save cycle,
      so two in-process mutations can never interleave (no lost updates)
    - If the transform raises, nothing is saved (denials and validation errors
      leave the store untouched)
    - A partial save raises PersistenceError naming the failed resources AFTER
      every resource was attempted

Design Decisions:
    - One asyncio.Lock per process over per-resource optimistic versioning:
      the storefront runs as a single uvicorn worker, and a single writer queue is
      the simplest policy that is observable and testable
    - Multi-worker deployments are out of scope; they would reintroduce
      last-writer-wins at resource granularity
    - Module-level singleton initialized by the lifespan, same pattern as db_manager
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Callable

from storefront.core.errors import PersistenceError
from storefront.core.repository_protocols import SnapshotStore
from storefront.core.snapshot import Snapshot, repair_snapshot

logger = logging.getLogger(__name__)


class SnapshotAccess:
    """Per-request snapshot working copies with serialized writers."""

    def __init__(
        self,
        store: SnapshotStore,
        *,
        default_password_hash: Callable[[], str],
        default_categories: list[str],
        default_banner_text: str,
    ):
        self.store = store
        self._default_password_hash = default_password_hash
        self._default_categories = default_categories
        self._default_banner_text = default_banner_text
        self._write_lock = asyncio.Lock()

    async def read(self) -> Snapshot:
        """Load and repair a snapshot for read-only use."""
        snapshot = await self.store.load()
        return repair_snapshot(
            snapshot,
            default_password_hash=self._default_password_hash,
            default_categories=self._default_categories,
            default_banner_text=self._default_banner_text,
        )

    @asynccontextmanager
    async def mutate(self) -> AsyncGenerator[Snapshot, None]:
        """Yield a working copy under the writer lock; persist it on clean exit."""
        async with self._write_lock:
            snapshot = await self.read()
            yield snapshot
            failed = await self.store.save(snapshot)
            if failed:
                names = [r.value for r in failed]
                logger.error(
                    f"Snapshot partially persisted, failed: {', '.join(names)}",
                    extra={"error_code": "PARTIAL_SAVE"},
                )
                raise PersistenceError("snapshot only partially saved", names)

    async def health_check(self) -> bool:
        return await self.store.health_check()


# Singleton (initialized on startup)
snapshot_access: SnapshotAccess | None = None


def init_snapshot_access(store: SnapshotStore, **kwargs) -> SnapshotAccess:
    global snapshot_access
    snapshot_access = SnapshotAccess(store, **kwargs)
    return snapshot_access


def get_snapshot_access() -> SnapshotAccess:
    """FastAPI dependency for the snapshot access layer."""
    if not snapshot_access:
        raise RuntimeError("Snapshot store not initialized")
    return snapshot_access
