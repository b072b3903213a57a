"""SQL snapshot store tests — one JSON row per resource on a file-backed SQLite DB."""

import pytest
from sqlalchemy import select

from storefront.core.domain_types import Resource
from storefront.infrastructure.database import DatabaseSessionManager
from storefront.infrastructure.sql_store import SqlSnapshotStore
from storefront.models.snapshot_document import SnapshotDocument


@pytest.fixture
async def db_manager(tmp_path):
    manager = DatabaseSessionManager(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    await manager.create_schema()
    yield manager
    await manager.dispose()


async def test_empty_database_loads_defaults(db_manager):
    snapshot = await SqlSnapshotStore(db_manager).load()
    assert snapshot.orders == []
    assert snapshot.users == {}


async def test_save_then_load(db_manager):
    store = SqlSnapshotStore(db_manager)
    snapshot = await store.load()
    snapshot.admin = {"passwordHash": "h"}
    snapshot.settings = {"bannerText": "Hi"}
    snapshot.products = {"p1": {"id": "p1", "order": 0}}
    snapshot.orders.append({"id": 1, "orderId": 1001})
    snapshot.users["42"] = {"points": 3, "rewards": [], "totalSpent": 0}

    assert await store.save(snapshot) == []
    loaded = await store.load()
    assert loaded.orders == [{"id": 1, "orderId": 1001}]
    assert loaded.users["42"]["points"] == 3
    assert loaded.settings == {"bannerText": "Hi"}


async def test_each_save_bumps_revision(db_manager):
    store = SqlSnapshotStore(db_manager)
    snapshot = await store.load()
    await store.save(snapshot)
    snapshot.orders.append({"id": 2})
    await store.save(snapshot)

    async with db_manager.session() as db:
        rows = (await db.execute(select(SnapshotDocument))).scalars().all()
    assert {row.name: row.revision for row in rows} == {
        Resource.ORDERS.value: 2, Resource.USERS.value: 2, Resource.CORE.value: 2,
    }


async def test_wrong_typed_row_degrades_to_default(db_manager):
    async with db_manager.session() as db:
        db.add(SnapshotDocument(name="orders", body={"oops": True}, revision=1))
        await db.commit()
    snapshot = await SqlSnapshotStore(db_manager).load()
    assert snapshot.orders == []


async def test_missing_table_degrades_and_reports_failures(tmp_path):
    manager = DatabaseSessionManager(f"sqlite+aiosqlite:///{tmp_path / 'bare.db'}")
    store = SqlSnapshotStore(manager)
    snapshot = await store.load()
    assert snapshot.orders == []
    assert await store.save(snapshot) == [Resource.ORDERS, Resource.USERS, Resource.CORE]
    await manager.dispose()


async def test_health_check(db_manager):
    assert await SqlSnapshotStore(db_manager).health_check()
