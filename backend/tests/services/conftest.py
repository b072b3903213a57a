"""Service test fixtures — temp-dir snapshot store + FastAPI test client.

Invariants:
    - Every test gets a fresh JSON store in its own tmp_path
    - get_snapshot_access dependency overridden to use the test store
    - admin_headers carries the bootstrap password as the credential

Design Decisions:
    - JSON backend for route tests: exercises the real files and atomic writes
    - ASGITransport does not run the lifespan, so the override is the only wiring
"""

import os

import pytest
from httpx import ASGITransport, AsyncClient

from storefront.core.admin_gate import bootstrap_hash_factory
from storefront.infrastructure.json_store import JsonSnapshotStore
from storefront.main import app
from storefront.services.store_access import SnapshotAccess, get_snapshot_access

ADMIN_PASSWORD = os.environ["BOOTSTRAP_ADMIN_PASSWORD"]

# Hash once per test run; bcrypt is the slowest part of the suite
_bootstrap_hash = bootstrap_hash_factory(ADMIN_PASSWORD, rounds=4)


@pytest.fixture
def store(tmp_path):
    return JsonSnapshotStore(tmp_path)


@pytest.fixture
def access(store):
    return SnapshotAccess(
        store,
        default_password_hash=_bootstrap_hash,
        default_categories=["WEED", "HASH", "VAPE", "AUTRE"],
        default_banner_text="Welcome",
    )


@pytest.fixture
async def client(access):
    """FastAPI test client with the snapshot store overridden."""
    app.dependency_overrides[get_snapshot_access] = lambda: access

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"Authorization": ADMIN_PASSWORD}


@pytest.fixture
async def seed_user(access):
    """Create a loyalty account for user 42 with the given balance."""
    async def _seed(points: int, user_key: str = "42"):
        async with access.mutate() as snapshot:
            snapshot.users[user_key] = {"points": points, "rewards": [], "totalSpent": 0}
    return _seed
