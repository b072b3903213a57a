"""Storefront API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map StorefrontError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Snapshot store and identity verifier built on startup; a missing bot secret
      aborts startup instead of disabling verification

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Storage backend chosen by STORAGE_BACKEND (json files | sql documents)
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from storefront.api.dependencies import get_identity_verifier
from storefront.api.error_handlers import register_error_handlers
from storefront.api.routes import admin, catalog, health, loyalty, orders
from storefront.config import Settings, get_settings
from storefront.core.admin_gate import bootstrap_hash_factory
from storefront.core.domain_types import StorageBackend
from storefront.core.repository_protocols import SnapshotStore
from storefront.infrastructure.database import DatabaseSessionManager
from storefront.infrastructure.json_store import JsonSnapshotStore
from storefront.infrastructure.observability import setup_logging
from storefront.infrastructure.sql_store import SqlSnapshotStore
from storefront.services.store_access import init_snapshot_access

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> tuple[SnapshotStore, DatabaseSessionManager | None]:
    """Instantiate the configured SnapshotStore (and its DB manager, if any)."""
    if settings.storage_backend is StorageBackend.SQL:
        db_manager = DatabaseSessionManager(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        return SqlSnapshotStore(db_manager), db_manager
    os.makedirs(settings.data_dir, exist_ok=True)
    return JsonSnapshotStore(settings.data_dir), None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format, settings.shop_name)
    get_identity_verifier()
    store, db_manager = build_store(settings)
    if db_manager:
        await db_manager.create_schema()
    init_snapshot_access(
        store,
        default_password_hash=bootstrap_hash_factory(
            settings.bootstrap_admin_password.get_secret_value(),
            settings.bcrypt_rounds,
        ),
        default_categories=settings.default_categories,
        default_banner_text=settings.default_banner_text,
    )
    logger.info(
        f"{settings.shop_name} API started ({settings.storage_backend.value} store)",
    )
    yield
    if db_manager:
        await db_manager.dispose()
    logger.info(f"{settings.shop_name} API shutting down")


settings = get_settings()
app = FastAPI(
    title=f"{settings.shop_name} API", version=health.API_VERSION, lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(admin.router)
app.include_router(catalog.router)
app.include_router(orders.router)
app.include_router(loyalty.router)

register_error_handlers(app)

# Static storefront and admin pages, mounted AFTER API routes
if os.path.isdir("static"):
    app.mount("/", StaticFiles(directory="static", html=True), name="static")
