"""Origen API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map OrigenError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Startup order: logging → database → sync channel → fixed accounts → store load
    - Shutdown flushes a pending settings edit before the pool is disposed

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Per-instance objects (store, auth session, theme) live on app.state,
      routes reach them through api/dependencies.py
    - Account bootstrap runs before the first reload so a fresh deployment
      can log in as soon as the API answers
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from origen.api.error_handlers import register_error_handlers
from origen.api.routes import app_settings, auth, health, inventory, records
from origen.config import get_settings
from origen.infrastructure.database import init_db
from origen.infrastructure.gateway import SqlGateway
from origen.infrastructure.local_state import LocalStateStore
from origen.infrastructure.observability import setup_logging
from origen.infrastructure.sync_channel import SyncNotifier, open_sync_channel
from origen.services.account_bootstrap import ensure_fixed_accounts
from origen.services.auth_session import AuthSession, ThemePreference
from origen.services.ledger_store import LedgerStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    app.state.db_manager = manager
    gateway = SqlGateway(manager)

    channel = await open_sync_channel(settings)
    await ensure_fixed_accounts(
        gateway.accounts, settings.fixed_accounts(),
        rounds=settings.password_hash_rounds,
    )
    store = await LedgerStore.create(
        gateway,
        SyncNotifier(channel),
        debounce_delay=settings.settings_debounce_ms / 1000,
        saved_display=settings.settings_saved_display_ms / 1000,
    )
    local_state = LocalStateStore(settings.local_state_path)
    app.state.store = store
    app.state.auth = AuthSession(
        gateway.accounts, local_state, rounds=settings.password_hash_rounds,
    )
    app.state.theme = ThemePreference(local_state)
    logger.info("Origen API started", extra={"instance_id": store.instance_id})
    yield
    logger.info("Origen API shutting down", extra={"instance_id": store.instance_id})
    await store.dispose()
    channel.close()
    await manager.dispose()


app = FastAPI(title="Origen API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(inventory.router)
app.include_router(records.router)
app.include_router(app_settings.router)
app.include_router(auth.router)

register_error_handlers(app)

# Static files — serves the frontend build when present
# mounted AFTER API routes so /api/v1/* takes precedence
if os.path.isdir("static"):
    app.mount("/", StaticFiles(directory="static", html=True), name="static")
