"""Route Dependencies — per-instance objects the lifespan placed on app.state."""

from fastapi import Request

from origen.services.auth_session import AuthSession, ThemePreference
from origen.services.ledger_store import LedgerStore


def get_store(request: Request) -> LedgerStore:
    return request.app.state.store


def get_auth(request: Request) -> AuthSession:
    return request.app.state.auth


def get_theme(request: Request) -> ThemePreference:
    return request.app.state.theme
