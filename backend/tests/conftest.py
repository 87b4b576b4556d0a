"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach a real database or a shared state file
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("SYNC_TRANSPORT", "memory")
os.environ.setdefault("LOCAL_STATE_PATH", ".origen_test_state.json")
