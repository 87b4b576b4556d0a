"""Settings Routes — read the merged settings and submit partial edits.

Invariants:
    - PATCH applies the edit in memory immediately and returns status "saving";
      the backend write happens after the debounce window
"""

from fastapi import APIRouter, Depends

from origen.api.dependencies import get_store
from origen.schemas.app_settings import AppSettingsPatch
from origen.services.ledger_store import LedgerStore

router = APIRouter(prefix="/api/v1/settings", tags=["settings"])


def _settings_view(store: LedgerStore) -> dict:
    return {
        "settings": store.settings.model_dump(mode="json", by_alias=True),
        "saveStatus": store.settings_save_status.value,
    }


@router.get("")
async def get_app_settings(store: LedgerStore = Depends(get_store)):
    return _settings_view(store)


@router.get("/status")
async def get_save_status(store: LedgerStore = Depends(get_store)):
    return {"saveStatus": store.settings_save_status.value}


@router.patch("")
async def patch_app_settings(
    body: AppSettingsPatch, store: LedgerStore = Depends(get_store),
):
    store.update_settings(body.to_partial())
    return _settings_view(store)
