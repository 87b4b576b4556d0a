"""Inventory Routes — catalog items, bulk price updates, derived stock, and the movement ledger.

Invariants:
    - Writes go through the ledger store (write-through + peer notification), never the gateway
    - Stock values are derived per request from the store's current movement snapshot
    - Movements are append-only: no update or delete endpoint exists
    - quantity > 0 is enforced here (NewMovement), not on the cached entity
"""

from fastapi import APIRouter, Depends, status

from origen.api.dependencies import get_store
from origen.core.domain_types import ItemType
from origen.schemas.entities import Item, Movement
from origen.schemas.requests import NewMovement, PriceUpdate
from origen.services.ledger_store import LedgerStore

router = APIRouter(prefix="/api/v1/inventory", tags=["inventory"])


@router.get("/items", response_model=list[Item])
async def list_items(store: LedgerStore = Depends(get_store)):
    return list(store.items)


@router.post("/items", response_model=Item, status_code=status.HTTP_201_CREATED)
async def create_item(body: Item, store: LedgerStore = Depends(get_store)):
    return await store.add_item(body)


@router.delete("/items/{code}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(code: str, store: LedgerStore = Depends(get_store)):
    await store.remove_item(code)


@router.put("/prices/{item_type}")
async def update_prices(
    item_type: ItemType, body: PriceUpdate, store: LedgerStore = Depends(get_store),
):
    """Set one price for every item of a type."""
    changed = await store.update_price_by_type(item_type, body.price)
    return {"type": item_type.value, "price": body.price, "updated": changed}


@router.get("/items/{code}/stock")
async def item_stock(code: str, store: LedgerStore = Depends(get_store)):
    return {"code": code, "stock": store.stock(code)}


@router.get("/stock")
async def stock_overview(store: LedgerStore = Depends(get_store)):
    """Dashboard view: per-item levels, low-stock list, per-type totals."""
    return {
        "levels": store.stock_levels(),
        "lowStock": store.low_stock(),
        "byType": store.stock_by_type(),
    }


@router.get("/movements", response_model=list[Movement])
async def list_movements(store: LedgerStore = Depends(get_store)):
    return list(store.movements)


@router.post("/movements", response_model=Movement, status_code=status.HTTP_201_CREATED)
async def create_movement(body: NewMovement, store: LedgerStore = Depends(get_store)):
    return await store.add_movement(body.to_entity())
