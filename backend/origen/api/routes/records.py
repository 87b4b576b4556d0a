"""Record Routes — baptisms, child presentations, loans and events.

Invariants:
    - Status changes go through the store so completion/return stamps are applied uniformly
    - Unknown ids on status changes → 404 (the store itself treats them as a no-op)
    - PUT replaces the whole record; the path id wins over any id in the body
"""

from fastapi import APIRouter, Depends, status

from origen.api.dependencies import get_store
from origen.core.errors import ResourceNotFoundError
from origen.schemas.entities import AppEvent, Baptism, ChildPresentation, Loan
from origen.schemas.requests import StatusUpdate
from origen.services.ledger_store import LedgerStore

router = APIRouter(prefix="/api/v1", tags=["records"])


def _found(record, kind: str, record_id: str):
    if record is None:
        raise ResourceNotFoundError(kind, record_id)
    return record


# ─── Baptisms ────────────────────────────────────────────────────

@router.get("/baptisms", response_model=list[Baptism])
async def list_baptisms(store: LedgerStore = Depends(get_store)):
    return list(store.baptisms)


@router.post("/baptisms", response_model=Baptism, status_code=status.HTTP_201_CREATED)
async def create_baptism(body: Baptism, store: LedgerStore = Depends(get_store)):
    return await store.add_baptism(body)


@router.put("/baptisms/{record_id}", response_model=Baptism)
async def replace_baptism(
    record_id: str, body: Baptism, store: LedgerStore = Depends(get_store),
):
    return await store.edit_baptism(body.model_copy(update={"id": record_id}))


@router.patch("/baptisms/{record_id}/status", response_model=Baptism)
async def set_baptism_status(
    record_id: str, body: StatusUpdate, store: LedgerStore = Depends(get_store),
):
    updated = await store.update_baptism_status(record_id, body.status)
    return _found(updated, "Baptism", record_id)


@router.delete("/baptisms/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_baptism(record_id: str, store: LedgerStore = Depends(get_store)):
    await store.remove_baptism(record_id)


# ─── Child presentations ─────────────────────────────────────────

@router.get("/presentations", response_model=list[ChildPresentation])
async def list_presentations(store: LedgerStore = Depends(get_store)):
    return list(store.presentations)


@router.post(
    "/presentations", response_model=ChildPresentation,
    status_code=status.HTTP_201_CREATED,
)
async def create_presentation(
    body: ChildPresentation, store: LedgerStore = Depends(get_store),
):
    return await store.add_presentation(body)


@router.put("/presentations/{record_id}", response_model=ChildPresentation)
async def replace_presentation(
    record_id: str, body: ChildPresentation, store: LedgerStore = Depends(get_store),
):
    return await store.edit_presentation(body.model_copy(update={"id": record_id}))


@router.patch("/presentations/{record_id}/status", response_model=ChildPresentation)
async def set_presentation_status(
    record_id: str, body: StatusUpdate, store: LedgerStore = Depends(get_store),
):
    updated = await store.update_presentation_status(record_id, body.status)
    return _found(updated, "Presentation", record_id)


@router.delete("/presentations/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_presentation(record_id: str, store: LedgerStore = Depends(get_store)):
    await store.remove_presentation(record_id)


# ─── Loans ───────────────────────────────────────────────────────

@router.get("/loans", response_model=list[Loan])
async def list_loans(store: LedgerStore = Depends(get_store)):
    return list(store.loans)


@router.post("/loans", response_model=Loan, status_code=status.HTTP_201_CREATED)
async def create_loan(body: Loan, store: LedgerStore = Depends(get_store)):
    return await store.add_loan(body)


@router.patch("/loans/{record_id}/status", response_model=Loan)
async def set_loan_status(
    record_id: str, body: StatusUpdate, store: LedgerStore = Depends(get_store),
):
    updated = await store.update_loan_status(record_id, body.status)
    return _found(updated, "Loan", record_id)


@router.delete("/loans/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_loan(record_id: str, store: LedgerStore = Depends(get_store)):
    await store.remove_loan(record_id)


# ─── Events ──────────────────────────────────────────────────────

@router.get("/events", response_model=list[AppEvent])
async def list_events(store: LedgerStore = Depends(get_store)):
    return list(store.events)


@router.post("/events", response_model=AppEvent, status_code=status.HTTP_201_CREATED)
async def create_event(body: AppEvent, store: LedgerStore = Depends(get_store)):
    return await store.add_event(body)


@router.delete("/events/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(record_id: str, store: LedgerStore = Depends(get_store)):
    await store.remove_event(record_id)
