"""Ledger Store — per-instance write-through cache of every backend collection.

Invariants:
    - Every mutation: gateway write awaited → in-memory snapshot replaced → peers notified
    - Gateway failure propagates unchanged; no snapshot changes and nothing is published
    - Snapshots are tuples of frozen entities: readers can never observe a half-applied change
    - reload() swaps all collections at once, and only if every fetch succeeded
    - schema_missing is cleared at the start of each reload and set only by SchemaMissingError;
      every other reload failure is logged and swallowed
    - A reload never overwrites a settings edit that has not been persisted yet
    - Signals arriving while a reload runs collapse into exactly one follow-up reload

Design Decisions:
    - Explicit object with create()/dispose() instead of a module-level singleton
      (ADR: one store per running instance, passed by reference to routes and services)
    - Adds are upserts by key in memory: a reload that already fetched the new row
      must not produce a duplicate when the add completes
    - Local writes bump a version counter; a reload that raced a local write fetches again
      instead of installing a snapshot older than the write
    - Unknown ids on status updates are a no-op (None), matching "not found is not an error"
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from uuid import uuid4

from pydantic import ValidationError

from origen.core.domain_types import ItemType, PendingStatus, SaveStatus
from origen.core.errors import SchemaMissingError
from origen.core.repository_protocols import Gateway
from origen.core.stock import (
    compute_stock, low_stock_items, stock_by_type, stock_levels,
)
from origen.core.workflow import loan_transition, pending_transition, utc_now_iso
from origen.infrastructure.sync_channel import SyncNotifier
from origen.schemas.app_settings import AppSettings
from origen.schemas.entities import (
    AppEvent, Baptism, ChildPresentation, Item, Loan, Movement,
)
from origen.services.settings_debouncer import SettingsDebouncer

logger = logging.getLogger(__name__)


def _upsert(records: tuple, entity, key: str = "id") -> tuple:
    """Replace the record with the same key, or append."""
    key_value = getattr(entity, key)
    if any(getattr(r, key) == key_value for r in records):
        return tuple(entity if getattr(r, key) == key_value else r for r in records)
    return (*records, entity)


def _without(records: tuple, key_value: str, key: str = "id") -> tuple:
    return tuple(r for r in records if getattr(r, key) != key_value)


def _find(records: Iterable, key_value: str, key: str = "id"):
    return next((r for r in records if getattr(r, key) == key_value), None)


class LedgerStore:
    """In-memory mirror of the backend for one running instance."""

    def __init__(
        self,
        gateway: Gateway,
        notifier: SyncNotifier | None = None,
        *,
        debounce_delay: float = 0.8,
        saved_display: float = 3.0,
        instance_id: str | None = None,
    ):
        self._gateway = gateway
        self._notifier = notifier or SyncNotifier()
        self.instance_id = instance_id or uuid4().hex[:8]

        self._items: tuple[Item, ...] = ()
        self._movements: tuple[Movement, ...] = ()
        self._baptisms: tuple[Baptism, ...] = ()
        self._presentations: tuple[ChildPresentation, ...] = ()
        self._loans: tuple[Loan, ...] = ()
        self._events: tuple[AppEvent, ...] = ()
        self._settings = AppSettings.from_stored(None)

        self.is_loading = True
        self.schema_missing = False

        self._debouncer = SettingsDebouncer(
            self._persist_settings, delay=debounce_delay, saved_display=saved_display,
        )
        self._version = 0
        self._unsubscribe: Callable[[], None] | None = None
        self._reload_task: asyncio.Task | None = None
        self._reload_again = False
        self._disposed = False

    # ─── Lifecycle ───────────────────────────────────────────────

    @classmethod
    async def create(
        cls, gateway: Gateway, notifier: SyncNotifier | None = None, **kwargs,
    ) -> "LedgerStore":
        """Subscribe to peer signals and load the initial state."""
        store = cls(gateway, notifier, **kwargs)
        store._unsubscribe = store._notifier.subscribe(store.request_reload)
        await store.reload()
        logger.info("Ledger store ready", extra={"instance_id": store.instance_id})
        return store

    async def dispose(self) -> None:
        """Unsubscribe, stop reloading, and flush any pending settings edit."""
        if self._disposed:
            return
        self._disposed = True
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._reload_task is not None:
            self._reload_task.cancel()
            try:
                await self._reload_task
            except asyncio.CancelledError:
                pass
            self._reload_task = None
        await self._debouncer.close(flush=True)
        logger.info("Ledger store disposed", extra={"instance_id": self.instance_id})

    # ─── Read accessors ──────────────────────────────────────────

    @property
    def items(self) -> tuple[Item, ...]:
        return self._items

    @property
    def movements(self) -> tuple[Movement, ...]:
        return self._movements

    @property
    def baptisms(self) -> tuple[Baptism, ...]:
        return self._baptisms

    @property
    def presentations(self) -> tuple[ChildPresentation, ...]:
        return self._presentations

    @property
    def loans(self) -> tuple[Loan, ...]:
        return self._loans

    @property
    def events(self) -> tuple[AppEvent, ...]:
        return self._events

    @property
    def settings(self) -> AppSettings:
        return self._settings

    @property
    def settings_save_status(self) -> SaveStatus:
        return self._debouncer.status

    @property
    def settings_debouncer(self) -> SettingsDebouncer:
        return self._debouncer

    def stock(self, code: str) -> int:
        return compute_stock(self._movements, code)

    def stock_levels(self) -> dict[str, int]:
        return stock_levels(self._items, self._movements)

    def low_stock(self) -> list[dict]:
        return low_stock_items(self._items, self._movements)

    def stock_by_type(self) -> dict[str, int]:
        return stock_by_type(self._items, self._movements)

    # ─── Reload ──────────────────────────────────────────────────

    async def reload(self) -> bool:
        """Fetch everything in parallel and install it as one snapshot."""
        while True:
            self.schema_missing = False
            started_at = self._version
            results = await asyncio.gather(
                self._gateway.items.get_all(),
                self._gateway.movements.get_all(),
                self._gateway.baptisms.get_all(),
                self._gateway.presentations.get_all(),
                self._gateway.loans.get_all(),
                self._gateway.events.get_all(),
                self._gateway.settings.get(),
                return_exceptions=True,
            )
            failures = [r for r in results if isinstance(r, BaseException)]
            if failures:
                self._record_reload_failure(failures)
                self.is_loading = False
                return False
            if started_at != self._version:
                logger.debug(
                    "Local write during reload, fetching again",
                    extra={"instance_id": self.instance_id},
                )
                continue
            self._install(results)
            self.is_loading = False
            return True

    def _install(self, results: list) -> None:
        items, movements, baptisms, presentations, loans, events, stored = results
        self._items = tuple(items)
        self._movements = tuple(movements)
        self._baptisms = tuple(baptisms)
        self._presentations = tuple(presentations)
        self._loans = tuple(loans)
        self._events = tuple(events)
        if stored is not None and self._debouncer.status != SaveStatus.SAVING:
            try:
                self._settings = AppSettings.from_stored(stored)
            except ValidationError as e:
                logger.error(
                    f"Stored settings unreadable, keeping current: {e}",
                    extra={"collection": "settings", "instance_id": self.instance_id},
                )

    def _record_reload_failure(self, failures: list[BaseException]) -> None:
        missing = [f for f in failures if isinstance(f, SchemaMissingError)]
        if missing:
            self.schema_missing = True
            logger.error(
                f"Backend schema missing: {', '.join(str(m.relation) for m in missing)}",
                extra={"error_code": "SCHEMA_MISSING", "instance_id": self.instance_id},
            )
            return
        logger.error(
            f"Reload failed, keeping previous snapshot: {failures[0]}",
            extra={"instance_id": self.instance_id},
        )

    def request_reload(self) -> None:
        """Peer signal handler: start a reload, or queue one behind the running one."""
        if self._disposed:
            return
        if self._reload_task is not None:
            self._reload_again = True
            return
        self._reload_task = asyncio.get_running_loop().create_task(self._reload_loop())

    async def _reload_loop(self) -> None:
        try:
            while True:
                self._reload_again = False
                await self.reload()
                if not self._reload_again:
                    break
        finally:
            self._reload_task = None

    async def settle(self) -> None:
        """Wait for signal-triggered reloads to finish."""
        while self._reload_task is not None:
            await asyncio.shield(self._reload_task)

    # ─── Write-through helpers ───────────────────────────────────

    def _committed(self, collection: str, operation: str) -> None:
        self._version += 1
        logger.info(
            f"{collection}.{operation} committed",
            extra={
                "collection": collection, "operation": operation,
                "instance_id": self.instance_id,
            },
        )
        self._notifier.notify()

    # ─── Items & movements ───────────────────────────────────────

    async def add_item(self, item: Item) -> Item:
        await self._gateway.items.add(item)
        self._items = _upsert(self._items, item, key="code")
        self._committed("items", "add")
        return item

    async def remove_item(self, code: str) -> None:
        # TODO: decide whether to block or cascade when movements still reference `code`
        await self._gateway.items.delete(code)
        self._items = _without(self._items, code, key="code")
        self._committed("items", "delete")

    async def update_price_by_type(self, item_type: ItemType, price: float) -> int:
        """Set the price of every item of one type. Returns how many cached items changed."""
        item_type = ItemType(item_type)
        await self._gateway.items.update_price_by_type(item_type, price)
        changed = 0
        remapped = []
        for item in self._items:
            if item.type == item_type:
                item = item.model_copy(update={"price": price})
                changed += 1
            remapped.append(item)
        self._items = tuple(remapped)
        self._committed("items", "update_price_by_type")
        return changed

    async def add_movement(self, movement: Movement) -> Movement:
        await self._gateway.movements.add(movement)
        self._movements = _upsert(self._movements, movement)
        self._committed("movements", "add")
        return movement

    # ─── Baptisms ────────────────────────────────────────────────

    async def add_baptism(self, baptism: Baptism) -> Baptism:
        if baptism.created_at is None:
            baptism = baptism.model_copy(update={"created_at": utc_now_iso()})
        await self._gateway.baptisms.add(baptism)
        self._baptisms = _upsert(self._baptisms, baptism)
        self._committed("baptisms", "add")
        return baptism

    async def edit_baptism(self, baptism: Baptism) -> Baptism:
        await self._gateway.baptisms.update(baptism)
        self._baptisms = _upsert(self._baptisms, baptism)
        self._committed("baptisms", "update")
        return baptism

    async def remove_baptism(self, record_id: str) -> None:
        await self._gateway.baptisms.delete(record_id)
        self._baptisms = _without(self._baptisms, record_id)
        self._committed("baptisms", "delete")

    async def update_baptism_status(
        self, record_id: str, status: PendingStatus,
    ) -> Baptism | None:
        current = _find(self._baptisms, record_id)
        if current is None:
            return None
        updated = current.model_copy(update=pending_transition(PendingStatus(status)))
        return await self.edit_baptism(updated)

    # ─── Child presentations ─────────────────────────────────────

    async def add_presentation(self, presentation: ChildPresentation) -> ChildPresentation:
        if presentation.created_at is None:
            presentation = presentation.model_copy(update={"created_at": utc_now_iso()})
        await self._gateway.presentations.add(presentation)
        self._presentations = _upsert(self._presentations, presentation)
        self._committed("presentations", "add")
        return presentation

    async def edit_presentation(self, presentation: ChildPresentation) -> ChildPresentation:
        await self._gateway.presentations.update(presentation)
        self._presentations = _upsert(self._presentations, presentation)
        self._committed("presentations", "update")
        return presentation

    async def remove_presentation(self, record_id: str) -> None:
        await self._gateway.presentations.delete(record_id)
        self._presentations = _without(self._presentations, record_id)
        self._committed("presentations", "delete")

    async def update_presentation_status(
        self, record_id: str, status: PendingStatus,
    ) -> ChildPresentation | None:
        current = _find(self._presentations, record_id)
        if current is None:
            return None
        updated = current.model_copy(update=pending_transition(PendingStatus(status)))
        return await self.edit_presentation(updated)

    # ─── Loans ───────────────────────────────────────────────────

    async def add_loan(self, loan: Loan) -> Loan:
        if loan.loan_date is None:
            loan = loan.model_copy(update={"loan_date": utc_now_iso()})
        await self._gateway.loans.add(loan)
        self._loans = _upsert(self._loans, loan)
        self._committed("loans", "add")
        return loan

    async def update_loan_status(self, record_id: str, status: PendingStatus) -> Loan | None:
        current = _find(self._loans, record_id)
        if current is None:
            return None
        updated = current.model_copy(update=loan_transition(PendingStatus(status)))
        await self._gateway.loans.update(updated)
        self._loans = _upsert(self._loans, updated)
        self._committed("loans", "update")
        return updated

    async def remove_loan(self, record_id: str) -> None:
        await self._gateway.loans.delete(record_id)
        self._loans = _without(self._loans, record_id)
        self._committed("loans", "delete")

    # ─── Events ──────────────────────────────────────────────────

    async def add_event(self, event: AppEvent) -> AppEvent:
        await self._gateway.events.add(event)
        self._events = _upsert(self._events, event)
        self._committed("events", "add")
        return event

    async def remove_event(self, record_id: str) -> None:
        await self._gateway.events.delete(record_id)
        self._events = _without(self._events, record_id)
        self._committed("events", "delete")

    # ─── Settings ────────────────────────────────────────────────

    def update_settings(self, edit: AppSettings | dict) -> AppSettings:
        """Apply an edit immediately; persistence follows after the quiet window."""
        if isinstance(edit, AppSettings):
            updated = edit
        else:
            updated = self._settings.merged_with(edit)
        self._settings = updated
        self._debouncer.schedule(updated)
        return updated

    async def _persist_settings(self, value: AppSettings) -> None:
        await self._gateway.settings.upsert(value.model_dump(mode="json"))
        self._committed("settings", "upsert")
