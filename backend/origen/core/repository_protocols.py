"""Boundary Protocols — contracts between the ledger store and its IO collaborators.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Gateways raise on write failure (DatabaseError / SchemaMissingError), never return error values
    - Lookups that find nothing return None / False, not an exception
    - SyncChannel.publish never raises to the caller of notify()

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
      (test fakes satisfy the contract without importing infrastructure)
    - Async in Protocol: implementations do IO; pure core functions that consume
      entities (stock, workflow) are never async themselves
"""

from collections.abc import Callable
from typing import Generic, Protocol, TypeVar

from origen.core.domain_types import ItemType, MovementDirection

T = TypeVar("T")


class ItemLike(Protocol):
    """Structural contract for catalog items consumed by stock derivation."""
    code: str
    name: str
    type: ItemType
    min_quantity: int


class MovementLike(Protocol):
    """Structural contract for ledger entries consumed by stock derivation."""
    code: str
    direction: MovementDirection
    quantity: int


class AppendOnlyCollection(Protocol, Generic[T]):
    """Contract for a remote collection that only ever grows (the movement ledger)."""
    async def get_all(self) -> list[T]: ...
    async def add(self, entity: T) -> None: ...


class RecordCollection(AppendOnlyCollection[T], Protocol):
    """Contract for one remote collection keyed by a single field."""
    async def update(self, entity: T) -> None: ...
    async def delete(self, key: str) -> None: ...


class ItemCollection(RecordCollection[T], Protocol):
    """Item collection plus the bulk price update."""
    async def update_price_by_type(self, item_type: ItemType, price: float) -> None: ...


class SettingsRecord(Protocol):
    """Single well-known settings row."""
    async def get(self) -> dict | None: ...
    async def upsert(self, value: dict) -> None: ...


class AccountDirectory(Protocol):
    """Contract for user accounts — implemented by shell."""
    async def probe(self) -> None: ...
    async def get_by_username(self, username: str) -> dict | None: ...
    async def exists(self, username: str) -> bool: ...
    async def count_by_role(self, role: str) -> int: ...
    async def insert(self, account: dict) -> None: ...
    async def update(self, username: str, **fields: object) -> None: ...


class Gateway(Protocol):
    """Everything the ledger store persists through."""
    items: ItemCollection
    movements: AppendOnlyCollection
    baptisms: RecordCollection
    presentations: RecordCollection
    loans: RecordCollection
    events: RecordCollection
    settings: SettingsRecord
    accounts: AccountDirectory


class SyncChannel(Protocol):
    """Broadcast transport shared by every instance of the application."""
    def publish(self, message: str) -> None: ...
    def subscribe(self, callback: Callable[[str], object]) -> Callable[[], None]: ...
    def close(self) -> None: ...


class LocalState(Protocol):
    """Per-instance key/value storage that survives a restart."""
    def get(self, key: str) -> object | None: ...
    def set(self, key: str, value: object) -> None: ...
    def remove(self, key: str) -> None: ...
