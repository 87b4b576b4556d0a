"""Entity Schemas — Pydantic models for every record the ledger store mirrors.

Invariants:
    - Entities are frozen: cached copies change only by replacement (model_copy), never in place
    - Python attributes are snake_case; JSON on the wire is camelCase (alias generator)
    - Item.price >= 0 validated at construction; Movement.quantity > 0 only at the API
      boundary (schemas/requests.py), so a stored row never breaks a reload
    - Optional timestamps are None when unset, never empty strings

Design Decisions:
    - One schema per entity shared by store, gateway and routes
      (ADR: the store mirrors rows 1:1 — separate DTOs would only copy fields)
    - from_attributes=True: gateway builds entities straight from ORM rows
"""

from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from origen.core.domain_types import (
    ItemType, MovementDirection, PendingStatus, UserRole,
)
from origen.core.workflow import utc_now_iso


def new_id() -> str:
    return str(uuid4())


class Entity(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        frozen=True,
    )


class Item(Entity):
    """Catalog item. `code` is the key movements join on."""
    code: str = Field(min_length=1, max_length=64)
    name: str = ""
    type: ItemType
    size: str
    min_quantity: int = Field(0, ge=0)
    price: float = Field(0.0, ge=0)
    creation_date: str = Field(default_factory=utc_now_iso)


class Movement(Entity):
    """Ledger entry — immutable once written."""
    id: str = Field(default_factory=new_id)
    code: str
    date: str = Field(default_factory=utc_now_iso)
    direction: MovementDirection
    quantity: int


class Baptism(Entity):
    id: str = Field(default_factory=new_id)
    first_name: str | None = None
    last_name: str | None = None
    full_name: str
    email: str = ""
    phone: str = ""
    pending: PendingStatus = PendingStatus.YES
    created_at: str | None = None
    completed_at: str | None = None


class ChildPresentation(Entity):
    id: str = Field(default_factory=new_id)
    child_name: str
    mother_name: str = ""
    father_name: str = ""
    email: str = ""
    phone: str = ""
    pending: PendingStatus = PendingStatus.YES
    scheduled_date: str | None = None
    created_at: str | None = None
    completed_at: str | None = None


class Loan(Entity):
    """Borrowed garment. status YES = outstanding, NO = returned."""
    id: str = Field(default_factory=new_id)
    borrower_name: str
    item_type: ItemType
    size: str
    loan_date: str | None = None
    return_date: str | None = None
    status: PendingStatus = PendingStatus.YES


class AppEvent(Entity):
    id: str = Field(default_factory=new_id)
    name: str
    link: str
    created_at: str = Field(default_factory=utc_now_iso)


class User(Entity):
    """Account as exposed to callers. Never carries the password hash."""
    username: str
    role: UserRole
    full_name: str = ""
    created_at: str | None = None
