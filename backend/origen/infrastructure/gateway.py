"""Remote Persistence Gateway — SQLAlchemy implementation of the store's boundary protocols.

Invariants:
    - Every call opens its own session: parallel reload fetches never share a transaction
    - Writes commit before returning; any failure raises (DatabaseError / SchemaMissingError /
      DuplicateItemError) and nothing is committed
    - Reads return entities (schemas); ORM rows never escape a session
    - Account lookups that find nothing return None / False

Design Decisions:
    - One generic collection class parameterized by (ORM model, schema, key column)
      instead of one repository per table (ADR: six tables share the same four operations)
    - Movements get the append-only class: no update/delete path exists for the ledger
    - Item add checks the code first: the catalog rejects duplicates instead of upserting
"""

import logging

from sqlalchemy import delete, func, select, update

from origen.core.domain_types import ItemType, SETTINGS_RECORD_ID
from origen.core.errors import DuplicateItemError, ErrorContext
from origen.infrastructure.database import DatabaseSessionManager
from origen.models import (
    AppEvent as AppEventRow,
    Baptism as BaptismRow,
    ChildPresentation as PresentationRow,
    Item as ItemRow,
    Loan as LoanRow,
    Movement as MovementRow,
    SettingsRow,
    User as UserRow,
)
from origen.schemas.entities import (
    AppEvent, Baptism, ChildPresentation, Item, Loan, Movement,
)

logger = logging.getLogger(__name__)


def _to_row(entity) -> dict:
    return entity.model_dump(mode="json")


class SqlLedger:
    """Append-only collection: read everything, insert new rows."""

    def __init__(self, manager: DatabaseSessionManager, model, schema, order_by=()):
        self._manager = manager
        self._model = model
        self._schema = schema
        self._order_by = order_by

    @property
    def name(self) -> str:
        return self._model.__tablename__

    async def get_all(self) -> list:
        async with self._manager.session() as db:
            result = await db.execute(select(self._model).order_by(*self._order_by))
            return [self._schema.model_validate(row) for row in result.scalars().all()]

    async def add(self, entity) -> None:
        async with self._manager.session() as db:
            db.add(self._model(**_to_row(entity)))
            await db.commit()
        logger.debug("Row added", extra={"collection": self.name, "operation": "add"})


class SqlCollection(SqlLedger):
    """Collection with replace-by-key update and delete."""

    def __init__(self, manager, model, schema, key: str, order_by=()):
        super().__init__(manager, model, schema, order_by)
        self._key = key

    def _key_column(self):
        return getattr(self._model, self._key)

    async def update(self, entity) -> None:
        values = _to_row(entity)
        key_value = values.pop(self._key)
        async with self._manager.session() as db:
            await db.execute(
                update(self._model)
                .where(self._key_column() == key_value)
                .values(**values)
            )
            await db.commit()

    async def delete(self, key: str) -> None:
        async with self._manager.session() as db:
            await db.execute(
                delete(self._model).where(self._key_column() == key),
            )
            await db.commit()


class SqlItemCollection(SqlCollection):
    """Catalog items — unique codes plus the per-type price update."""

    async def add(self, entity: Item) -> None:
        async with self._manager.session() as db:
            existing = await db.get(ItemRow, entity.code)
            if existing is not None:
                raise DuplicateItemError(
                    entity.code,
                    ErrorContext(collection=self.name, operation="add"),
                )
            db.add(ItemRow(**_to_row(entity)))
            await db.commit()

    async def update_price_by_type(self, item_type: ItemType, price: float) -> None:
        async with self._manager.session() as db:
            await db.execute(
                update(ItemRow)
                .where(ItemRow.type == ItemType(item_type).value)
                .values(price=price)
            )
            await db.commit()


class SqlSettingsRecord:
    """The single settings row addressed by a well-known id."""

    def __init__(self, manager: DatabaseSessionManager, record_id: str = SETTINGS_RECORD_ID):
        self._manager = manager
        self._record_id = record_id

    async def get(self) -> dict | None:
        async with self._manager.session() as db:
            row = await db.get(SettingsRow, self._record_id)
            return dict(row.value) if row is not None else None

    async def upsert(self, value: dict) -> None:
        async with self._manager.session() as db:
            await db.merge(SettingsRow(id=self._record_id, value=value))
            await db.commit()


class SqlAccountDirectory:
    """User accounts as plain dicts; password_hash included, it never leaves services."""

    _FIELDS = ("username", "password_hash", "role", "full_name", "created_at")

    def __init__(self, manager: DatabaseSessionManager):
        self._manager = manager

    def _as_dict(self, row: UserRow) -> dict:
        return {name: getattr(row, name) for name in self._FIELDS}

    async def probe(self) -> None:
        """Raise if the users table cannot be read."""
        async with self._manager.session() as db:
            await db.execute(select(UserRow.username).limit(1))

    async def get_by_username(self, username: str) -> dict | None:
        async with self._manager.session() as db:
            row = await db.get(UserRow, username)
            return self._as_dict(row) if row is not None else None

    async def exists(self, username: str) -> bool:
        return await self.get_by_username(username) is not None

    async def count_by_role(self, role: str) -> int:
        async with self._manager.session() as db:
            result = await db.execute(
                select(func.count()).select_from(UserRow).where(UserRow.role == role),
            )
            return int(result.scalar_one())

    async def insert(self, account: dict) -> None:
        async with self._manager.session() as db:
            db.add(UserRow(**{k: account[k] for k in self._FIELDS if k in account}))
            await db.commit()

    async def update(self, username: str, **fields: object) -> None:
        async with self._manager.session() as db:
            await db.execute(
                update(UserRow).where(UserRow.username == username).values(**fields),
            )
            await db.commit()


class SqlGateway:
    """Bundle of every collection the ledger store mirrors."""

    def __init__(self, manager: DatabaseSessionManager):
        self.items = SqlItemCollection(
            manager, ItemRow, Item, key="code",
            order_by=(ItemRow.type.asc(), ItemRow.name.asc()),
        )
        self.movements = SqlLedger(
            manager, MovementRow, Movement, order_by=(MovementRow.date.desc(),),
        )
        self.baptisms = SqlCollection(
            manager, BaptismRow, Baptism, key="id",
            order_by=(BaptismRow.created_at.desc(),),
        )
        self.presentations = SqlCollection(
            manager, PresentationRow, ChildPresentation, key="id",
            order_by=(PresentationRow.created_at.desc(),),
        )
        self.loans = SqlCollection(
            manager, LoanRow, Loan, key="id",
            order_by=(LoanRow.status.desc(), LoanRow.loan_date.desc()),
        )
        self.events = SqlCollection(
            manager, AppEventRow, AppEvent, key="id",
            order_by=(AppEventRow.created_at.desc(),),
        )
        self.settings = SqlSettingsRecord(manager)
        self.accounts = SqlAccountDirectory(manager)
