"""Movement ORM — append-only stock ledger.

Invariants:
    - Rows are inserted once and never updated or deleted by the application
    - code is indexed: stock derivation and history views filter by it
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from origen.db.base import Base


class Movement(Base):
    __tablename__ = "movements"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    code: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    date: Mapped[str] = mapped_column(String(40), nullable=False, index=True)
    direction: Mapped[str] = mapped_column(String(10), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
