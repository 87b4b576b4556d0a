"""Item ORM — catalog entries keyed by their human-assigned code.

Invariants:
    - code is the primary key and the join key for movements
    - No foreign key from movements: deleting an item leaves its ledger history intact
"""

from sqlalchemy import Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from origen.db.base import Base


class Item(Base):
    __tablename__ = "items"

    code: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    size: Mapped[str] = mapped_column(String(20), nullable=False)
    min_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    creation_date: Mapped[str] = mapped_column(String(40), nullable=False)
