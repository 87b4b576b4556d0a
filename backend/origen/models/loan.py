"""Loan ORM — garments lent out, status yes = outstanding, no = returned."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from origen.db.base import Base


class Loan(Base):
    __tablename__ = "loans"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    borrower_name: Mapped[str] = mapped_column(String(200), nullable=False)
    item_type: Mapped[str] = mapped_column(String(20), nullable=False)
    size: Mapped[str] = mapped_column(String(20), nullable=False)
    loan_date: Mapped[str | None] = mapped_column(String(40), nullable=True)
    return_date: Mapped[str | None] = mapped_column(String(40), nullable=True)
    status: Mapped[str] = mapped_column(String(5), nullable=False, default="yes")
