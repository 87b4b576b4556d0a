"""Baptism ORM — baptism registrations with a pending/completed workflow."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from origen.db.base import Base


class Baptism(Base):
    __tablename__ = "baptisms"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    pending: Mapped[str] = mapped_column(String(5), nullable=False, default="yes")
    created_at: Mapped[str | None] = mapped_column(String(40), nullable=True)
    completed_at: Mapped[str | None] = mapped_column(String(40), nullable=True)
