"""Presentation ORM — child presentation registrations."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from origen.db.base import Base


class ChildPresentation(Base):
    __tablename__ = "presentations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    child_name: Mapped[str] = mapped_column(String(200), nullable=False)
    mother_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    father_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    pending: Mapped[str] = mapped_column(String(5), nullable=False, default="yes")
    scheduled_date: Mapped[str | None] = mapped_column(String(40), nullable=True)
    created_at: Mapped[str | None] = mapped_column(String(40), nullable=True)
    completed_at: Mapped[str | None] = mapped_column(String(40), nullable=True)
