"""Event ORM — named links published as QR codes. No workflow state."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from origen.db.base import Base


class AppEvent(Base):
    __tablename__ = "events"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    link: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[str] = mapped_column(String(40), nullable=False)
