"""User ORM — accounts identified by username.

Invariants:
    - username is the primary key (no duplicate accounts)
    - password_hash is a bcrypt hash, never plaintext
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from origen.db.base import Base


class User(Base):
    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(64), primary_key=True)
    password_hash: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    created_at: Mapped[str] = mapped_column(String(40), nullable=False)
