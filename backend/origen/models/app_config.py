"""Settings ORM — key/value rows; the app only ever reads and writes id 'app_config'.

Design Decisions:
    - JSON value column: the settings shape evolves with modules, no migration per field
"""

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from origen.db.base import Base


class SettingsRow(Base):
    __tablename__ = "settings"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    value: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
