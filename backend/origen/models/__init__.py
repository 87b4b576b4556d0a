"""ORM Models — SQLAlchemy declarative models for every backend table.

Invariants:
    - All models inherit from Base (db/base.py)
    - Table names match the collection names the gateway exposes

Design Decisions:
    - One file per table for locality
    - All models imported here so Base.metadata is complete before create_all / autogenerate
"""

from origen.models.item import Item  # noqa: F401
from origen.models.movement import Movement  # noqa: F401
from origen.models.baptism import Baptism  # noqa: F401
from origen.models.presentation import ChildPresentation  # noqa: F401
from origen.models.loan import Loan  # noqa: F401
from origen.models.event import AppEvent  # noqa: F401
from origen.models.app_config import SettingsRow  # noqa: F401
from origen.models.user import User  # noqa: F401
