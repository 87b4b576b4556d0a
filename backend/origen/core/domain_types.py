"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - ItemCode is the join key between items and movements
    - All valid states encoded as Enums — no raw string matching
    - SYNC_SIGNAL is the only message ever carried on the broadcast channel

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and to DB string columns without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ItemCode = NewType("ItemCode", str)
RecordId = NewType("RecordId", str)
Username = NewType("Username", str)


# ─── Constants ───────────────────────────────────────────────────

SYNC_SIGNAL = "DATA_UPDATED"
SETTINGS_RECORD_ID = "app_config"


# ─── Enums ───────────────────────────────────────────────────────

class ItemType(str, Enum):
    """Catalog item families — price updates apply per family."""
    SHIRTS = "shirts"
    HOODIES = "hoodies"


class MovementDirection(str, Enum):
    """Ledger entry direction. Incoming adds stock, outgoing removes it."""
    INCOMING = "incoming"
    OUTGOING = "outgoing"


class PendingStatus(str, Enum):
    """Workflow flag shared by registrations and loans.

    For registrations YES means pending; for loans YES means outstanding.
    """
    YES = "yes"
    NO = "no"


class UserRole(str, Enum):
    ADMIN = "admin"
    MODERATOR = "moderator"
    USER = "user"


class SaveStatus(str, Enum):
    """Settings persistence state machine."""
    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class Collection(str, Enum):
    """Backend collections mirrored by the ledger store."""
    ITEMS = "items"
    MOVEMENTS = "movements"
    BAPTISMS = "baptisms"
    PRESENTATIONS = "presentations"
    LOANS = "loans"
    EVENTS = "events"
