"""Domain Types — enum values are the strings stored and sent on the wire."""

from origen.core.domain_types import (
    SYNC_SIGNAL, ItemType, MovementDirection, PendingStatus, SaveStatus, Theme, UserRole,
)


def test_sync_signal_value():
    assert SYNC_SIGNAL == "DATA_UPDATED"


def test_item_types():
    assert {t.value for t in ItemType} == {"shirts", "hoodies"}


def test_movement_directions():
    assert {d.value for d in MovementDirection} == {"incoming", "outgoing"}


def test_pending_status_is_yes_no():
    assert PendingStatus("yes") is PendingStatus.YES
    assert PendingStatus("no") is PendingStatus.NO


def test_save_status_has_four_states():
    assert [s.value for s in SaveStatus] == ["idle", "saving", "saved", "error"]


def test_roles_and_themes():
    assert {r.value for r in UserRole} == {"admin", "moderator", "user"}
    assert {t.value for t in Theme} == {"light", "dark"}
