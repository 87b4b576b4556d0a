"""Workflow Stamps — completion/return timestamps follow the status flag."""

from origen.core.domain_types import PendingStatus
from origen.core.workflow import loan_transition, pending_transition, utc_now_iso

NOW = "2026-03-01T10:00:00+00:00"


def test_completing_registration_stamps_completed_at():
    assert pending_transition(PendingStatus.NO, now=NOW) == {
        "pending": PendingStatus.NO, "completed_at": NOW,
    }


def test_reopening_registration_clears_completed_at():
    assert pending_transition(PendingStatus.YES, now=NOW)["completed_at"] is None


def test_returning_loan_stamps_return_date():
    assert loan_transition(PendingStatus.NO, now=NOW) == {
        "status": PendingStatus.NO, "return_date": NOW,
    }


def test_reopening_loan_clears_return_date():
    assert loan_transition(PendingStatus.YES, now=NOW)["return_date"] is None


def test_default_now_is_utc_iso():
    stamped = pending_transition(PendingStatus.NO)["completed_at"]
    assert stamped.endswith("+00:00")
    assert utc_now_iso()[:4] == stamped[:4]
