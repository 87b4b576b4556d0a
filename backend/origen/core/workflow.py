"""Workflow Stamps — completion/return timestamps for pending-style records.

Invariants:
    - Transition to NO (done / returned) stamps the completion field with `now`
    - Transition to YES (pending / outstanding) clears the completion field
    - The same rule applies to baptisms, presentations and loans

Design Decisions:
    - Returns an update dict instead of mutating: callers apply it with model_copy(update=...)
      so the cached record is never touched before the gateway confirms
    - Revert clears the stamp for every workflow type: a stale completion date on a
      pending record reads as "done" in reports
"""

from datetime import datetime, timezone

from origen.core.domain_types import PendingStatus


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def pending_transition(
    status: PendingStatus, now: str | None = None,
) -> dict:
    """Field updates for a registration (baptism / presentation) status change."""
    completed = (now or utc_now_iso()) if status == PendingStatus.NO else None
    return {"pending": status, "completed_at": completed}


def loan_transition(
    status: PendingStatus, now: str | None = None,
) -> dict:
    """Field updates for a loan status change. NO means returned."""
    returned = (now or utc_now_iso()) if status == PendingStatus.NO else None
    return {"status": status, "return_date": returned}
