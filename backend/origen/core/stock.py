"""Stock Derivation — current quantity per item code, derived from the movement ledger.

Invariants:
    - stock(code) = Σ incoming quantity − Σ outgoing quantity over movements with that code
    - Re-derived on every call from the collection passed in (no memoization, O(movements))
    - Negative results are returned as-is: no clamping, no error
    - Movements whose code matches no item still count toward that code

Design Decisions:
    - Pure functions over the store's snapshot: the store owns the data, this module owns the math
      (ADR: functional core — testable without a store or a gateway)
    - Dashboard derivations (low stock, per-type totals) built on compute_stock, never a second formula
"""

from collections.abc import Iterable

from origen.core.domain_types import ItemType, MovementDirection
from origen.core.repository_protocols import ItemLike, MovementLike


def compute_stock(movements: Iterable[MovementLike], code: str) -> int:
    """Current stock for one item code."""
    incoming = 0
    outgoing = 0
    for m in movements:
        if m.code != code:
            continue
        if m.direction == MovementDirection.INCOMING:
            incoming += m.quantity
        elif m.direction == MovementDirection.OUTGOING:
            outgoing += m.quantity
    return incoming - outgoing


def stock_levels(
    items: Iterable[ItemLike], movements: Iterable[MovementLike],
) -> dict[str, int]:
    """Stock for every catalog item, keyed by code."""
    ledger = list(movements)
    return {item.code: compute_stock(ledger, item.code) for item in items}


def low_stock_items(
    items: Iterable[ItemLike], movements: Iterable[MovementLike],
) -> list[dict]:
    """Items at or below their minimum quantity, lowest stock first."""
    ledger = list(movements)
    flagged = []
    for item in items:
        current = compute_stock(ledger, item.code)
        if current <= item.min_quantity:
            flagged.append({
                "code": item.code,
                "name": item.name,
                "min_quantity": item.min_quantity,
                "current_stock": current,
            })
    return sorted(flagged, key=lambda row: row["current_stock"])


def stock_by_type(
    items: Iterable[ItemLike], movements: Iterable[MovementLike],
) -> dict[str, int]:
    """Total units on hand per item family."""
    ledger = list(movements)
    totals = {t.value: 0 for t in ItemType}
    for item in items:
        key = item.type.value if isinstance(item.type, ItemType) else str(item.type)
        totals[key] = totals.get(key, 0) + compute_stock(ledger, item.code)
    return totals
