"""Stock Derivation — verifies ledger sums, negatives, and dashboard derivations.

Invariants:
    - stock = Σ incoming − Σ outgoing for the code, nothing else counts
    - Negative stock is reported as-is
    - Appending a movement changes only its own code's stock, by exactly ±quantity
"""

import pytest

from origen.core.domain_types import ItemType, MovementDirection
from origen.core.stock import (
    compute_stock, low_stock_items, stock_by_type, stock_levels,
)
from origen.schemas.entities import Item, Movement

IN = MovementDirection.INCOMING
OUT = MovementDirection.OUTGOING


def _mv(code, direction, qty):
    return Movement(code=code, direction=direction, quantity=qty)


def _item(code, type_=ItemType.SHIRTS, min_quantity=0, name=""):
    return Item(code=code, name=name or code, type=type_, size="M", min_quantity=min_quantity)


def test_empty_ledger_is_zero():
    assert compute_stock([], "A1") == 0


def test_incoming_minus_outgoing():
    ledger = [_mv("A1", IN, 10), _mv("A1", OUT, 3), _mv("A1", IN, 2)]
    assert compute_stock(ledger, "A1") == 9


def test_other_codes_ignored():
    ledger = [_mv("A1", IN, 10), _mv("B2", IN, 50), _mv("B2", OUT, 7)]
    assert compute_stock(ledger, "A1") == 10
    assert compute_stock(ledger, "B2") == 43


def test_negative_stock_not_clamped():
    ledger = [_mv("A1", IN, 2), _mv("A1", OUT, 5)]
    assert compute_stock(ledger, "A1") == -3


def test_orphan_movements_still_count():
    """Movements for a code with no catalog item are summed like any other."""
    assert compute_stock([_mv("GONE", IN, 4)], "GONE") == 4


@pytest.mark.parametrize("direction,delta", [(IN, 6), (OUT, -6)])
def test_append_changes_only_its_code(direction, delta):
    ledger = [_mv("A1", IN, 10), _mv("B2", IN, 5)]
    before = {c: compute_stock(ledger, c) for c in ("A1", "B2")}
    ledger.append(_mv("A1", direction, 6))
    assert compute_stock(ledger, "A1") == before["A1"] + delta
    assert compute_stock(ledger, "B2") == before["B2"]


def test_stock_levels_keyed_by_item_code():
    items = [_item("A1"), _item("B2")]
    ledger = [_mv("A1", IN, 3)]
    assert stock_levels(items, ledger) == {"A1": 3, "B2": 0}


def test_low_stock_includes_items_at_threshold_sorted_ascending():
    items = [
        _item("A1", min_quantity=5),
        _item("B2", min_quantity=5),
        _item("C3", min_quantity=2),
    ]
    ledger = [_mv("A1", IN, 5), _mv("B2", IN, 1), _mv("C3", IN, 9)]
    low = low_stock_items(items, ledger)
    assert [row["code"] for row in low] == ["B2", "A1"]
    assert low[0] == {"code": "B2", "name": "B2", "min_quantity": 5, "current_stock": 1}


def test_stock_by_type_totals_every_family():
    items = [_item("S1"), _item("S2"), _item("H1", type_=ItemType.HOODIES)]
    ledger = [_mv("S1", IN, 4), _mv("S2", IN, 6), _mv("S2", OUT, 1)]
    assert stock_by_type(items, ledger) == {"shirts": 9, "hoodies": 0}


def test_ten_in_three_out_is_seven():
    ledger = [_mv("REM-1", IN, 10), _mv("REM-1", OUT, 3)]
    assert compute_stock(ledger, "REM-1") == 7


def test_outgoing_without_incoming_goes_negative():
    assert compute_stock([_mv("REM-1", OUT, 5)], "REM-1") == -5
