# [TESTER] v1

from __future__ import annotations

import pytest

from pairswap.errors import InsufficientReserves, Overflow
from pairswap.kernels.python.fixed_point import MAX_UINT256
from pairswap.state.lp import LPTable
from pairswap.state.reserves import ReservePair, Reserves


def test_increase_and_decrease_return_snapshots() -> None:
    pair = ReservePair()
    assert pair.snapshot() == Reserves(0, 0)
    assert pair.snapshot().is_empty

    after = pair.increase(100, 200)
    assert after == Reserves(100, 200)
    assert after.k == 20_000

    after = pair.decrease(40, 50)
    assert tuple(after) == (60, 150)


def test_decrease_beyond_reserve_changes_nothing() -> None:
    pair = ReservePair(10, 20)
    with pytest.raises(InsufficientReserves):
        pair.decrease(5, 21)
    assert pair.snapshot() == Reserves(10, 20)


def test_increase_overflow_changes_nothing() -> None:
    pair = ReservePair(1, MAX_UINT256)
    with pytest.raises(Overflow):
        pair.increase(1, 1)
    assert pair.snapshot() == Reserves(1, MAX_UINT256)


def test_custom_bound_applies_to_increase() -> None:
    pair = ReservePair(max_amount=1000)
    pair.increase(1000, 1)
    with pytest.raises(Overflow):
        pair.increase(1, 0)


def test_copy_is_independent() -> None:
    pair = ReservePair(10, 20)
    staged = pair.copy()
    staged.increase(5, 5)
    assert pair.snapshot() == Reserves(10, 20)
    assert staged.snapshot() == Reserves(15, 25)


def test_snapshot_is_immutable() -> None:
    snap = ReservePair(1, 2).snapshot()
    with pytest.raises(AttributeError):
        snap.reserve_a = 5  # type: ignore[misc]


def test_lp_table_keeps_total_in_sync() -> None:
    table = LPTable()
    table.credit("alice", 100)
    table.credit("bob", 50)
    table.debit("alice", 100)
    assert table.total == 50
    assert table.get("alice") == 0
    assert table.providers() == ["alice", "bob"]
    assert table.verify_consistent()

    copy = table.copy()
    copy.credit("carol", 1)
    assert table.total == 50
    assert table.get("carol") == 0
    assert copy.get("carol") == 1
