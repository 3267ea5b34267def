# [TESTER] v1

from __future__ import annotations

import math

import pytest

from pairswap.core.liquidity import LiquidityLedger
from pairswap.errors import InsufficientShares, Overflow, ZeroAmount
from pairswap.state.reserves import ReservePair, Reserves


def test_first_deposit_mints_isqrt() -> None:
    ledger = LiquidityLedger()
    shares = ledger.mint_for_deposit("alice", 100, 200, Reserves(0, 0))
    assert shares == math.isqrt(100 * 200)
    assert ledger.total_shares == shares == ledger.shares_of("alice")


def test_proportional_deposit_mints_proportional_shares() -> None:
    ledger = LiquidityLedger()
    first = ledger.mint_for_deposit("alice", 100, 200, Reserves(0, 0))
    second = ledger.mint_for_deposit("bob", 50, 100, Reserves(100, 200))
    assert second == first // 2
    assert ledger.providers() == ["alice", "bob"]
    assert ledger.verify_consistent()


def test_dust_deposit_mints_nothing_and_is_rejected() -> None:
    ledger = LiquidityLedger()
    ledger.mint_for_deposit("alice", 10, 10, Reserves(0, 0))
    with pytest.raises(ZeroAmount, match="insufficient liquidity minted"):
        ledger.mint_for_deposit("bob", 1, 1, Reserves(10**6, 10**6))
    assert ledger.shares_of("bob") == 0


def test_share_supply_bound() -> None:
    ledger = LiquidityLedger(max_shares=100)
    ledger.mint_for_deposit("alice", 100, 100, Reserves(0, 0))
    with pytest.raises(Overflow):
        ledger.mint_for_deposit("bob", 100, 100, Reserves(100, 100))
    assert ledger.total_shares == 100


def test_burn_releases_reserves_and_debits() -> None:
    ledger = LiquidityLedger()
    pair = ReservePair()
    shares = ledger.mint_for_deposit("alice", 100, 200, pair.snapshot())
    pair.increase(100, 200)

    a, b = ledger.burn_for_withdrawal("alice", shares // 2, pair)
    assert (a, b) == (100 * (shares // 2) // shares, 200 * (shares // 2) // shares)
    assert pair.snapshot() == Reserves(100 - a, 200 - b)

    ledger.burn_for_withdrawal("alice", ledger.shares_of("alice"), pair)
    assert pair.snapshot() == Reserves(0, 0)
    assert ledger.total_shares == 0
    # Entry stays at zero.
    assert ledger.providers() == ["alice"]


def test_burn_too_many_changes_nothing() -> None:
    ledger = LiquidityLedger()
    pair = ReservePair()
    shares = ledger.mint_for_deposit("alice", 100, 200, pair.snapshot())
    pair.increase(100, 200)
    with pytest.raises(InsufficientShares):
        ledger.burn_for_withdrawal("alice", shares + 1, pair)
    with pytest.raises(InsufficientShares):
        ledger.burn_for_withdrawal("mallory", 1, pair)
    assert pair.snapshot() == Reserves(100, 200)
    assert ledger.shares_of("alice") == shares


def test_copy_is_independent() -> None:
    ledger = LiquidityLedger()
    ledger.mint_for_deposit("alice", 100, 100, Reserves(0, 0))
    staged = ledger.copy()
    staged.mint_for_deposit("bob", 100, 100, Reserves(100, 100))
    assert ledger.total_shares == 100
    assert staged.total_shares == 200
