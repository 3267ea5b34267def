# [TESTER] v1

from __future__ import annotations

import logging
import threading
from typing import Set

import pytest

from pairswap.core.swap import SwapDirection, SwapEngine
from pairswap.config import AmmConfig
from pairswap.errors import EngineHalted, InvariantViolation, Overflow, ReentrantOperation, TransferFailed
from pairswap.integration.amm_engine import AmmEngine
from pairswap.integration.events import Event, RecordingEventSink
from pairswap.integration.ledger import InMemoryTokenLedger
from pairswap.state.reserves import Reserves

E18 = 10**18


class RefusingLedger(InMemoryTokenLedger):
    """Refuses payouts of the listed assets."""

    def __init__(self) -> None:
        super().__init__()
        self.refuse_out: Set[str] = set()

    def transfer_out(self, asset: str, recipient: str, amount: int) -> bool:
        if asset in self.refuse_out:
            return False
        return super().transfer_out(asset, recipient, amount)


class ExplodingSink(RecordingEventSink):
    def __init__(self) -> None:
        super().__init__()
        self.armed = False

    def emit(self, event: Event) -> None:
        if self.armed:
            raise RuntimeError("sink down")
        super().emit(event)


class DrainingSwapEngine(SwapEngine):
    """Quotes almost the whole output reserve, breaking the product invariant."""

    def quote(self, direction: SwapDirection, amount_in: int, reserves: Reserves) -> int:
        if direction is SwapDirection.A_TO_B:
            return reserves.reserve_b - 1
        return reserves.reserve_a - 1


def _seeded(ledger: InMemoryTokenLedger, sink: RecordingEventSink | None = None) -> AmmEngine:
    for account in ("alice", "trader"):
        ledger.mint(account, "TKA", 1000 * E18)
        ledger.mint(account, "TKB", 1000 * E18)
    engine = AmmEngine(ledger, sink=sink)
    engine.add_liquidity("alice", 100 * E18, 200 * E18)
    return engine


def test_partial_deposit_is_returned() -> None:
    ledger = InMemoryTokenLedger()
    ledger.mint("carol", "TKA", 10 * E18)
    engine = AmmEngine(ledger)

    with pytest.raises(TransferFailed) as info:
        engine.add_liquidity("carol", 10 * E18, 10 * E18)
    assert info.value.asset == "TKB"
    assert info.value.direction == "in"

    assert ledger.balance_of("carol", "TKA") == 10 * E18
    assert ledger.balance_of("pool", "TKA") == 0
    assert engine.get_reserves() == Reserves(0, 0)
    assert engine.total_liquidity() == 0
    assert engine.liquidity("carol") == 0


def test_refused_payout_rolls_back_swap() -> None:
    ledger = RefusingLedger()
    engine = _seeded(ledger)
    ledger.refuse_out.add("TKB")

    with pytest.raises(TransferFailed, match="refused"):
        engine.swap_a_for_b("trader", 10 * E18)

    assert engine.get_reserves() == Reserves(100 * E18, 200 * E18)
    assert ledger.balance_of("trader", "TKA") == 1000 * E18
    assert ledger.balance_of("pool", "TKA") == 100 * E18


def test_refused_payout_rolls_back_withdrawal() -> None:
    ledger = RefusingLedger()
    engine = _seeded(ledger)
    total = engine.total_liquidity()
    ledger.refuse_out.add("TKB")

    with pytest.raises(TransferFailed):
        engine.remove_liquidity("alice", total)

    assert engine.total_liquidity() == total
    assert engine.get_reserves() == Reserves(100 * E18, 200 * E18)
    assert ledger.balance_of("pool", "TKA") == 100 * E18
    assert ledger.balance_of("alice", "TKA") == 900 * E18


def test_failed_compensation_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    ledger = RefusingLedger()
    engine = _seeded(ledger)
    ledger.refuse_out.update({"TKA", "TKB"})

    with caplog.at_level(logging.ERROR, logger="pairswap.integration.amm_engine"):
        with pytest.raises(TransferFailed):
            engine.swap_a_for_b("trader", 10 * E18)

    assert any("compensating transfer failed" in r.getMessage() for r in caplog.records)
    # Pool state is still the committed one.
    assert engine.get_reserves() == Reserves(100 * E18, 200 * E18)


def test_sink_failure_aborts_operation() -> None:
    ledger = InMemoryTokenLedger()
    sink = ExplodingSink()
    engine = _seeded(ledger, sink)
    sink.armed = True

    with pytest.raises(RuntimeError, match="sink down"):
        engine.swap_a_for_b("trader", 10 * E18)
    with pytest.raises(RuntimeError, match="sink down"):
        engine.add_liquidity("trader", 10 * E18, 20 * E18)

    assert engine.get_reserves() == Reserves(100 * E18, 200 * E18)
    assert ledger.balance_of("trader", "TKA") == 1000 * E18
    assert ledger.balance_of("trader", "TKB") == 1000 * E18
    assert engine.liquidity("trader") == 0
    assert len(sink.events) == 1


def test_invariant_violation_halts_engine() -> None:
    ledger = InMemoryTokenLedger()
    engine = _seeded(ledger)
    engine._swap_engine = DrainingSwapEngine()

    with pytest.raises(InvariantViolation) as info:
        engine.swap_a_for_b("trader", E18)
    assert info.value.k_after < info.value.k_before
    assert engine.is_halted

    # Nothing was committed or transferred.
    assert engine.get_reserves() == Reserves(100 * E18, 200 * E18)
    assert ledger.balance_of("trader", "TKA") == 1000 * E18

    with pytest.raises(EngineHalted):
        engine.swap_b_for_a("trader", E18)
    with pytest.raises(EngineHalted):
        engine.add_liquidity("alice", E18, E18)
    with pytest.raises(EngineHalted):
        engine.remove_liquidity("alice", 1)

    # Views keep working.
    assert engine.get_price() == 2 * E18
    assert engine.total_liquidity() > 0


def test_concurrent_swaps_keep_pool_backed() -> None:
    ledger = InMemoryTokenLedger()
    ledger.mint("alice", "TKA", 1000 * E18)
    ledger.mint("alice", "TKB", 1000 * E18)
    engine = AmmEngine(ledger)
    engine.add_liquidity("alice", 1000 * E18, 1000 * E18)

    traders = [f"t{i}" for i in range(8)]
    for t in traders:
        ledger.mint(t, "TKA", 100 * E18)
        ledger.mint(t, "TKB", 100 * E18)

    errors: list[BaseException] = []

    def run(trader: str) -> None:
        try:
            for i in range(20):
                if i % 2:
                    engine.swap_a_for_b(trader, E18)
                else:
                    engine.swap_b_for_a(trader, E18)
        except BaseException as exc:  # pragma: no cover
            errors.append(exc)

    threads = [threading.Thread(target=run, args=(t,)) for t in traders]
    for th in threads:
        th.start()
    for th in threads:
        th.join()

    assert errors == []
    r = engine.get_reserves()
    assert ledger.balance_of("pool", "TKA") == r.reserve_a
    assert ledger.balance_of("pool", "TKB") == r.reserve_b
    assert ledger.balances.total_supply("TKA") == 1000 * E18 + 800 * E18
    assert r.k > 1000 * E18 * 1000 * E18


class ReentrantSink(RecordingEventSink):
    """Trades against the engine from inside ``emit``."""

    def __init__(self) -> None:
        super().__init__()
        self.engine: AmmEngine | None = None
        self.prices: list[int] = []

    def emit(self, event: Event) -> None:
        if self.engine is not None and event.name == "Swap":
            self.prices.append(self.engine.get_price())
            self.engine.swap_a_for_b("bot", E18)
        super().emit(event)


def test_nested_mutation_from_sink_is_rejected() -> None:
    ledger = InMemoryTokenLedger()
    ledger.mint("bot", "TKA", 1000 * E18)
    sink = ReentrantSink()
    engine = _seeded(ledger, sink)
    sink.engine = engine

    with pytest.raises(ReentrantOperation):
        engine.swap_a_for_b("trader", 10 * E18)

    # Views were readable from inside the operation.
    assert sink.prices == [2 * E18]
    assert engine.get_reserves() == Reserves(100 * E18, 200 * E18)
    assert ledger.balance_of("pool", "TKA") == 100 * E18
    assert ledger.balance_of("pool", "TKB") == 200 * E18
    assert ledger.balance_of("bot", "TKA") == 1000 * E18

    # The guard is released once the operation ends.
    sink.engine = None
    engine.swap_a_for_b("trader", 10 * E18)
    r = engine.get_reserves()
    assert ledger.balance_of("pool", "TKA") == r.reserve_a == 110 * E18
    assert ledger.balance_of("pool", "TKB") == r.reserve_b


def test_overflow_on_engine_leaves_everything_unchanged() -> None:
    ledger = InMemoryTokenLedger()
    for account in ("alice", "trader"):
        ledger.mint(account, "TKA", 2000)
        ledger.mint(account, "TKB", 2000)
    sink = RecordingEventSink()
    engine = AmmEngine(ledger, AmmConfig(max_amount=1000), sink=sink)
    engine.add_liquidity("alice", 900, 900)
    shares = engine.total_liquidity()

    with pytest.raises(Overflow):
        engine.add_liquidity("alice", 200, 1)
    with pytest.raises(Overflow):
        engine.swap_a_for_b("trader", 200)

    assert engine.get_reserves() == Reserves(900, 900)
    assert engine.total_liquidity() == shares == engine.liquidity("alice")
    assert ledger.balance_of("alice", "TKA") == 1100
    assert ledger.balance_of("alice", "TKB") == 1100
    assert ledger.balance_of("trader", "TKA") == 2000
    assert ledger.balance_of("pool", "TKA") == 900
    assert ledger.balance_of("pool", "TKB") == 900
    assert len(sink.events) == 1
