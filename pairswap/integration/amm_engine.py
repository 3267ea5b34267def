"""
AMM engine: the public facade over the pool.

This is an imperative-shell wrapper around the functional core:
- Validates caller preconditions (positive amounts, slippage bounds).
- Stages reserve and share changes on copies of the pool state.
- Moves tokens through the injected `TokenLedger` and emits one event.
- Commits the staged state only when every transfer and the event succeeded.

Every public operation runs under one re-entrant lock, so callers never see a
half-applied reserve pair or share supply. The lock lets a sink read views while
an operation is in flight; a second mutating call from inside an operation
raises `ReentrantOperation`. A failed operation leaves the pool
state untouched and compensates any transfer it already made.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple

from ..config import AmmConfig
from ..core.liquidity import LiquidityLedger
from ..core.oracle import get_price
from ..core.swap import SwapDirection, SwapEngine
from ..errors import (
    EngineHalted,
    InvariantViolation,
    ReentrantOperation,
    SlippageExceeded,
    TransferFailed,
    ZeroAmount,
)
from ..kernels.python.fixed_point import require_amount
from ..kernels.python.lp_math import OptimalLiquidityResult, optimal_liquidity, quote
from ..state.reserves import ReservePair, Reserves
from .events import EventSink, LiquidityAdded, LiquidityRemoved, NullEventSink, Swap
from .ledger import InMemoryTokenLedger, TokenLedger

logger = logging.getLogger(__name__)


class _TransferBatch:
    """
    Ledger transfers made by one operation, undone in reverse order on failure.
    """

    def __init__(self, ledger: TokenLedger) -> None:
        self._ledger = ledger
        self._done: List[Tuple[str, str, str, int]] = []

    def pull(self, asset: str, account: str, amount: int) -> None:
        if amount == 0:
            return
        if not self._ledger.transfer_in(asset, account, amount):
            raise TransferFailed(asset, account, amount, "in")
        self._done.append(("in", asset, account, amount))

    def push(self, asset: str, account: str, amount: int) -> None:
        if amount == 0:
            return
        if not self._ledger.transfer_out(asset, account, amount):
            raise TransferFailed(asset, account, amount, "out")
        self._done.append(("out", asset, account, amount))

    def rollback(self) -> None:
        while self._done:
            direction, asset, account, amount = self._done.pop()
            if direction == "in":
                ok = self._ledger.transfer_out(asset, account, amount)
            else:
                ok = self._ledger.transfer_in(asset, account, amount)
            if not ok:
                logger.error(
                    "compensating transfer failed: reverse %s of %d %s for %s",
                    direction,
                    amount,
                    asset,
                    account,
                )


class AmmEngine:
    """
    Constant-product pool over two assets with LP share accounting.

    Args:
        ledger: Token ledger that holds the caller and pool balances
        config: Fee, asset ids and amount bounds
        sink: Receives one event per committed operation
    """

    def __init__(
        self,
        ledger: TokenLedger,
        config: AmmConfig = AmmConfig(),
        sink: Optional[EventSink] = None,
    ) -> None:
        self.config = config
        self._ledger = ledger
        self._sink: EventSink = sink if sink is not None else NullEventSink()
        self._reserves = ReservePair(max_amount=config.max_amount)
        self._liquidity = LiquidityLedger(max_shares=config.max_amount)
        self._swap_engine = SwapEngine(config.fee_bps)
        self._lock = threading.RLock()
        self._halted = False
        self._in_operation = False

    @classmethod
    def in_memory(
        cls,
        config: AmmConfig = AmmConfig(),
        sink: Optional[EventSink] = None,
    ) -> "AmmEngine":
        """Engine backed by a fresh InMemoryTokenLedger (reachable as ``engine.ledger``)."""
        return cls(InMemoryTokenLedger(pool_account=config.pool_account), config, sink)

    @property
    def ledger(self) -> TokenLedger:
        return self._ledger

    @property
    def fee_bps(self) -> int:
        return self._swap_engine.fee_bps

    @property
    def is_halted(self) -> bool:
        return self._halted

    # -- guards ---------------------------------------------------------------

    @contextmanager
    def _operation(self) -> Iterator[None]:
        with self._lock:
            if self._halted:
                raise EngineHalted("engine halted after an invariant violation")
            if self._in_operation:
                raise ReentrantOperation("engine operation started while another is in progress")
            self._in_operation = True
            try:
                yield
            finally:
                self._in_operation = False

    def _require_positive(self, name: str, value: int, message: str) -> None:
        require_amount(name, value, max_value=self.config.max_amount)
        if value == 0:
            raise ZeroAmount(message)

    def _commit(self, reserves: ReservePair, liquidity: LiquidityLedger) -> None:
        self._reserves = reserves
        self._liquidity = liquidity

    # -- liquidity ------------------------------------------------------------

    def add_liquidity(self, provider: str, amount_a: int, amount_b: int) -> LiquidityAdded:
        """
        Deposit ``(amount_a, amount_b)`` and mint shares to ``provider``.

        The deposit is taken in full. If it is off the pool ratio, shares are
        minted for the scarcer side and the excess accrues to all LPs.

        Raises:
            ZeroAmount: If either amount is zero
            TransferFailed: If the ledger refuses either deposit
        """
        with self._operation():
            self._require_positive("amount_a", amount_a, "zero amount")
            self._require_positive("amount_b", amount_b, "zero amount")

            reserves = self._reserves.copy()
            liquidity = self._liquidity.copy()
            shares = liquidity.mint_for_deposit(provider, amount_a, amount_b, reserves.snapshot())
            reserves.increase(amount_a, amount_b)

            event = LiquidityAdded(
                provider=provider,
                amount_a=amount_a,
                amount_b=amount_b,
                shares_minted=shares,
            )
            transfers = _TransferBatch(self._ledger)
            try:
                transfers.pull(self.config.asset_a, provider, amount_a)
                transfers.pull(self.config.asset_b, provider, amount_b)
                self._sink.emit(event)
            except Exception:
                transfers.rollback()
                raise

            self._commit(reserves, liquidity)
            logger.info(
                "liquidity added: provider=%s amounts=(%d, %d) shares=%d",
                provider,
                amount_a,
                amount_b,
                shares,
            )
            return event

    def remove_liquidity(self, provider: str, share_amount: int) -> LiquidityRemoved:
        """
        Burn ``share_amount`` of ``provider``'s shares and pay out the
        proportional reserves.

        Raises:
            ZeroAmount: If share_amount is zero
            InsufficientShares: If the provider holds fewer shares
            TransferFailed: If the ledger refuses either payout
        """
        with self._operation():
            self._require_positive("share_amount", share_amount, "zero amount")

            reserves = self._reserves.copy()
            liquidity = self._liquidity.copy()
            amount_a, amount_b = liquidity.burn_for_withdrawal(provider, share_amount, reserves)

            event = LiquidityRemoved(
                provider=provider,
                amount_a=amount_a,
                amount_b=amount_b,
                shares_burned=share_amount,
            )
            transfers = _TransferBatch(self._ledger)
            try:
                transfers.push(self.config.asset_a, provider, amount_a)
                transfers.push(self.config.asset_b, provider, amount_b)
                self._sink.emit(event)
            except Exception:
                transfers.rollback()
                raise

            self._commit(reserves, liquidity)
            logger.info(
                "liquidity removed: provider=%s shares=%d amounts=(%d, %d)",
                provider,
                share_amount,
                amount_a,
                amount_b,
            )
            return event

    # -- swaps ----------------------------------------------------------------

    def swap_a_for_b(self, trader: str, amount_in: int, min_amount_out: int = 0) -> Swap:
        """Sell ``amount_in`` of A for B."""
        return self._swap(SwapDirection.A_TO_B, trader, amount_in, min_amount_out)

    def swap_b_for_a(self, trader: str, amount_in: int, min_amount_out: int = 0) -> Swap:
        """Sell ``amount_in`` of B for A."""
        return self._swap(SwapDirection.B_TO_A, trader, amount_in, min_amount_out)

    def _swap(self, direction: SwapDirection, trader: str, amount_in: int, min_amount_out: int) -> Swap:
        with self._operation():
            self._require_positive("amount_in", amount_in, "zero swap")
            require_amount("min_amount_out", min_amount_out)

            reserves = self._reserves.copy()
            try:
                result = self._swap_engine.swap(direction, amount_in, reserves)
            except InvariantViolation as exc:
                self._halted = True
                logger.error("halting engine: %s", exc)
                raise
            if result.amount_out < min_amount_out:
                raise SlippageExceeded(result.amount_out, min_amount_out)

            if direction is SwapDirection.A_TO_B:
                asset_in, asset_out = self.config.asset_a, self.config.asset_b
            else:
                asset_in, asset_out = self.config.asset_b, self.config.asset_a

            event = Swap(
                trader=trader,
                direction=direction,
                amount_in=amount_in,
                amount_out=result.amount_out,
            )
            transfers = _TransferBatch(self._ledger)
            try:
                transfers.pull(asset_in, trader, amount_in)
                transfers.push(asset_out, trader, result.amount_out)
                self._sink.emit(event)
            except Exception:
                transfers.rollback()
                raise

            self._commit(reserves, self._liquidity)
            logger.info(
                "swap %s: trader=%s in=%d out=%d fee=%d",
                direction.value,
                trader,
                amount_in,
                result.amount_out,
                result.fee_total,
            )
            return event

    # -- views ----------------------------------------------------------------

    def get_reserves(self) -> Reserves:
        with self._lock:
            return self._reserves.snapshot()

    def get_price(self) -> int:
        """Spot price of A in B, scaled by ``config.price_scale``; 0 with no liquidity."""
        with self._lock:
            return get_price(self._reserves.snapshot(), self.config.price_scale)

    def total_liquidity(self) -> int:
        with self._lock:
            return self._liquidity.total_shares

    def liquidity(self, provider: str) -> int:
        with self._lock:
            return self._liquidity.shares_of(provider)

    def providers(self) -> List[str]:
        with self._lock:
            return self._liquidity.providers()

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Pure quote with this engine's fee; does not read pool state."""
        return self._swap_engine.compute_amount_out(amount_in, reserve_in, reserve_out)

    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Pure exact-out quote with this engine's fee."""
        return self._swap_engine.compute_amount_in(amount_out, reserve_in, reserve_out)

    def quote_deposit(self, amount_a: int) -> int:
        """Amount of B that matches ``amount_a`` at the current pool ratio."""
        reserves = self.get_reserves()
        return quote(amount_a=amount_a, reserve_a=reserves.reserve_a, reserve_b=reserves.reserve_b)

    def quote_add_liquidity(self, amount_a_desired: int, amount_b_desired: int) -> OptimalLiquidityResult:
        """Split desired deposit amounts into the ratio-preserving part and the excess."""
        reserves = self.get_reserves()
        return optimal_liquidity(
            reserve_a=reserves.reserve_a,
            reserve_b=reserves.reserve_b,
            amount_a_desired=amount_a_desired,
            amount_b_desired=amount_b_desired,
        )

    def __repr__(self) -> str:
        r = self.get_reserves()
        return (
            f"AmmEngine(assets=({self.config.asset_a}, {self.config.asset_b}), "
            f"reserves=({r.reserve_a}, {r.reserve_b}), "
            f"total_shares={self.total_liquidity()}, fee_bps={self.fee_bps})"
        )
