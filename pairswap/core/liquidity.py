"""
Liquidity ledger: LP share minting and burning.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from ..errors import ZeroAmount
from ..kernels.python.fixed_point import MAX_UINT256, checked_add
from ..state.lp import LPTable, Provider
from ..state.reserves import ReservePair, Reserves
from .cpmm import compute_lp_burn, compute_lp_mint

logger = logging.getLogger(__name__)


class LiquidityLedger:
    """
    Tracks every provider's share balance and the global share supply.

    The ledger never changes reserves on deposit (the caller adds the
    deposited amounts to the ReservePair) but does decrease them on
    withdrawal, so a burn and its redemption happen together.
    """

    def __init__(self, table: LPTable | None = None, *, max_shares: int = MAX_UINT256) -> None:
        self._table = table if table is not None else LPTable()
        self._max_shares = max_shares

    @property
    def total_shares(self) -> int:
        return self._table.total

    def shares_of(self, provider: Provider) -> int:
        return self._table.get(provider)

    def providers(self) -> List[Provider]:
        return self._table.providers()

    def mint_for_deposit(self, provider: Provider, amount_a: int, amount_b: int, reserves: Reserves) -> int:
        """
        Mint shares for a deposit of ``(amount_a, amount_b)`` against ``reserves``.

        Args:
            provider: Account credited with the new shares
            amount_a: Deposited amount of asset A
            amount_b: Deposited amount of asset B
            reserves: Reserves before the deposit

        Returns:
            Number of shares minted

        Raises:
            ZeroAmount: If either amount is zero, or the deposit is too small to mint a share
        """
        shares = compute_lp_mint(
            reserves.reserve_a,
            reserves.reserve_b,
            amount_a,
            amount_b,
            self._table.total,
        )
        if shares == 0:
            raise ZeroAmount("insufficient liquidity minted")
        checked_add(self._table.total, shares, max_value=self._max_shares)
        self._table.credit(provider, shares)
        logger.debug("minted %d shares to %s (supply=%d)", shares, provider, self._table.total)
        return shares

    def burn_for_withdrawal(
        self,
        provider: Provider,
        share_amount: int,
        reserve_pair: ReservePair,
    ) -> Tuple[int, int]:
        """
        Burn ``share_amount`` of ``provider``'s shares and release the
        proportional reserves.

        Burning the entire supply releases the reserves exactly, leaving (0, 0).

        Returns:
            Tuple of (amount_a, amount_b) released

        Raises:
            ZeroAmount: If share_amount is zero
            InsufficientShares: If share_amount exceeds the provider's balance
        """
        reserves = reserve_pair.snapshot()
        amount_a, amount_b = compute_lp_burn(
            share_amount,
            self._table.get(provider),
            reserves.reserve_a,
            reserves.reserve_b,
            self._table.total,
            provider=provider,
        )
        reserve_pair.decrease(amount_a, amount_b)
        self._table.debit(provider, share_amount)
        logger.debug("burned %d shares of %s (supply=%d)", share_amount, provider, self._table.total)
        return amount_a, amount_b

    def copy(self) -> "LiquidityLedger":
        return LiquidityLedger(self._table.copy(), max_shares=self._max_shares)

    def verify_consistent(self) -> bool:
        return self._table.verify_consistent()

    def __repr__(self) -> str:
        return f"LiquidityLedger(total_shares={self._table.total}, providers={len(self.providers())})"
