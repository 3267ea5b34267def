"""
Swap engine: fee-adjusted constant-product swaps against a ReservePair.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from ..errors import InvariantViolation, ZeroAmount
from ..kernels.python.cpmm_swap import BPS_DENOM, compute_fee_total
from ..kernels.python.fixed_point import require_amount
from ..state.reserves import ReservePair, Reserves
from .cpmm import DEFAULT_FEE_BPS, get_amount_in, get_amount_out

logger = logging.getLogger(__name__)


class SwapDirection(Enum):
    A_TO_B = "A_TO_B"
    B_TO_A = "B_TO_A"


@dataclass(frozen=True)
class SwapResult:
    direction: SwapDirection
    amount_in: int
    amount_out: int
    fee_total: int
    reserves_before: Reserves
    reserves_after: Reserves

    @property
    def k_before(self) -> int:
        return self.reserves_before.k

    @property
    def k_after(self) -> int:
        return self.reserves_after.k


class SwapEngine:
    """
    Prices swaps with a fixed fee and applies them to a reserve pair.

    The fee is ``fee_bps`` basis points of the gross input and is never paid
    out, so every fee-bearing swap strictly grows ``k``.
    """

    def __init__(self, fee_bps: int = DEFAULT_FEE_BPS) -> None:
        if not isinstance(fee_bps, int) or isinstance(fee_bps, bool):
            raise TypeError("fee_bps must be an int")
        if not (0 <= fee_bps < BPS_DENOM):
            raise ValueError(f"fee_bps must be in [0, {BPS_DENOM}): {fee_bps}")
        self.fee_bps = fee_bps

    def compute_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        return get_amount_out(amount_in, reserve_in, reserve_out, self.fee_bps)

    def compute_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        return get_amount_in(amount_out, reserve_in, reserve_out, self.fee_bps)

    def quote(self, direction: SwapDirection, amount_in: int, reserves: Reserves) -> int:
        """Output amount for swapping ``amount_in`` in ``direction`` against ``reserves``."""
        if direction is SwapDirection.A_TO_B:
            return self.compute_amount_out(amount_in, reserves.reserve_a, reserves.reserve_b)
        return self.compute_amount_out(amount_in, reserves.reserve_b, reserves.reserve_a)

    def swap(self, direction: SwapDirection, amount_in: int, reserve_pair: ReservePair) -> SwapResult:
        """
        Apply an exact-in swap to ``reserve_pair``.

        The input side grows by the whole ``amount_in``; the output side
        shrinks by the quoted ``amount_out``.

        Raises:
            ZeroAmount: If amount_in is zero or the trade is too small to pay out
            InvariantViolation: If the post-swap product is below the pre-swap product
        """
        require_amount("amount_in", amount_in)
        if amount_in == 0:
            raise ZeroAmount("zero swap")

        before = reserve_pair.snapshot()
        amount_out = self.quote(direction, amount_in, before)
        if amount_out == 0:
            raise ZeroAmount("amount_out is zero (trade too small)")

        if direction is SwapDirection.A_TO_B:
            reserve_pair.increase(amount_in, 0)
            after = reserve_pair.decrease(0, amount_out)
        else:
            reserve_pair.increase(0, amount_in)
            after = reserve_pair.decrease(amount_out, 0)

        if after.k < before.k:
            raise InvariantViolation(before.k, after.k)

        logger.debug(
            "swap %s in=%d out=%d k %d -> %d",
            direction.value,
            amount_in,
            amount_out,
            before.k,
            after.k,
        )
        return SwapResult(
            direction=direction,
            amount_in=amount_in,
            amount_out=amount_out,
            fee_total=compute_fee_total(gross_in=amount_in, fee_bps=self.fee_bps),
            reserves_before=before,
            reserves_after=after,
        )
