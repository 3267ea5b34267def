"""
CPMM swap kernel.

Semantics:
- Fee is charged on the *gross* input amount using ceil rounding, so
  ``net_in = floor(gross_in * (10_000 - fee_bps) / 10_000)``.
- Pricing uses ``net_in`` (Uniswap-v2 style).
- The whole gross input enters the pool; the fee stays in the reserves.

The kernel is a small, auditable, integer-only set of functions. Callers
validate zero amounts and empty reserves before reaching it; the kernel
still fails closed on anything it cannot price.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...errors import InsufficientReserves, ZeroAmount
from .fixed_point import checked_add, checked_sub, mul_div, mul_div_up, require_amount


BPS_DENOM = 10_000


def _require_fee_bps(fee_bps: int) -> None:
    if not isinstance(fee_bps, int) or isinstance(fee_bps, bool):
        raise TypeError("fee_bps must be an int")
    if not (0 <= fee_bps < BPS_DENOM):
        raise ValueError(f"fee_bps must be in [0, {BPS_DENOM}): {fee_bps}")


def _require_reserves(reserve_in: int, reserve_out: int) -> None:
    require_amount("reserve_in", reserve_in)
    require_amount("reserve_out", reserve_out)
    if reserve_in == 0 or reserve_out == 0:
        raise InsufficientReserves("cannot price against an empty reserve")


@dataclass(frozen=True)
class SwapExactInResult:
    amount_out: int
    fee_total: int
    net_in: int
    gross_in: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


@dataclass(frozen=True)
class SwapExactOutResult:
    amount_in: int
    amount_out: int
    fee_total: int
    net_in: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


def compute_fee_total(*, gross_in: int, fee_bps: int) -> int:
    """
    Compute ``fee_total = ceil(gross_in * fee_bps / 10_000)``.
    """
    require_amount("gross_in", gross_in)
    _require_fee_bps(fee_bps)
    return mul_div_up(gross_in, fee_bps, BPS_DENOM)


def amount_out_for(*, reserve_in: int, reserve_out: int, amount_in: int, fee_bps: int) -> int:
    """
    Quote ``floor(reserve_out * net_in / (reserve_in + net_in))``.

    The result is strictly below ``reserve_out`` for any finite input, and may
    be zero for inputs too small to move the price.
    """
    require_amount("amount_in", amount_in)
    if amount_in == 0:
        raise ZeroAmount("amount_in must be positive")
    _require_reserves(reserve_in, reserve_out)
    net_in = amount_in - compute_fee_total(gross_in=amount_in, fee_bps=fee_bps)
    if net_in == 0:
        return 0
    return mul_div(reserve_out, net_in, checked_add(reserve_in, net_in))


def swap_exact_in(
    *,
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    fee_bps: int,
) -> SwapExactInResult:
    """
    Exact-in swap quote + post-state.

    Raises ZeroAmount if the swap would produce a zero output.
    """
    amount_out = amount_out_for(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_in=amount_in,
        fee_bps=fee_bps,
    )
    if amount_out == 0:
        raise ZeroAmount("amount_out is zero (trade too small)")

    fee_total = compute_fee_total(gross_in=amount_in, fee_bps=fee_bps)
    new_reserve_in = checked_add(reserve_in, amount_in)
    new_reserve_out = checked_sub(reserve_out, amount_out)

    return SwapExactInResult(
        amount_out=amount_out,
        fee_total=fee_total,
        net_in=amount_in - fee_total,
        gross_in=amount_in,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=reserve_in * reserve_out,
        k_after=new_reserve_in * new_reserve_out,
    )


def amount_in_for(*, reserve_in: int, reserve_out: int, amount_out: int, fee_bps: int) -> int:
    """
    Minimal gross input whose exact-in quote pays at least ``amount_out``.

        net_in = ceil(reserve_in * amount_out / (reserve_out - amount_out))
        amount_in = ceil(net_in * 10_000 / (10_000 - fee_bps))
    """
    require_amount("amount_out", amount_out)
    if amount_out == 0:
        raise ZeroAmount("amount_out must be positive")
    _require_reserves(reserve_in, reserve_out)
    _require_fee_bps(fee_bps)
    if amount_out >= reserve_out:
        raise InsufficientReserves(
            f"cannot drain full reserve: amount_out ({amount_out}) >= reserve_out ({reserve_out})"
        )

    net_in = mul_div_up(reserve_in, amount_out, reserve_out - amount_out)
    return mul_div_up(net_in, BPS_DENOM, BPS_DENOM - fee_bps)


def swap_exact_out(
    *,
    reserve_in: int,
    reserve_out: int,
    amount_out: int,
    fee_bps: int,
) -> SwapExactOutResult:
    """Exact-out swap quote + post-state."""
    amount_in = amount_in_for(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_out=amount_out,
        fee_bps=fee_bps,
    )
    # With fee_total = ceil(amount_in * fee_bps / 10_000) the realized net input is
    # floor(amount_in * (10_000 - fee_bps) / 10_000) >= the required net_in.
    fee_total = compute_fee_total(gross_in=amount_in, fee_bps=fee_bps)
    quoted = amount_out_for(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_in=amount_in,
        fee_bps=fee_bps,
    )
    if quoted < amount_out:
        raise ValueError("computed amount_in insufficient for desired amount_out")

    new_reserve_in = checked_add(reserve_in, amount_in)
    new_reserve_out = reserve_out - amount_out
    return SwapExactOutResult(
        amount_in=amount_in,
        amount_out=amount_out,
        fee_total=fee_total,
        net_in=amount_in - fee_total,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=reserve_in * reserve_out,
        k_after=new_reserve_in * new_reserve_out,
    )
