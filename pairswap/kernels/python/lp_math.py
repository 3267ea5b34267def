"""
Liquidity math kernel.

Pure functions with explicit rounding rules:
- first mint: ``floor(sqrt(amount_a * amount_b))``
- later mints: ``min(floor(amount_a * supply / reserve_a), floor(amount_b * supply / reserve_b))``
- burns: ``floor(shares * reserve / supply)`` per side
- ratio quote: ``floor(amount_a * reserve_b / reserve_a)``

Unlike Uniswap v2 no minimum-liquidity lock is subtracted, so burning the
entire supply returns the reserves to exactly zero.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...errors import InsufficientReserves, InsufficientShares, ZeroAmount
from .fixed_point import isqrt, mul_div, require_amount


@dataclass(frozen=True)
class OptimalLiquidityResult:
    amount_a_used: int
    amount_b_used: int
    amount_a_refund: int
    amount_b_refund: int


@dataclass(frozen=True)
class BurnLiquidityResult:
    amount_a_out: int
    amount_b_out: int


def quote(*, amount_a: int, reserve_a: int, reserve_b: int) -> int:
    """Amount of B matching ``amount_a`` at the current reserve ratio."""
    require_amount("amount_a", amount_a)
    if amount_a == 0:
        raise ZeroAmount("amount_a must be positive")
    require_amount("reserve_a", reserve_a)
    require_amount("reserve_b", reserve_b)
    if reserve_a == 0 or reserve_b == 0:
        raise InsufficientReserves("cannot quote against an empty pool")
    return mul_div(amount_a, reserve_b, reserve_a)


def optimal_liquidity(
    *,
    reserve_a: int,
    reserve_b: int,
    amount_a_desired: int,
    amount_b_desired: int,
) -> OptimalLiquidityResult:
    """
    Compute ratio-preserving used amounts and refunds.

    For an empty pool, uses everything and refunds nothing.
    """
    for name, v in (
        ("amount_a_desired", amount_a_desired),
        ("amount_b_desired", amount_b_desired),
    ):
        require_amount(name, v)
        if v == 0:
            raise ZeroAmount(f"{name} must be positive")

    if reserve_a == 0 and reserve_b == 0:
        return OptimalLiquidityResult(
            amount_a_used=amount_a_desired,
            amount_b_used=amount_b_desired,
            amount_a_refund=0,
            amount_b_refund=0,
        )

    amount_b_optimal = quote(amount_a=amount_a_desired, reserve_a=reserve_a, reserve_b=reserve_b)
    if amount_b_optimal <= amount_b_desired:
        amount_a_used = amount_a_desired
        amount_b_used = amount_b_optimal
    else:
        amount_a_used = quote(amount_a=amount_b_desired, reserve_a=reserve_b, reserve_b=reserve_a)
        amount_b_used = amount_b_desired

    if amount_a_used == 0 or amount_b_used == 0:
        raise ZeroAmount("computed used amounts must be positive")

    return OptimalLiquidityResult(
        amount_a_used=amount_a_used,
        amount_b_used=amount_b_used,
        amount_a_refund=amount_a_desired - amount_a_used,
        amount_b_refund=amount_b_desired - amount_b_used,
    )


def mint_shares(
    *,
    amount_a: int,
    amount_b: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
) -> int:
    """Shares minted for a deposit of ``(amount_a, amount_b)``."""
    require_amount("amount_a", amount_a)
    require_amount("amount_b", amount_b)
    require_amount("reserve_a", reserve_a)
    require_amount("reserve_b", reserve_b)
    require_amount("total_shares", total_shares)
    if amount_a == 0 or amount_b == 0:
        raise ZeroAmount(f"deposit amounts must be positive: ({amount_a}, {amount_b})")

    if total_shares == 0:
        if reserve_a != 0 or reserve_b != 0:
            raise InsufficientReserves("initial liquidity requires empty reserves")
        return isqrt(amount_a * amount_b)

    if reserve_a == 0 or reserve_b == 0:
        raise InsufficientReserves("cannot add liquidity to an empty reserve with outstanding shares")
    shares_a = mul_div(amount_a, total_shares, reserve_a)
    shares_b = mul_div(amount_b, total_shares, reserve_b)
    return min(shares_a, shares_b)


def burn_shares(
    *,
    share_amount: int,
    provider_balance: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
    provider: str = "",
) -> BurnLiquidityResult:
    """Proportional redemption for burning ``share_amount`` shares."""
    require_amount("share_amount", share_amount)
    require_amount("provider_balance", provider_balance)
    require_amount("total_shares", total_shares)
    if share_amount == 0:
        raise ZeroAmount("share_amount must be positive")
    if share_amount > provider_balance:
        raise InsufficientShares(provider, share_amount, provider_balance)
    if provider_balance > total_shares:
        raise ValueError("provider balance exceeds total share supply")

    return BurnLiquidityResult(
        amount_a_out=mul_div(reserve_a, share_amount, total_shares),
        amount_b_out=mul_div(reserve_b, share_amount, total_shares),
    )
