"""
Constant Product Market Maker (CPMM) algorithm implementation.

This module exposes the pure CPMM operations with deterministic rounding
rules. Nothing here touches engine state.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Deterministic Rounding
- Time Complexity: O(1) per quote
- Space Complexity: O(1) auxiliary
- Invariant: After each swap, x' * y' >= x * y (the fee stays in the pool)
"""

from typing import Tuple

from ..errors import InvariantViolation
from ..kernels.python.cpmm_swap import amount_in_for as _kernel_amount_in_for
from ..kernels.python.cpmm_swap import amount_out_for as _kernel_amount_out_for
from ..kernels.python.cpmm_swap import swap_exact_in as _kernel_swap_exact_in
from ..kernels.python.cpmm_swap import swap_exact_out as _kernel_swap_exact_out
from ..kernels.python.lp_math import burn_shares as _kernel_burn_shares
from ..kernels.python.lp_math import mint_shares as _kernel_mint_shares

# 0.30%, the Uniswap v2 rate
DEFAULT_FEE_BPS = 30


def get_amount_out(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    fee_bps: int = DEFAULT_FEE_BPS,
) -> int:
    """
    Quote the output of an exact-in swap.

        amount_in_after_fee = floor(amount_in * (10_000 - fee_bps) / 10_000)
        amount_out = floor(reserve_out * amount_in_after_fee / (reserve_in + amount_in_after_fee))

    Raises:
        ZeroAmount: If amount_in is zero
        InsufficientReserves: If either reserve is empty
    """
    return _kernel_amount_out_for(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_in=amount_in,
        fee_bps=fee_bps,
    )


def get_amount_in(
    amount_out: int,
    reserve_in: int,
    reserve_out: int,
    fee_bps: int = DEFAULT_FEE_BPS,
) -> int:
    """
    Quote the minimal input that buys at least ``amount_out``.

    Raises:
        ZeroAmount: If amount_out is zero
        InsufficientReserves: If a reserve is empty or amount_out >= reserve_out
    """
    return _kernel_amount_in_for(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_out=amount_out,
        fee_bps=fee_bps,
    )


def swap_exact_in(
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    fee_bps: int = DEFAULT_FEE_BPS,
) -> Tuple[int, Tuple[int, int]]:
    """
    Compute the output amount and post-swap reserves for an exact-in swap.

    Post-swap reserves:
        new_reserve_in = reserve_in + amount_in  (fee stays in pool)
        new_reserve_out = reserve_out - amount_out

    Returns:
        Tuple of (amount_out, (new_reserve_in, new_reserve_out))

    Raises:
        InvariantViolation: If the post-swap product is below the pre-swap product
    """
    res = _kernel_swap_exact_in(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_in=amount_in,
        fee_bps=fee_bps,
    )
    if res.k_after < res.k_before:
        raise InvariantViolation(res.k_before, res.k_after)
    return res.amount_out, (res.new_reserve_in, res.new_reserve_out)


def swap_exact_out(
    reserve_in: int,
    reserve_out: int,
    amount_out: int,
    fee_bps: int = DEFAULT_FEE_BPS,
) -> Tuple[int, Tuple[int, int]]:
    """
    Compute the required input and post-swap reserves for an exact-out swap.

    Returns:
        Tuple of (amount_in, (new_reserve_in, new_reserve_out))
    """
    res = _kernel_swap_exact_out(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_out=amount_out,
        fee_bps=fee_bps,
    )
    if res.k_after < res.k_before:
        raise InvariantViolation(res.k_before, res.k_after)
    return res.amount_in, (res.new_reserve_in, res.new_reserve_out)


def compute_lp_mint(
    reserve_a: int,
    reserve_b: int,
    amount_a: int,
    amount_b: int,
    total_shares: int,
) -> int:
    """
    Compute LP shares to mint for a deposit.

    For the first deposit (total_shares == 0):
        shares = floor(sqrt(amount_a * amount_b))

    For later deposits:
        shares = min(floor(amount_a * total_shares / reserve_a),
                     floor(amount_b * total_shares / reserve_b))

    Taking the smaller ratio means an unbalanced deposit never mints more than
    its scarcer side is worth; the excess is donated to the pool.
    """
    return _kernel_mint_shares(
        amount_a=amount_a,
        amount_b=amount_b,
        reserve_a=reserve_a,
        reserve_b=reserve_b,
        total_shares=total_shares,
    )


def compute_lp_burn(
    share_amount: int,
    provider_balance: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
    provider: str = "",
) -> Tuple[int, int]:
    """
    Compute asset amounts returned for burning ``share_amount`` shares.

    Formula:
        amount_a = floor(reserve_a * share_amount / total_shares)
        amount_b = floor(reserve_b * share_amount / total_shares)

    Raises:
        ZeroAmount: If share_amount is zero
        InsufficientShares: If share_amount exceeds provider_balance
    """
    res = _kernel_burn_shares(
        share_amount=share_amount,
        provider_balance=provider_balance,
        reserve_a=reserve_a,
        reserve_b=reserve_b,
        total_shares=total_shares,
        provider=provider,
    )
    return res.amount_a_out, res.amount_b_out
