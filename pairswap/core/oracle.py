"""
Spot price view.

Prices are read straight from the reserves and scaled to a fixed-point
integer. This is a view over pool state, not an external price feed.
"""

from __future__ import annotations

from ..kernels.python.fixed_point import mul_div
from ..state.reserves import Reserves

# 18 decimals, the usual ERC-20 scale
PRICE_SCALE = 10**18


def get_price(reserves: Reserves, scale: int = PRICE_SCALE) -> int:
    """
    Price of one unit of A in units of B: ``floor(reserve_b * scale / reserve_a)``.

    Returns 0 when the pool holds no A (price undefined).
    """
    if reserves.reserve_a == 0:
        return 0
    return mul_div(reserves.reserve_b, scale, reserves.reserve_a)


def get_inverse_price(reserves: Reserves, scale: int = PRICE_SCALE) -> int:
    """Price of one unit of B in units of A; 0 when the pool holds no B."""
    if reserves.reserve_b == 0:
        return 0
    return mul_div(reserves.reserve_a, scale, reserves.reserve_b)
