"""
Core pool algorithms
"""

from .cpmm import (
    DEFAULT_FEE_BPS,
    get_amount_out,
    get_amount_in,
    swap_exact_in,
    swap_exact_out,
    compute_lp_mint,
    compute_lp_burn,
)
from .liquidity import LiquidityLedger
from .oracle import PRICE_SCALE, get_price, get_inverse_price
from .swap import SwapDirection, SwapEngine, SwapResult

__all__ = [
    "DEFAULT_FEE_BPS",
    "get_amount_out",
    "get_amount_in",
    "swap_exact_in",
    "swap_exact_out",
    "compute_lp_mint",
    "compute_lp_burn",
    "LiquidityLedger",
    "PRICE_SCALE",
    "get_price",
    "get_inverse_price",
    "SwapDirection",
    "SwapEngine",
    "SwapResult",
]
