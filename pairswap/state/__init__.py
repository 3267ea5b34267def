"""
State management for the pairswap pool
"""

from .balances import BalanceTable
from .lp import LPTable
from .reserves import ReservePair, Reserves

__all__ = [
    "BalanceTable",
    "LPTable",
    "ReservePair",
    "Reserves",
]
