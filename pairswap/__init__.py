"""
pairswap: a two-asset constant-product AMM engine.

Public API:
- `AmmEngine` (add/remove liquidity, swaps, price and reserve views)
- `AmmConfig`, `load_config`
- the `AmmError` family of exceptions
"""

from .config import AmmConfig, config_from_mapping, load_config
from .core import SwapDirection, get_amount_in, get_amount_out
from .errors import (
    AmmError,
    EngineHalted,
    InsufficientReserves,
    InsufficientShares,
    InvariantViolation,
    Overflow,
    ReentrantOperation,
    SlippageExceeded,
    TransferFailed,
    ZeroAmount,
)
from .integration import AmmEngine, InMemoryTokenLedger, RecordingEventSink

__version__ = "0.1.0"

__all__ = [
    "AmmConfig",
    "config_from_mapping",
    "load_config",
    "SwapDirection",
    "get_amount_in",
    "get_amount_out",
    "AmmError",
    "EngineHalted",
    "InsufficientReserves",
    "InsufficientShares",
    "InvariantViolation",
    "Overflow",
    "ReentrantOperation",
    "SlippageExceeded",
    "TransferFailed",
    "ZeroAmount",
    "AmmEngine",
    "InMemoryTokenLedger",
    "RecordingEventSink",
]
