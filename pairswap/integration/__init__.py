"""
Integration layer: the public engine and its external collaborators
"""

from .amm_engine import AmmEngine
from .events import (
    EventSink,
    LiquidityAdded,
    LiquidityRemoved,
    LoggingEventSink,
    NullEventSink,
    RecordingEventSink,
    Swap,
)
from .ledger import InMemoryTokenLedger, TokenLedger

__all__ = [
    "AmmEngine",
    "EventSink",
    "LiquidityAdded",
    "LiquidityRemoved",
    "LoggingEventSink",
    "NullEventSink",
    "RecordingEventSink",
    "Swap",
    "InMemoryTokenLedger",
    "TokenLedger",
]
