"""
Notification events and sinks.

The engine hands each committed operation to an injected `EventSink`. The
sink is the only place events leave the core; transport and indexing are the
sink's business.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Protocol, Union

from ..core.swap import SwapDirection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LiquidityAdded:
    provider: str
    amount_a: int
    amount_b: int
    shares_minted: int

    name = "LiquidityAdded"

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.name, **asdict(self)}


@dataclass(frozen=True)
class LiquidityRemoved:
    provider: str
    amount_a: int
    amount_b: int
    shares_burned: int

    name = "LiquidityRemoved"

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.name, **asdict(self)}


@dataclass(frozen=True)
class Swap:
    trader: str
    direction: SwapDirection
    amount_in: int
    amount_out: int

    name = "Swap"

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["direction"] = self.direction.value
        return {"event": self.name, **d}


Event = Union[LiquidityAdded, LiquidityRemoved, Swap]


class EventSink(Protocol):
    def emit(self, event: Event) -> None:
        ...


class NullEventSink:
    """Discards every event."""

    def emit(self, event: Event) -> None:
        return None


class RecordingEventSink:
    """Keeps events in memory, in emission order."""

    def __init__(self) -> None:
        self.events: List[Event] = []

    def emit(self, event: Event) -> None:
        self.events.append(event)

    def of_type(self, name: str) -> List[Event]:
        return [e for e in self.events if e.name == name]


class LoggingEventSink:
    """Writes each event to a logger as a structured record."""

    def __init__(self, log: logging.Logger = logger, level: int = logging.INFO) -> None:
        self._log = log
        self._level = level

    def emit(self, event: Event) -> None:
        payload = event.to_dict()
        self._log.log(self._level, "%s", event.name, extra={"event": payload})
