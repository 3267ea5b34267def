"""
Reserve bookkeeping for the two-asset pool.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import InsufficientReserves
from ..kernels.python.fixed_point import MAX_UINT256, checked_add, require_amount


@dataclass(frozen=True)
class Reserves:
    """Immutable view of ``(reserve_a, reserve_b)``."""

    reserve_a: int
    reserve_b: int

    def __post_init__(self) -> None:
        require_amount("reserve_a", self.reserve_a)
        require_amount("reserve_b", self.reserve_b)

    def __iter__(self):
        yield self.reserve_a
        yield self.reserve_b

    @property
    def k(self) -> int:
        """Constant product ``reserve_a * reserve_b``."""
        return self.reserve_a * self.reserve_b

    @property
    def is_empty(self) -> bool:
        return self.reserve_a == 0 and self.reserve_b == 0


class ReservePair:
    """
    Mutable reserve pair owned by a single engine.

    Both reserves stay within ``[0, max_amount]``. Mutations either apply to
    both sides or to neither.
    """

    def __init__(self, reserve_a: int = 0, reserve_b: int = 0, *, max_amount: int = MAX_UINT256) -> None:
        self._max_amount = max_amount
        self._reserve_a = require_amount("reserve_a", reserve_a, max_value=max_amount)
        self._reserve_b = require_amount("reserve_b", reserve_b, max_value=max_amount)

    @property
    def reserve_a(self) -> int:
        return self._reserve_a

    @property
    def reserve_b(self) -> int:
        return self._reserve_b

    def snapshot(self) -> Reserves:
        return Reserves(self._reserve_a, self._reserve_b)

    def increase(self, delta_a: int, delta_b: int) -> Reserves:
        """
        Add ``(delta_a, delta_b)`` to the reserves.

        Raises:
            Overflow: If either reserve would leave the amount range
        """
        new_a = checked_add(self._reserve_a, delta_a, max_value=self._max_amount)
        new_b = checked_add(self._reserve_b, delta_b, max_value=self._max_amount)
        self._reserve_a, self._reserve_b = new_a, new_b
        return self.snapshot()

    def decrease(self, delta_a: int, delta_b: int) -> Reserves:
        """
        Remove ``(delta_a, delta_b)`` from the reserves.

        Raises:
            InsufficientReserves: If either delta exceeds its reserve
        """
        require_amount("delta_a", delta_a)
        require_amount("delta_b", delta_b)
        if delta_a > self._reserve_a or delta_b > self._reserve_b:
            raise InsufficientReserves(
                f"cannot remove ({delta_a}, {delta_b}) from reserves "
                f"({self._reserve_a}, {self._reserve_b})"
            )
        self._reserve_a -= delta_a
        self._reserve_b -= delta_b
        return self.snapshot()

    def copy(self) -> "ReservePair":
        return ReservePair(self._reserve_a, self._reserve_b, max_amount=self._max_amount)

    def __repr__(self) -> str:
        return f"ReservePair(reserve_a={self._reserve_a}, reserve_b={self._reserve_b})"
