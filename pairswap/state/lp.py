"""
LP share balance tracking for the pool.

Shares are tracked per provider, separately from asset balances.
"""

from __future__ import annotations

from typing import Dict, List

from ..errors import InsufficientShares

# Type alias
Provider = str


class LPTable:
    """
    Share table mapping provider -> share balance, plus the running total.

    Notes:
    - Share balances are always non-negative.
    - A provider entry is created on first credit and kept at zero after a
      full withdrawal, so ``providers()`` lists everyone who ever deposited.
    - ``total`` always equals the sum of all entries.
    """

    def __init__(self) -> None:
        self._balances: Dict[Provider, int] = {}
        self._total = 0

    @property
    def total(self) -> int:
        return self._total

    def get(self, provider: Provider) -> int:
        """Get the share balance for ``provider``. Returns 0 if not found."""
        return self._balances.get(provider, 0)

    def credit(self, provider: Provider, amount: int) -> None:
        """Add ``amount`` shares to ``provider`` and to the total."""
        if amount < 0:
            raise ValueError(f"credit must be non-negative: {amount}")
        self._balances[provider] = self.get(provider) + amount
        self._total += amount

    def debit(self, provider: Provider, amount: int) -> None:
        """Remove ``amount`` shares from ``provider`` and from the total."""
        if amount < 0:
            raise ValueError(f"debit must be non-negative: {amount}")
        current = self.get(provider)
        if amount > current:
            raise InsufficientShares(provider, amount, current)
        self._balances[provider] = current - amount
        self._total -= amount

    def providers(self) -> List[Provider]:
        """Known providers in sorted order."""
        return sorted(self._balances)

    def verify_consistent(self) -> bool:
        """Verify balances are non-negative and sum to the total."""
        return (
            all(amount >= 0 for amount in self._balances.values())
            and sum(self._balances.values()) == self._total
        )

    def copy(self) -> "LPTable":
        out = LPTable()
        out._balances = dict(self._balances)
        out._total = self._total
        return out

    def __repr__(self) -> str:
        return f"LPTable({len(self._balances)} providers, total={self._total})"
