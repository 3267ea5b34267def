"""
Per-account token balances for the in-memory ledger.

Keys are ``(account, asset)`` pairs; missing keys read as zero and zero
balances are dropped so the table stays sparse.
"""

from __future__ import annotations

from typing import Dict, Tuple

Account = str
AssetId = str


class BalanceTable:
    def __init__(self) -> None:
        self._balances: Dict[Tuple[Account, AssetId], int] = {}

    def get(self, account: Account, asset: AssetId) -> int:
        return self._balances.get((account, asset), 0)

    def set(self, account: Account, asset: AssetId, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"balance of {account}/{asset} cannot go negative: {amount}")
        if amount:
            self._balances[(account, asset)] = amount
        else:
            self._balances.pop((account, asset), None)

    def add(self, account: Account, asset: AssetId, delta: int) -> None:
        """Apply a signed ``delta``; raises ValueError if the result would be negative."""
        self.set(account, asset, self.get(account, asset) + delta)

    def subtract(self, account: Account, asset: AssetId, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"amount must be non-negative: {amount}")
        self.add(account, asset, -amount)

    def move(self, asset: AssetId, sender: Account, recipient: Account, amount: int) -> bool:
        """
        Move ``amount`` of ``asset`` from ``sender`` to ``recipient``.

        Returns False and leaves both balances alone if the sender is short.
        """
        if amount < 0:
            raise ValueError(f"amount must be non-negative: {amount}")
        if self.get(sender, asset) < amount:
            return False
        self.subtract(sender, asset, amount)
        self.add(recipient, asset, amount)
        return True

    def total_supply(self, asset: AssetId) -> int:
        return sum(amt for (_, a), amt in self._balances.items() if a == asset)

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"
