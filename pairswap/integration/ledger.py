"""
Token ledger collaborator.

The engine never holds token balances itself. It asks a `TokenLedger` to
move funds between a caller and the pool account, and treats a False return
as a refusal that aborts the whole operation.
"""

from __future__ import annotations

import logging
from typing import Protocol

from ..state.balances import Account, AssetId, BalanceTable

logger = logging.getLogger(__name__)


class TokenLedger(Protocol):
    def transfer_in(self, asset: AssetId, sender: Account, amount: int) -> bool:
        """Move ``amount`` of ``asset`` from ``sender`` into the pool."""
        ...

    def transfer_out(self, asset: AssetId, recipient: Account, amount: int) -> bool:
        """Move ``amount`` of ``asset`` from the pool to ``recipient``."""
        ...


class InMemoryTokenLedger:
    """
    Reference ledger backed by a BalanceTable.

    Each transfer is atomic: it moves the full amount or returns False and
    changes nothing.
    """

    def __init__(self, pool_account: Account = "pool", balances: BalanceTable | None = None) -> None:
        self.pool_account = pool_account
        self.balances = balances if balances is not None else BalanceTable()

    def mint(self, account: Account, asset: AssetId, amount: int) -> None:
        """Credit ``amount`` of ``asset`` to ``account`` out of thin air (test/faucet helper)."""
        if amount < 0:
            raise ValueError(f"mint amount must be non-negative: {amount}")
        self.balances.add(account, asset, amount)

    def balance_of(self, account: Account, asset: AssetId) -> int:
        return self.balances.get(account, asset)

    def transfer_in(self, asset: AssetId, sender: Account, amount: int) -> bool:
        ok = self.balances.move(asset, sender, self.pool_account, amount)
        if not ok:
            logger.warning(
                "transfer_in refused: %s has %d %s, needs %d",
                sender,
                self.balances.get(sender, asset),
                asset,
                amount,
            )
        return ok

    def transfer_out(self, asset: AssetId, recipient: Account, amount: int) -> bool:
        ok = self.balances.move(asset, self.pool_account, recipient, amount)
        if not ok:
            logger.warning("transfer_out refused: pool cannot cover %d %s", amount, asset)
        return ok
