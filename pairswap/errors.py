"""Exception types for the pairswap engine.

Caller-facing failures derive from ``AmmError``. A broken post-swap invariant is
an engine defect and is raised as ``InvariantViolation`` instead.
"""

from __future__ import annotations


class AmmError(Exception):
    """Base class for errors caused by the request or the pool state."""


class ZeroAmount(AmmError):
    """Raised when a positive quantity is required but zero was given or produced."""


class InsufficientReserves(AmmError):
    """Raised when a withdrawal or quote needs more than the pool holds."""


class InsufficientShares(AmmError):
    """Raised when a burn exceeds the provider's share balance."""

    def __init__(self, provider: str, requested: int, available: int) -> None:
        self.provider = provider
        self.requested = requested
        self.available = available
        super().__init__(
            f"not enough liquidity: {provider} holds {available} shares, requested {requested}"
        )


class Overflow(AmmError):
    """Raised when an amount leaves the representable range."""


class TransferFailed(AmmError):
    """Raised when the token ledger refuses a transfer."""

    def __init__(self, asset: str, account: str, amount: int, direction: str) -> None:
        self.asset = asset
        self.account = account
        self.amount = amount
        self.direction = direction
        super().__init__(f"transfer {direction} refused: {amount} {asset} for {account}")


class SlippageExceeded(AmmError):
    """Raised when a swap would pay out less than the caller's minimum."""

    def __init__(self, amount_out: int, min_amount_out: int) -> None:
        self.amount_out = amount_out
        self.min_amount_out = min_amount_out
        super().__init__(f"amount_out ({amount_out}) < min_amount_out ({min_amount_out})")


class InvariantViolation(RuntimeError):
    """Raised when a state transition breaks the constant-product invariant."""

    def __init__(self, k_before: int, k_after: int) -> None:
        self.k_before = k_before
        self.k_after = k_after
        super().__init__(f"invariant violation: k_after ({k_after}) < k_before ({k_before})")


class EngineHalted(RuntimeError):
    """Raised by every operation on an engine that recorded an invariant violation."""


class ReentrantOperation(RuntimeError):
    """Raised when a mutating call is made from inside another engine operation."""
