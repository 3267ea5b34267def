"""
Engine configuration.

`AmmConfig` is an immutable value validated on construction. It can be built
in code, from a plain mapping, or from a YAML file:

    fee_bps: 30
    asset_a: TKA
    asset_b: TKB
    pool_account: pool
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Union

import yaml

from .core.cpmm import DEFAULT_FEE_BPS
from .core.oracle import PRICE_SCALE
from .kernels.python.cpmm_swap import BPS_DENOM
from .kernels.python.fixed_point import MAX_UINT256


@dataclass(frozen=True)
class AmmConfig:
    # Swap fee in basis points of the gross input. It stays in the pool.
    fee_bps: int = DEFAULT_FEE_BPS

    # Asset identifiers passed to the token ledger.
    asset_a: str = "TKA"
    asset_b: str = "TKB"

    # Ledger account that holds the pool's funds.
    pool_account: str = "pool"

    # Fixed-point scale of get_price().
    price_scale: int = PRICE_SCALE

    # Upper bound for any single amount, reserve or share supply.
    max_amount: int = MAX_UINT256

    def __post_init__(self) -> None:
        for name in ("fee_bps", "price_scale", "max_amount"):
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
        if not (0 <= self.fee_bps < BPS_DENOM):
            raise ValueError(f"fee_bps must be in [0, {BPS_DENOM}): {self.fee_bps}")
        if self.price_scale <= 0:
            raise ValueError(f"price_scale must be positive: {self.price_scale}")
        if not (0 < self.max_amount <= MAX_UINT256):
            raise ValueError(f"max_amount must be in (0, 2**256 - 1]: {self.max_amount}")

        for name in ("asset_a", "asset_b", "pool_account"):
            v = getattr(self, name)
            if not isinstance(v, str) or not v.strip():
                raise ValueError(f"{name} must be a non-empty string")
        if self.asset_a == self.asset_b:
            raise ValueError(f"asset_a and asset_b must differ: {self.asset_a!r}")


def config_from_mapping(data: Mapping[str, Any]) -> AmmConfig:
    """Build an AmmConfig from a mapping, rejecting unknown keys."""
    if not isinstance(data, Mapping):
        raise TypeError("config must be a mapping")
    known = {f.name for f in fields(AmmConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"unknown config keys: {', '.join(unknown)}")
    return AmmConfig(**dict(data))


def load_config(path: Union[str, Path]) -> AmmConfig:
    """Load an AmmConfig from a YAML file. An empty file yields the defaults."""
    obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if obj is None:
        return AmmConfig()
    if not isinstance(obj, Mapping):
        raise TypeError("config YAML must be a mapping")
    return config_from_mapping(obj)
