"""Command-line entry point.

    pairswap quote --reserve-in 100 --reserve-out 200 --amount-in 10
    pairswap quote --reserve-in 100 --reserve-out 200 --amount-out 15 --exact-out
    pairswap simulate --config pool.yaml
"""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from .config import AmmConfig, load_config
from .core.cpmm import swap_exact_in, swap_exact_out
from .errors import AmmError
from .integration.amm_engine import AmmEngine
from .integration.events import LoggingEventSink
from .integration.ledger import InMemoryTokenLedger


def _cmd_quote(args: argparse.Namespace) -> int:
    fee_bps = args.fee_bps
    if args.exact_out:
        if args.amount_out is None:
            print("[pairswap] --exact-out requires --amount-out")
            return 2
        amount_in, (new_in, new_out) = swap_exact_out(
            reserve_in=args.reserve_in,
            reserve_out=args.reserve_out,
            amount_out=args.amount_out,
            fee_bps=fee_bps,
        )
        print(f"[pairswap] amount_in={amount_in} amount_out={args.amount_out} fee_bps={fee_bps}")
    else:
        if args.amount_in is None:
            print("[pairswap] quote requires --amount-in")
            return 2
        amount_out, (new_in, new_out) = swap_exact_in(
            reserve_in=args.reserve_in,
            reserve_out=args.reserve_out,
            amount_in=args.amount_in,
            fee_bps=fee_bps,
        )
        print(f"[pairswap] amount_in={args.amount_in} amount_out={amount_out} fee_bps={fee_bps}")
    print(f"[pairswap] reserves after: reserve_in={new_in} reserve_out={new_out}")
    print(f"[pairswap] k: {args.reserve_in * args.reserve_out} -> {new_in * new_out}")
    return 0


def _print_pool(engine: AmmEngine, label: str) -> None:
    r = engine.get_reserves()
    print(
        f"[pairswap] {label}: reserves=({r.reserve_a}, {r.reserve_b}) "
        f"k={r.k} price={engine.get_price()} shares={engine.total_liquidity()}"
    )


def _cmd_simulate(args: argparse.Namespace) -> int:
    config = load_config(args.config) if args.config else AmmConfig()
    ledger = InMemoryTokenLedger(pool_account=config.pool_account)
    engine = AmmEngine(ledger, config, sink=LoggingEventSink())
    lp, trader = "lp", "trader"
    ledger.mint(lp, config.asset_a, args.deposit_a)
    ledger.mint(lp, config.asset_b, args.deposit_b)
    ledger.mint(trader, config.asset_a, args.swap_in * args.swaps)

    engine.add_liquidity(lp, args.deposit_a, args.deposit_b)
    _print_pool(engine, "after deposit")

    for i in range(args.swaps):
        ev = engine.swap_a_for_b(trader, args.swap_in)
        _print_pool(engine, f"after swap {i + 1} (out={ev.amount_out})")

    removed = engine.remove_liquidity(lp, engine.liquidity(lp))
    _print_pool(engine, "after withdraw")
    print(
        f"[pairswap] lp redeemed ({removed.amount_a}, {removed.amount_b}) "
        f"for deposit ({args.deposit_a}, {args.deposit_b})"
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pairswap", description="Constant-product AMM engine")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...)")
    sub = parser.add_subparsers(dest="command", required=True)

    q = sub.add_parser("quote", help="Quote a single swap against given reserves")
    q.add_argument("--reserve-in", type=int, required=True)
    q.add_argument("--reserve-out", type=int, required=True)
    q.add_argument("--amount-in", type=int)
    q.add_argument("--amount-out", type=int)
    q.add_argument("--exact-out", action="store_true", help="Quote the input needed for --amount-out")
    q.add_argument("--fee-bps", type=int, default=AmmConfig().fee_bps)
    q.set_defaults(func=_cmd_quote)

    s = sub.add_parser("simulate", help="Deposit, swap and withdraw against an in-memory ledger")
    s.add_argument("--config", default="", help="YAML config file")
    s.add_argument("--deposit-a", type=int, default=100 * 10**18)
    s.add_argument("--deposit-b", type=int, default=200 * 10**18)
    s.add_argument("--swap-in", type=int, default=10 * 10**18)
    s.add_argument("--swaps", type=int, default=2)
    s.set_defaults(func=_cmd_simulate)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    try:
        return args.func(args)
    except (AmmError, ValueError, TypeError) as exc:
        print(f"[pairswap] FAIL: {type(exc).__name__}: {exc}")
        return 1
