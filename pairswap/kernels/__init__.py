"""
Kernel layer.

This package groups the deterministic integer kernels used by the engine.
`pairswap/kernels/python/` holds the production Python kernels; the stateful
pieces in `pairswap/state/` and `pairswap/core/` call into them for every
amount computation.
"""
