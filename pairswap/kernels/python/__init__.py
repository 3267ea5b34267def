"""
Production Python kernels.

These modules are designed to be:
- deterministic (integer-only, no floating point),
- overflow-checked against the uint256 amount range,
- small surface-area (pure functions, typed results).
"""
