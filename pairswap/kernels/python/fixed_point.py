"""
Fixed-point integer kernel.

Amounts are unsigned integers bounded by ``MAX_UINT256``. Products of two
amounts are allowed to use up to 512 bits before the division brings them back
into range, which is the "extended precision" the swap and LP formulas rely on.

Rounding rules:
- ``mul_div`` rounds down (floor).
- ``mul_div_up`` rounds up (ceil).
- ``isqrt`` returns ``floor(sqrt(x))``.
"""

from __future__ import annotations

from ...errors import Overflow


MAX_UINT256 = (1 << 256) - 1
MAX_UINT512 = (1 << 512) - 1


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def require_amount(name: str, value: int, *, max_value: int = MAX_UINT256) -> int:
    """Validate an unsigned amount and return it unchanged."""
    _require_int(name, value)
    if value < 0:
        raise ValueError(f"{name} must be non-negative: {value}")
    if value > max_value:
        raise Overflow(f"{name} exceeds {max_value.bit_length()}-bit range: {value}")
    return value


def checked_add(a: int, b: int, *, max_value: int = MAX_UINT256) -> int:
    require_amount("a", a, max_value=max_value)
    require_amount("b", b, max_value=max_value)
    out = a + b
    if out > max_value:
        raise Overflow(f"addition overflow: {a} + {b}")
    return out


def checked_sub(a: int, b: int) -> int:
    require_amount("a", a)
    require_amount("b", b)
    if b > a:
        raise Overflow(f"subtraction underflow: {a} - {b}")
    return a - b


def checked_mul(a: int, b: int, *, max_value: int = MAX_UINT256) -> int:
    require_amount("a", a, max_value=max_value)
    require_amount("b", b, max_value=max_value)
    out = a * b
    if out > max_value:
        raise Overflow(f"multiplication overflow: {a} * {b}")
    return out


def _wide_product(a: int, b: int, c: int) -> int:
    require_amount("a", a)
    require_amount("b", b)
    require_amount("c", c)
    if c == 0:
        raise ZeroDivisionError("mul_div denominator is zero")
    product = a * b
    if product > MAX_UINT512:
        raise Overflow(f"intermediate product exceeds 512 bits: {a} * {b}")
    return product


def mul_div(a: int, b: int, c: int) -> int:
    """
    Compute ``floor(a * b / c)`` with a 512-bit intermediate.

    Raises Overflow if the result does not fit in 256 bits.
    """
    out = _wide_product(a, b, c) // c
    if out > MAX_UINT256:
        raise Overflow(f"mul_div result exceeds 256 bits: {a} * {b} / {c}")
    return out


def mul_div_up(a: int, b: int, c: int) -> int:
    """Compute ``ceil(a * b / c)`` with a 512-bit intermediate."""
    product = _wide_product(a, b, c)
    out = (product + c - 1) // c
    if out > MAX_UINT256:
        raise Overflow(f"mul_div_up result exceeds 256 bits: {a} * {b} / {c}")
    return out


def isqrt(x: int) -> int:
    """
    Integer square root by Newton's method with truncating division.

    Starts from a power of two above the root so the iterates decrease
    monotonically; stops at the first non-decreasing step.
    """
    require_amount("x", x, max_value=MAX_UINT512)
    if x == 0:
        return 0
    guess = 1 << ((x.bit_length() + 1) // 2)
    while True:
        nxt = (guess + x // guess) // 2
        if nxt >= guess:
            return guess
        guess = nxt
