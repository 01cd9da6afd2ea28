"""
Domain: Fixed-width unsigned integer helpers (pure).

Schedule fields keep the widths of the ledger they mirror:
- prices and price steps are 96-bit
- quantities, caps, intervals and times are 32-bit
- total prices are 128-bit (32-bit quantity x 96-bit price)

Python integers never wrap, so width limits are enforced explicitly:
- configuration values outside their width raise ValueOutOfRange
- computed values outside their width raise PriceArithmeticError
"""

from __future__ import annotations

from .errors import PriceArithmeticError, ValueOutOfRange

UINT32_BITS = 32
UINT96_BITS = 96
UINT128_BITS = 128

UINT32_MAX = (1 << UINT32_BITS) - 1
UINT96_MAX = (1 << UINT96_BITS) - 1
UINT128_MAX = (1 << UINT128_BITS) - 1


def uint_max(bits: int) -> int:
    return (1 << bits) - 1


def require_uint(name: str, value: int, bits: int) -> int:
    """
    Validate a configuration value against its declared unsigned width.

    Booleans are rejected even though they are ints.
    """

    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueOutOfRange(name, value, bits)
    if value < 0 or value > uint_max(bits):
        raise ValueOutOfRange(name, value, bits)
    return value


def checked_sub(a: int, b: int, bits: int, *, what: str = "value") -> int:
    result = a - b
    if result < 0:
        raise PriceArithmeticError(f"{what} underflow: {a} - {b} is negative")
    if result > uint_max(bits):
        raise PriceArithmeticError(f"{what} overflow: {a} - {b} exceeds {bits} bits")
    return result


def checked_mul(a: int, b: int, bits: int, *, what: str = "value") -> int:
    result = a * b
    if result < 0 or result > uint_max(bits):
        raise PriceArithmeticError(f"{what} overflow: {a} * {b} exceeds {bits} bits")
    return result


__all__ = [
    "UINT32_BITS",
    "UINT96_BITS",
    "UINT128_BITS",
    "UINT32_MAX",
    "UINT96_MAX",
    "UINT128_MAX",
    "uint_max",
    "require_uint",
    "checked_sub",
    "checked_mul",
]
