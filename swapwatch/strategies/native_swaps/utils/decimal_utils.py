"""
Exact decimal arithmetic for native-asset amounts.
"""
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Union

from web3 import Web3

# Enough significant digits for any uint256 amount carried with 18 decimals
PRECISION = 100

Amount = Union[int, str, Decimal]


def to_decimal(value: Amount) -> Decimal:
    """
    Convert an integer, string or Decimal into a Decimal without rounding.

    Floats are refused: they already lost precision before reaching us.
    """
    if isinstance(value, float):
        raise TypeError("float amounts are not accepted, pass int, str or Decimal")
    return Decimal(value)


def from_wei(value: int) -> Decimal:
    """Convert a wei amount to native units (18 decimals)."""
    return Decimal(Web3.from_wei(value, "ether"))


def add(left: Amount, right: Amount) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = PRECISION
        return to_decimal(left) + to_decimal(right)


def divide(numerator: Amount, denominator: Amount) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = PRECISION
        return to_decimal(numerator) / to_decimal(denominator)


def round_places(value: Amount, places: int = 2) -> Decimal:
    """Round half-up to a fixed number of decimal places."""
    with localcontext() as ctx:
        ctx.prec = PRECISION
        return to_decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
