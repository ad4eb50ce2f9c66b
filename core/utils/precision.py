"""
Decimal-Place Precision Helpers

Markets report precision as a number of decimal places. Prices are rounded
half-up to that many places, amounts are truncated so an order never asks for
more than the caller holds.

Examples:
    >>> decimal_to_precision(10103.1949, ROUND, 2)
    '10103.19'
    >>> decimal_to_precision(3.219, TRUNCATE, 2)
    '3.21'
    >>> decimal_to_precision(5, ROUND, 0)
    '5'
"""

from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP
from typing import Optional, Union

ROUND = "round"
TRUNCATE = "truncate"


def decimal_to_precision(
    value: Union[int, float, str],
    rounding_mode: str,
    precision: Optional[int]
) -> str:
    """
    Format value with at most `precision` decimal places.

    Trailing zeros are stripped, so "1.50" comes back as "1.5". With precision
    None the value is returned as its plain decimal string.

    Raises:
        ValueError: If rounding_mode is unknown or value is not numeric
    """
    if rounding_mode not in (ROUND, TRUNCATE):
        raise ValueError(f"Unknown rounding mode: {rounding_mode}")

    try:
        number = Decimal(str(value))
    except ArithmeticError:
        raise ValueError(f"Not a number: {value!r}")
    if not number.is_finite():
        raise ValueError(f"Not a number: {value!r}")

    if precision is not None:
        quantum = Decimal(1).scaleb(-int(precision))
        mode = ROUND_HALF_UP if rounding_mode == ROUND else ROUND_DOWN
        number = number.quantize(quantum, rounding=mode)

    text = format(number, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return text
