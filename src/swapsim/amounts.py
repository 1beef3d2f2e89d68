"""Exact conversion from human-readable amounts to atomic units."""

import re
from decimal import Decimal
from typing import Union

from swapsim.errors import ConfigError

_DIGITS = re.compile(r"[0-9]+")


def to_atomic_amount(ui_amount: Union[str, int, float, Decimal], decimals: int) -> int:
    """Convert a human amount into atomic units without floating point.

    Excess fractional digits are truncated, never rounded.

    Args:
        ui_amount: Amount as entered by the operator (e.g. "1.5")
        decimals: Token decimals (e.g. 9 for SOL)

    Returns:
        Atomic amount, e.g. ("1.5", 9) -> 1500000000

    Raises:
        ConfigError: If the amount is not a plain non-negative decimal
    """
    if decimals < 0:
        raise ConfigError(f"Decimals must be non-negative, got {decimals}")

    if isinstance(ui_amount, str):
        text = ui_amount.strip()
    elif isinstance(ui_amount, float):
        # str() gives the shortest repr, 0.3 -> "0.3"
        text = format(Decimal(str(ui_amount)), "f")
    else:
        # Plain positional notation, Decimal("1E+3") would otherwise render as "1E+3"
        text = format(Decimal(ui_amount), "f")

    whole, _, fraction = text.partition(".")
    if not (whole or fraction):
        raise ConfigError(f"Invalid amount {ui_amount!r}: expected a non-negative decimal number")
    for part in (whole, fraction):
        if part and not _DIGITS.fullmatch(part):
            raise ConfigError(f"Invalid amount {ui_amount!r}: expected a non-negative decimal number")

    fraction = (fraction + "0" * decimals)[:decimals]
    combined = (whole + fraction).lstrip("0") or "0"
    return int(combined)
