"""Display formatting and decimal parsing helpers.

Values are stored at rest as decimal strings; these helpers are the only
place rounding happens.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """Parse a stored decimal string (or number) into a Decimal.

    Floats go through ``str`` first so ``0.1`` becomes ``Decimal("0.1")``.

    Raises:
        ValueError: if the value cannot be parsed.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        value = str(value)
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Not a decimal value: {value!r}") from e


def _quantize(value: Decimal, decimals: int) -> Decimal:
    return value.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)


def currency_format(value: Decimal | float | None, decimals: int = 2) -> str:
    """Currency formatter.

    Examples:
        12.3 -> "$12.30"
        -12.3 -> "-$12.30"
        1234.5 -> "$1,234.50"
    """
    if value is None:
        return "-"
    amount = _quantize(to_decimal(value), decimals)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.{decimals}f}"


def percent_format(value: Decimal | float | None, decimals: int = 2) -> str:
    """Percentage formatter: 12.3 -> "12.30%"."""
    if value is None:
        return "-"
    return f"{_quantize(to_decimal(value), decimals):.{decimals}f}%"


def change_format(value: Decimal | float | None, decimals: int = 2) -> str:
    """Change formatter: 12.3 -> "+12.30", -12.3 -> "-12.30"."""
    if value is None:
        return "-"
    amount = _quantize(to_decimal(value), decimals)
    if amount < 0:
        return f"{amount:.{decimals}f}"
    return f"+{abs(amount):.{decimals}f}"
