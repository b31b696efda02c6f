"""Utility functions for handling exchange codes.

Companies are stored under their bare exchange code ("CBA"); the market
data provider wants an exchange-qualified symbol ("CBA.AX").
"""

import re

_CODE_PATTERN = re.compile(r"^[a-zA-Z0-9]{3,5}$")


def normalize_code(code: str) -> str:
    """Strip whitespace and uppercase an exchange code."""
    return code.strip().upper()


def is_valid_code(code: str) -> bool:
    """Exchange codes are 3-5 alphanumeric characters."""
    return bool(_CODE_PATTERN.match(code.strip()))


def to_symbol(code: str, suffix: str) -> str:
    """Map a bare code to the provider symbol, e.g. ``CBA`` -> ``CBA.AX``."""
    return f"{normalize_code(code)}{suffix}"


def from_symbol(symbol: str, suffix: str) -> str:
    """Inverse of :func:`to_symbol`; symbols without the suffix pass through."""
    symbol = symbol.upper()
    suffix = suffix.upper()
    if suffix and symbol.endswith(suffix):
        return symbol[: -len(suffix)]
    return symbol
