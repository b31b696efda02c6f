"""API route handlers."""
from . import accounts, companies, options, portfolio, settings, trades

__all__ = ["accounts", "companies", "options", "portfolio", "settings", "trades"]
