"""Market data provider protocol definitions.

Defines the interface for quote and price-history providers.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Protocol


@dataclass
class PriceResult:
    """A single adjusted closing price for a symbol on a specific date."""

    symbol: str
    price_date: date  # Actual trading date
    close_price: Decimal  # Adjusted close
    source: str  # e.g., "yahoo"


@dataclass
class Quote:
    """Live quote data for one symbol.

    Any field the provider could not supply is None.
    """

    symbol: str
    price: Decimal | None
    previous_close: Decimal | None = None
    change_percent: Decimal | None = None


class MarketDataProvider(Protocol):
    """Protocol for market data providers.

    Implementations fetch quotes and price history from external sources.
    """

    @property
    def provider_name(self) -> str:
        """Return the provider name (e.g., 'yahoo')."""
        ...

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        """Fetch live quotes for several symbols in one batch.

        Returns:
            Dict mapping symbol to Quote. Symbols the provider could not
            quote are absent.
        """
        ...

    def get_company_name(self, symbol: str) -> str | None:
        """Return the listed company's long (or short) name, if known."""
        ...

    def get_price_history(
        self, symbol: str, start_date: date, interval: str = "1d"
    ) -> list[PriceResult]:
        """Fetch adjusted closing prices from ``start_date`` to today.

        Raises:
            ProviderError: the request failed or returned no data.
        """
        ...
