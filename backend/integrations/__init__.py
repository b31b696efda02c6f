"""External API integrations.

This package contains:
- Market data protocol: Common interface for quote and price-history providers
- Yahoo Finance client: yfinance-backed implementation
"""

from integrations.market_data_protocol import MarketDataProvider, PriceResult, Quote

__all__ = ["MarketDataProvider", "PriceResult", "Quote"]
