"""Yahoo Finance market data provider implementation."""

import logging
import math
from datetime import date
from decimal import Decimal

import pandas as pd
import yfinance as yf

from integrations.exceptions import ProviderConnectionError, ProviderDataError
from integrations.market_data_protocol import PriceResult, Quote

logger = logging.getLogger(__name__)


def _to_decimal(value) -> Decimal | None:
    """Convert a yfinance number to Decimal, mapping missing/NaN to None."""
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return Decimal(str(round(number, 6)))


class YahooFinanceClient:
    """Market data provider using Yahoo Finance (yfinance library)."""

    @property
    def provider_name(self) -> str:
        return "yahoo"

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        """Fetch last price and previous close for each symbol.

        One ``yf.download`` call covers the whole batch; the last two daily
        closes give the price and previous close. A symbol with no closes
        is logged and left out of the result.
        """
        if not symbols:
            return {}

        logger.info("Yahoo Finance: fetching quotes for %d symbols", len(symbols))

        try:
            df = yf.download(
                tickers=symbols,
                period="5d",
                interval="1d",
                auto_adjust=False,
                progress=False,
            )
        except Exception:
            logger.warning("yfinance quote batch failed for %s", symbols, exc_info=True)
            return {}

        if df is None or df.empty:
            logger.warning("yfinance returned no quote data for %s", symbols)
            return {}

        result: dict[str, Quote] = {}
        for symbol in symbols:
            closes = self._closes(df, symbol)
            if closes is None or closes.empty:
                logger.warning("No quote data for %s", symbol)
                continue

            price = _to_decimal(closes.iloc[-1])
            previous_close = _to_decimal(closes.iloc[-2]) if len(closes) > 1 else None

            change_percent = None
            if price is not None and previous_close:
                change_percent = (price - previous_close) / previous_close * Decimal("100")

            result[symbol] = Quote(
                symbol=symbol,
                price=price,
                previous_close=previous_close,
                change_percent=change_percent,
            )

        return result

    def get_company_name(self, symbol: str) -> str | None:
        try:
            info = yf.Ticker(symbol).info or {}
        except Exception:
            logger.warning("Failed to fetch company info for %s", symbol, exc_info=True)
            return None
        return info.get("longName") or info.get("shortName")

    def get_price_history(
        self, symbol: str, start_date: date, interval: str = "1d"
    ) -> list[PriceResult]:
        """Fetch adjusted closes from ``start_date`` up to the latest session.

        Raises:
            ProviderConnectionError: the download raised.
            ProviderDataError: no usable rows came back.
        """
        try:
            df = yf.download(
                tickers=symbol,
                start=start_date.isoformat(),
                interval=interval,
                auto_adjust=False,
                progress=False,
            )
        except Exception as e:
            raise ProviderConnectionError(
                f"yfinance download failed for {symbol}: {e}", self.provider_name
            ) from e

        if df is None or df.empty:
            raise ProviderDataError(f"No price history for {symbol}", self.provider_name)

        closes = self._adjusted_closes(df, symbol)
        if closes is None or closes.empty:
            raise ProviderDataError(
                f"No adjusted close column for {symbol}", self.provider_name
            )

        return [
            PriceResult(
                symbol=symbol,
                price_date=ts.date(),
                close_price=Decimal(str(round(float(price), 6))),
                source="yahoo",
            )
            for ts, price in closes.items()
        ]

    @staticmethod
    def _adjusted_closes(df: pd.DataFrame, symbol: str) -> pd.Series | None:
        """Pick the adjusted-close series, falling back to Close.

        Recent yfinance versions return (metric, symbol) MultiIndex columns
        even for a single ticker; older ones return flat columns.
        """
        for metric in ("Adj Close", "Close"):
            if isinstance(df.columns, pd.MultiIndex):
                if (metric, symbol) in df.columns:
                    return df[(metric, symbol)].dropna()
            elif metric in df.columns:
                return df[metric].dropna()
        return None

    @staticmethod
    def _closes(df: pd.DataFrame, symbol: str) -> pd.Series | None:
        if isinstance(df.columns, pd.MultiIndex):
            if ("Close", symbol) in df.columns:
                return df[("Close", symbol)].dropna()
            return None
        if "Close" in df.columns:
            return df["Close"].dropna()
        return None
