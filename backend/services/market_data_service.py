"""Market data service: quotes and cached price history for companies."""

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import date, datetime
from typing import Optional

from sqlalchemy.orm import Session

from config import settings
from integrations.market_data_protocol import MarketDataProvider, PriceResult, Quote
from schemas.portfolio_valuation import HistoricalEntry, HistoricalPoint
from services.exceptions import QuoteUnavailableError, StoreWriteError
from services.repository import PortfolioRepository
from utils.dates import add_months, is_monday, is_same_day, years_ago
from utils.ticker import from_symbol, to_symbol

logger = logging.getLogger(__name__)

# Daily points are kept for this many recent months; older history keeps Mondays only.
DAILY_HISTORY_MONTHS = 6


def thin_history(prices: list[PriceResult], today: date) -> list[HistoricalPoint]:
    """Keep recent closes daily and older closes weekly (Mondays)."""
    cutoff = add_months(today, -DAILY_HISTORY_MONTHS)
    return [
        HistoricalPoint(date=p.price_date, adjclose=p.close_price)
        for p in sorted(prices, key=lambda p: p.price_date)
        if p.price_date > cutoff or is_monday(p.price_date)
    ]


class MarketDataService:
    """Orchestrates quote and history fetching via a pluggable provider.

    Works in bare exchange codes ("CBA"); the configured exchange suffix is
    added before calling the provider.
    """

    def __init__(
        self,
        provider: Optional[MarketDataProvider] = None,
        suffix: Optional[str] = None,
        max_workers: Optional[int] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """Initialize with an optional provider for dependency injection.

        Args:
            provider: Market data provider. If None, a YahooFinanceClient
                     is created on first use.
            suffix: Exchange suffix; defaults to settings.EXCHANGE_SUFFIX.
            max_workers: Cap on concurrent history requests; defaults to
                        settings.HISTORY_CONCURRENCY.
            clock: Source of "now", used for cache staleness.
        """
        self._provider = provider
        self.suffix = settings.EXCHANGE_SUFFIX if suffix is None else suffix
        self.max_workers = max_workers or settings.HISTORY_CONCURRENCY
        self.clock = clock

    @property
    def provider(self) -> MarketDataProvider:
        """Get the market data provider, creating if not provided."""
        if self._provider is None:
            from integrations.yahoo_finance_client import YahooFinanceClient

            self._provider = YahooFinanceClient()
        return self._provider

    def get_quotes(self, codes: list[str]) -> dict[str, Quote]:
        """Fetch quotes for all codes in one batched provider call.

        Returns a dict keyed by code. A failed batch returns ``{}``.
        """
        if not codes:
            return {}

        symbols = [to_symbol(code, self.suffix) for code in codes]
        try:
            quotes = self.provider.get_quotes(symbols)
        except Exception:
            logger.warning("Quote request failed for %s", symbols, exc_info=True)
            return {}

        return {from_symbol(symbol, self.suffix): quote for symbol, quote in quotes.items()}

    def lookup_company(self, code: str) -> tuple[str, Quote]:
        """Look a code up on the quote feed.

        Returns:
            (company name, quote)

        Raises:
            QuoteUnavailableError: no price or no name for the code.
        """
        quote = self.get_quotes([code]).get(code)
        if quote is None or quote.price is None:
            raise QuoteUnavailableError(code, "Company not found")

        name = self.provider.get_company_name(to_symbol(code, self.suffix))
        if not name:
            raise QuoteUnavailableError(code, "Company not found")
        return name, quote

    def _fetch_history(self, code: str, start_date: date) -> tuple[str, list[PriceResult]]:
        symbol = to_symbol(code, self.suffix)
        return code, self.provider.get_price_history(symbol, start_date, "1d")

    def get_historical_data(self, db: Session, codes: list[str]) -> dict[str, HistoricalEntry]:
        """Return cached price history for ``codes``, refreshing stale entries.

        An entry is refreshed when it is missing or was not updated today.
        Refreshes run concurrently (at most ``max_workers`` at once); each
        request succeeds or fails on its own, and a failed refresh keeps
        whatever was cached before.

        Returns:
            Dict of code -> HistoricalEntry for every code with any history.
        """
        now = self.clock()
        historicals = PortfolioRepository.get_historicals(db)
        by_code = {entry.code: entry for entry in historicals}

        need_update = [
            code for code in dict.fromkeys(codes)
            if code not in by_code or not is_same_day(by_code[code].last_updated, now)
        ]

        if need_update:
            start_date = years_ago(now.date(), settings.HISTORY_YEARS)
            updated = 0

            with ThreadPoolExecutor(
                max_workers=min(self.max_workers, len(need_update)),
                thread_name_prefix="history",
            ) as executor:
                futures = [
                    executor.submit(self._fetch_history, code, start_date)
                    for code in need_update
                ]
                for future in as_completed(futures):
                    try:
                        code, prices = future.result()
                    except Exception as e:
                        logger.warning("A historical request could not be fulfilled: %s", e)
                        continue
                    if not prices:
                        logger.warning("No historical data returned for %s", code)
                        continue

                    entry = HistoricalEntry(
                        code=code,
                        last_updated=now,
                        historical=thin_history(prices, now.date()),
                    )
                    if code in by_code:
                        by_code[code].last_updated = entry.last_updated
                        by_code[code].historical = entry.historical
                    else:
                        by_code[code] = entry
                        historicals.append(entry)
                    updated += 1
                    logger.info("Updated historical data for %s", to_symbol(code, self.suffix))

            if updated:
                try:
                    PortfolioRepository.save_historicals(db, historicals)
                except StoreWriteError:
                    logger.warning("Could not save refreshed historical data", exc_info=True)

        return {code: by_code[code] for code in codes if code in by_code}
