"""Portfolio valuation service: rebuilds portfolio value over time.

Historical unit counts come from the append-only buy/sell histories, never
from the open lots (which only describe the present). Today's figures use
live quotes; earlier dates use cached adjusted closes.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from integrations.market_data_protocol import Quote
from schemas.company import Company
from schemas.option import Option
from schemas.portfolio_valuation import (
    GRAPH_RANGES,
    GraphDataPoint,
    HistoricalEntry,
    PortfolioData,
    PortfolioFilter,
    PortfolioTableRow,
    PortfolioText,
)
from services.market_data_service import MarketDataService
from services.repository import OPTION_KEYS, PortfolioRepository
from utils.dates import add_months, day_before, is_monday
from utils.format import change_format, currency_format, percent_format

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Ranges (in months) drawn from daily points; longer ranges use Mondays only.
DAILY_RANGES = (1, 3, 6)


@dataclass
class ValuedCompany:
    """A company with everything needed to value it."""

    company: Company
    quote: Quote
    history: HistoricalEntry


@dataclass
class TableTotals:
    """Running totals across table rows."""

    value: Decimal = ZERO
    previous_value: Decimal = ZERO
    cost: Decimal = ZERO
    rows: list[PortfolioTableRow] = field(default_factory=list)


def units_held_at(company: Company, account_ids: list[str], at: datetime) -> Decimal:
    """Units held strictly before ``at``, from the buy and sell histories.

    An empty ``account_ids`` counts every account.
    """
    def matches(account_id: str) -> bool:
        return not account_ids or account_id in account_ids

    bought = sum(
        (e.quantity for e in company.buy_history if matches(e.account_id) and e.date < at),
        ZERO,
    )
    sold = sum(
        (e.quantity for e in company.sell_history if matches(e.account_id) and e.sell_date < at),
        ZERO,
    )
    return bought - sold


def _has_labels(requested: list[Option], present: list[Option]) -> bool:
    present_labels = {option.label for option in present}
    return all(option.label in present_labels for option in requested)


def account_ids_for(portfolio_filter: PortfolioFilter) -> list[str]:
    return [o.account_id for o in portfolio_filter.accounts]


def filter_companies(
    companies: list[Company], portfolio_filter: PortfolioFilter
) -> list[Company]:
    """Companies carrying every requested label in every category.

    With an account filter, a company must also have an open lot in at
    least one of the requested accounts.
    """
    account_ids = account_ids_for(portfolio_filter)
    return [
        company
        for company in companies
        if all(
            _has_labels(getattr(portfolio_filter, key), getattr(company, key))
            for key in OPTION_KEYS
        )
        and (
            not account_ids
            or any(lot.account_id in account_ids for lot in company.current_shares)
        )
    ]


def empty_portfolio(now: datetime) -> PortfolioData:
    """Result shape when no company qualifies."""
    return PortfolioData(
        graph={
            months: [GraphDataPoint(id=1, date=now, value=ZERO)]
            for months in GRAPH_RANGES
        },
        table=[],
        text=PortfolioText(
            total_value=currency_format(ZERO),
            daily_change=change_format(ZERO),
            daily_change_perc=percent_format(ZERO),
            total_change=change_format(ZERO),
            total_change_perc=percent_format(ZERO),
        ),
        skipped=[],
    )


def _percent_of(numerator: Decimal, denominator: Decimal) -> Optional[Decimal]:
    if denominator == 0:
        return None
    return numerator / denominator * HUNDRED


def _abs_percent(value: Optional[Decimal]) -> str:
    return percent_format(abs(value) if value is not None else None)


def build_graph(
    valued: list[ValuedCompany], account_ids: list[str], now: datetime
) -> dict[int, list[GraphDataPoint]]:
    """Combined portfolio value per day, sliced into display ranges.

    Past days use each company's adjusted close; today uses the live quote.
    """
    today = now.date()
    combined: dict[date, Decimal] = {}

    for item in valued:
        for point in item.history.historical:
            if point.date == today:
                continue
            at = datetime.combine(point.date, time.min)
            value = units_held_at(item.company, account_ids, at) * point.adjclose
            combined[point.date] = combined.get(point.date, ZERO) + value

    today_value = ZERO
    for item in valued:
        today_value += units_held_at(item.company, account_ids, now) * item.quote.price
    combined[today] = combined.get(today, ZERO) + today_value

    points = [
        GraphDataPoint(
            id=index,
            date=now if day == today else datetime.combine(day, time.min),
            value=combined[day],
        )
        for index, day in enumerate(sorted(combined), start=1)
    ]

    graph: dict[int, list[GraphDataPoint]] = {}
    for months in DAILY_RANGES:
        start = add_months(today, -months)
        graph[months] = [p for p in points if p.date.date() > start]

    year_start = add_months(today, -12)
    graph[12] = [
        p for p in points
        if (is_monday(p.date) and p.date.date() > year_start) or p.date.date() == today
    ]
    graph[60] = [p for p in points if is_monday(p.date) or p.date.date() == today]
    return graph


def build_table(
    valued: list[ValuedCompany], account_ids: list[str], now: datetime
) -> TableTotals:
    """One row per company with units currently held in the filtered accounts."""
    totals = TableTotals()
    yesterday = day_before(now)

    for item in valued:
        company, quote = item.company, item.quote
        lots = [
            lot for lot in company.current_shares
            if not account_ids or lot.account_id in account_ids
        ]
        units = sum((lot.quantity for lot in lots), ZERO)
        if units == 0:
            continue

        price_paid = sum((lot.quantity * lot.unit_price for lot in lots), ZERO)
        purchase_cost = sum(
            (lot.quantity * lot.unit_price + lot.brokerage + lot.gst for lot in lots),
            ZERO,
        )
        market_value = quote.price * units
        profit_or_loss = market_value - purchase_cost

        previous_units = units_held_at(company, account_ids, yesterday)
        totals.previous_value += quote.previous_close * previous_units
        totals.value += market_value
        totals.cost += purchase_cost

        totals.rows.append(
            PortfolioTableRow(
                id=len(totals.rows) + 1,
                code=company.code,
                units=units,
                avg_buy_price=price_paid / units,
                current_price=quote.price,
                market_value=market_value,
                purchase_cost=purchase_cost,
                daily_change_perc=quote.change_percent,
                daily_profit=units * (quote.price - quote.previous_close),
                profit_or_loss=profit_or_loss,
                profit_or_loss_perc=_percent_of(profit_or_loss, purchase_cost),
                first_purchase_date=min(lot.date for lot in lots),
                last_purchase_date=max(lot.date for lot in lots),
            )
        )

    # Weights need the final combined value
    for row in totals.rows:
        row.weight_perc = _percent_of(row.market_value, totals.value)

    return totals


class PortfolioValuationService:
    """Builds the portfolio page: value graph, holdings table and headline text."""

    def __init__(self, market_data: Optional[MarketDataService] = None):
        self.market_data = market_data or MarketDataService()

    def _collect(
        self, db: Session, companies: list[Company]
    ) -> tuple[list[ValuedCompany], list[str]]:
        """Fetch quotes and history, dropping companies missing either."""
        codes = [company.code for company in companies]
        quotes = self.market_data.get_quotes(codes)
        historicals = self.market_data.get_historical_data(db, codes)

        valued: list[ValuedCompany] = []
        skipped: list[str] = []
        for company in companies:
            quote = quotes.get(company.code)
            if (
                quote is None
                or quote.price is None
                or quote.previous_close is None
                or quote.change_percent is None
            ):
                logger.warning("Quote/market price not found for %s", company.code)
                skipped.append(company.code)
                continue
            history = historicals.get(company.code)
            if history is None:
                logger.warning("Could not find historical data for %s", company.code)
                skipped.append(company.code)
                continue
            valued.append(ValuedCompany(company=company, quote=quote, history=history))

        return valued, skipped

    def get_portfolio_data(
        self,
        db: Session,
        portfolio_filter: PortfolioFilter,
        now: Optional[datetime] = None,
    ) -> PortfolioData:
        """Value every company matching the filter.

        Companies without a usable quote or price history are skipped and
        listed in ``skipped``; they never fail the batch.
        """
        now = now or self.market_data.clock()
        companies = filter_companies(
            PortfolioRepository.get_companies(db), portfolio_filter
        )
        if not companies:
            return empty_portfolio(now)

        account_ids = account_ids_for(portfolio_filter)
        valued, skipped = self._collect(db, companies)

        graph = build_graph(valued, account_ids, now)
        totals = build_table(valued, account_ids, now)

        daily_change = totals.value - totals.previous_value
        total_change = totals.value - totals.cost

        logger.info(
            "Valued %d of %d companies (%d skipped)",
            len(valued),
            len(companies),
            len(skipped),
        )

        return PortfolioData(
            graph=graph,
            table=totals.rows,
            text=PortfolioText(
                total_value=currency_format(totals.value),
                daily_change=change_format(daily_change),
                daily_change_perc=_abs_percent(_percent_of(daily_change, totals.previous_value)),
                total_change=change_format(total_change),
                total_change_perc=_abs_percent(_percent_of(total_change, totals.cost)),
            ),
            skipped=skipped,
        )
