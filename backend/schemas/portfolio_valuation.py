"""Pydantic schemas for the portfolio view and the historical price cache."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, field_validator

from schemas.option import Option

# Graph ranges, in months
GRAPH_RANGES = (1, 3, 6, 12, 60)


class HistoricalPoint(BaseModel):
    """One adjusted daily close."""

    date: date
    adjclose: Decimal


class HistoricalEntry(BaseModel):
    """Cached price history for one company, refreshed at most once a day."""

    code: str
    last_updated: datetime
    historical: list[HistoricalPoint]


class PortfolioFilter(BaseModel):
    """Label and account filters for the portfolio view.

    Every requested label must be present on a company. An empty account
    list means all accounts.
    """

    financial_status: list[Option] = []
    mining_status: list[Option] = []
    resources: list[Option] = []
    products: list[Option] = []
    recommendations: list[Option] = []
    monitor: list[Option] = []
    accounts: list[Option] = []

    @field_validator("accounts")
    @classmethod
    def accounts_have_ids(cls, v: list[Option]) -> list[Option]:
        missing = [o.label for o in v if not o.account_id]
        if missing:
            raise ValueError(f"Account filter options need an account_id: {missing}")
        return v


class GraphDataPoint(BaseModel):
    id: int
    date: datetime
    value: Decimal


class PortfolioTableRow(BaseModel):
    id: int
    code: str
    units: Decimal
    avg_buy_price: Decimal
    current_price: Decimal
    market_value: Decimal
    purchase_cost: Decimal
    daily_change_perc: Optional[Decimal] = None
    daily_profit: Optional[Decimal] = None
    profit_or_loss: Decimal
    profit_or_loss_perc: Optional[Decimal] = None
    first_purchase_date: Optional[datetime] = None
    last_purchase_date: Optional[datetime] = None
    weight_perc: Optional[Decimal] = None


class PortfolioText(BaseModel):
    """Headline figures, pre-formatted for display."""

    total_value: str
    daily_change: str
    daily_change_perc: str
    total_change: str
    total_change_perc: str


class PortfolioData(BaseModel):
    """Everything the portfolio page renders.

    ``graph`` is keyed by range in months (see ``GRAPH_RANGES``).
    """

    graph: dict[int, list[GraphDataPoint]]
    table: list[PortfolioTableRow]
    text: PortfolioText
    skipped: list[str] = []
