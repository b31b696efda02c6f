"""Pydantic schemas for the trade-lot ledger.

Quantities, prices and fees are Decimals in memory and serialize as
decimal strings at rest.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from schemas.option import Option


class Lot(BaseModel):
    """An open (unconsumed or partially consumed) purchase lot.

    ``quantity``, ``brokerage`` and ``gst`` shrink as the lot is sold down;
    ``unit_price`` and ``date`` never change.
    """

    account_id: str
    date: datetime
    quantity: Decimal
    unit_price: Decimal
    brokerage: Decimal
    gst: Decimal


class BuyHistoryEntry(BaseModel):
    """Immutable record of a purchase."""

    account_id: str
    date: datetime
    quantity: Decimal
    unit_price: Decimal
    brokerage: Decimal
    gst: Decimal
    total: Decimal


class SellHistoryEntry(BaseModel):
    """Immutable record of one lot's share of a disposal."""

    account_id: str
    buy_date: datetime
    sell_date: datetime
    quantity: Decimal
    buy_price: Decimal
    sell_price: Decimal
    applied_buy_brokerage: Decimal
    applied_sell_brokerage: Decimal
    applied_buy_gst: Decimal
    applied_sell_gst: Decimal
    total: Decimal  # proceeds after sell-side fees
    profit_or_loss: Decimal
    capital_gain_or_loss: Decimal
    cgt_discount: bool


class TradeType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class TradeRequest(BaseModel):
    """A buy or sell submitted from the trade form."""

    code: str
    account: Option
    date: datetime
    quantity: Decimal = Field(gt=0)
    unit_price: Decimal = Field(ge=0)
    brokerage: Decimal = Field(default=Decimal("0"), ge=0)
    gst_percent: Decimal | None = Field(default=None, ge=0)

    @field_validator("date")
    @classmethod
    def to_local_naive(cls, v: datetime) -> datetime:
        """Trade dates are compared as naive local times."""
        if v.tzinfo is not None:
            return v.astimezone().replace(tzinfo=None)
        return v


class TradeResponse(BaseModel):
    """Result of a trade: the company's ledger after the change."""

    code: str
    available_units: Decimal
    current_shares: list[Lot]
    disposals: list[SellHistoryEntry] = []


class AvailableUnitsResponse(BaseModel):
    code: str
    account_id: str
    available_units: Decimal


class PriceBreakdownRequest(BaseModel):
    type: TradeType
    quantity: Decimal | None = None
    unit_price: Decimal | None = None
    brokerage: Decimal | None = None
    gst_percent: Decimal = Decimal("0")


class PriceBreakdown(BaseModel):
    """Cost breakdown shown beside the trade form.

    Brokerage and GST are positive for buys and negative for sells.
    """

    share_value: Decimal
    brokerage: Decimal
    gst: Decimal
    total: Decimal
