"""Pydantic schemas for company records."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from schemas.ledger import BuyHistoryEntry, Lot, SellHistoryEntry
from schemas.option import Country, Option


class Note(BaseModel):
    title: str
    date: datetime
    description: str = ""


class DateNotification(BaseModel):
    title: str
    date: datetime


class PriceNotification(BaseModel):
    title: str
    high_price: Decimal | None = None
    low_price: Decimal | None = None


class Company(BaseModel):
    """Everything stored for one listed company, ledger included."""

    code: str
    operating_countries: list[Country] = []
    financial_status: list[Option] = []
    mining_status: list[Option] = []
    resources: list[Option] = []
    products: list[Option] = []
    recommendations: list[Option] = []
    monitor: list[Option] = []
    reasons_to_buy: str = ""
    reasons_not_to_buy: str = ""
    positives: str = ""
    negatives: str = ""
    notes: list[Note] = []
    date_notifications: list[DateNotification] = []
    price_notifications: list[PriceNotification] = []
    current_shares: list[Lot] = []
    buy_history: list[BuyHistoryEntry] = []
    sell_history: list[SellHistoryEntry] = []


class CompanyCreate(BaseModel):
    """Add-company form values."""

    code: str
    operating_countries: list[Country] = []
    financial_status: list[Option] = []
    mining_status: list[Option] = []
    resources: list[Option] = []
    products: list[Option] = []
    recommendations: list[Option] = []
    monitor: list[Option] = []
    reasons_to_buy: str = ""
    reasons_not_to_buy: str = ""
    positives: str = ""
    negatives: str = ""
    note: Note | None = None
    date_notification: DateNotification | None = None
    price_notification: PriceNotification | None = None


class CodeValidation(BaseModel):
    """Result of looking an exchange code up against storage and the quote feed."""

    status: str
    company_name: str = ""
    unit_price: Decimal | None = None