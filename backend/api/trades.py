"""Trade entry API endpoints: buys, sells and the trade form helpers."""

import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.helpers import http_error
from database import get_db
from schemas.company import Company
from schemas.ledger import (
    AvailableUnitsResponse,
    PriceBreakdown,
    PriceBreakdownRequest,
    SellHistoryEntry,
    TradeRequest,
    TradeResponse,
)
from services.exceptions import LedgerError
from services.lot_ledger_service import LotLedgerService, count_available, price_breakdown
from services.repository import PortfolioRepository
from utils.ticker import normalize_code

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/trades", tags=["trades"])


def _gst_percent(db: Session, trade: TradeRequest) -> Decimal:
    """GST rate for a trade, falling back to the saved setting."""
    if trade.gst_percent is not None:
        return trade.gst_percent
    return PortfolioRepository.get_settings(db).gst_percent


def _trade_response(
    company: Company, account_id: str, disposals: list[SellHistoryEntry] | None = None
) -> TradeResponse:
    return TradeResponse(
        code=company.code,
        available_units=count_available(company, account_id),
        current_shares=company.current_shares,
        disposals=disposals or [],
    )


@router.post("/buy", response_model=TradeResponse)
def record_buy(trade: TradeRequest, db: Session = Depends(get_db)):
    """Record a purchase as a new open lot."""
    try:
        company = LotLedgerService.record_buy(
            db,
            trade.code,
            trade.account,
            trade.date,
            trade.quantity,
            trade.unit_price,
            trade.brokerage,
            _gst_percent(db, trade),
        )
    except LedgerError as e:
        raise http_error(e)
    return _trade_response(company, trade.account.account_id)


@router.post("/sell", response_model=TradeResponse)
def record_sell(trade: TradeRequest, db: Session = Depends(get_db)):
    """Record a sale, consuming the account's lots oldest first."""
    try:
        company, disposals = LotLedgerService.record_sell(
            db,
            trade.code,
            trade.account,
            trade.date,
            trade.quantity,
            trade.unit_price,
            trade.brokerage,
            _gst_percent(db, trade),
        )
    except LedgerError as e:
        raise http_error(e)
    return _trade_response(company, trade.account.account_id, disposals)


@router.get("/available/{code}", response_model=AvailableUnitsResponse)
def available_units(
    code: str,
    account_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    """Units an account can currently sell."""
    try:
        units = LotLedgerService.available_units(db, code, account_id)
    except LedgerError as e:
        raise http_error(e)
    return AvailableUnitsResponse(
        code=normalize_code(code), account_id=account_id, available_units=units
    )


@router.post("/breakdown", response_model=PriceBreakdown)
def breakdown(request: PriceBreakdownRequest):
    """Live cost breakdown for a partially filled trade form."""
    return price_breakdown(
        request.type,
        request.quantity,
        request.unit_price,
        request.brokerage,
        request.gst_percent,
    )
