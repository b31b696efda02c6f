"""Service for the per-company trade-lot ledger.

Owns every change to a company's ``current_shares`` (open lots),
``buy_history`` and ``sell_history``. Sells consume lots oldest first
(FIFO), split brokerage and GST proportionally across the lots they touch
and apply the 50% CGT discount to gains on lots held for more than a year.

The module-level ``apply_*`` functions work on an in-memory ``Company``;
``LotLedgerService`` loads the company, applies the change and saves the
whole collection in one write.
"""

import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy.orm import Session

from schemas.company import Company
from schemas.ledger import (
    BuyHistoryEntry,
    Lot,
    PriceBreakdown,
    SellHistoryEntry,
    TradeType,
)
from schemas.option import Option
from services.exceptions import (
    AccountNotFoundError,
    InsufficientQuantityError,
    MissingAccountError,
    NoHoldingsError,
    SecurityNotFoundError,
)
from services.repository import PortfolioRepository
from utils.dates import year_diff
from utils.ticker import normalize_code

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CGT_DISCOUNT_RATE = Decimal("0.5")


def gst_for(brokerage: Decimal, gst_percent: Decimal) -> Decimal:
    """GST charged on a brokerage fee."""
    return brokerage * (gst_percent / HUNDRED)


def count_available(company: Company, account_id: str) -> Decimal:
    """Units held in open lots for one account (0 if none)."""
    return sum(
        (lot.quantity for lot in company.current_shares if lot.account_id == account_id),
        ZERO,
    )


def apply_buy(
    company: Company,
    account: Option,
    date: datetime,
    quantity: Decimal,
    unit_price: Decimal,
    brokerage: Decimal,
    gst_percent: Decimal,
) -> BuyHistoryEntry:
    """Open a new lot and append the matching buy record.

    Returns the buy history entry that was appended.
    """
    if account.account_id is None:
        raise MissingAccountError()

    gst = gst_for(brokerage, gst_percent)
    total = quantity * unit_price + brokerage + gst

    lot = Lot(
        account_id=account.account_id,
        date=date,
        quantity=quantity,
        unit_price=unit_price,
        brokerage=brokerage,
        gst=gst,
    )
    entry = BuyHistoryEntry(**lot.model_dump(), total=total)

    company.current_shares.append(lot)
    company.buy_history.append(entry)
    return entry


def eligible_lots(company: Company, account_id: str, sell_date: datetime) -> list[Lot]:
    """Open lots an account can sell on ``sell_date``, oldest first.

    Lots bought after the sell date are excluded. ``sorted`` is stable, so
    lots sharing a purchase date keep their insertion order.
    """
    return sorted(
        (
            lot
            for lot in company.current_shares
            if lot.account_id == account_id and lot.date <= sell_date
        ),
        key=lambda lot: lot.date,
    )


def apply_sell(
    company: Company,
    account: Option,
    date: datetime,
    quantity: Decimal,
    unit_price: Decimal,
    brokerage: Decimal,
    gst_percent: Decimal,
) -> list[SellHistoryEntry]:
    """Dispose of ``quantity`` units FIFO across the account's eligible lots.

    Every check runs before the first lot is touched, so a rejected sell
    leaves the company unchanged.

    Returns:
        One sell history entry per lot consumed, in consumption order.

    Raises:
        MissingAccountError: account has no id.
        NoHoldingsError: no lots on or before the sell date.
        InsufficientQuantityError: eligible lots hold fewer units than requested.
    """
    if account.account_id is None:
        raise MissingAccountError()

    lots = eligible_lots(company, account.account_id, date)
    if not lots:
        raise NoHoldingsError(company.code, account.label)

    owned = sum((lot.quantity for lot in lots), ZERO)
    if owned < quantity:
        raise InsufficientQuantityError(required=quantity, owned=owned)

    total_sell_gst = gst_for(brokerage, gst_percent)

    disposals: list[SellHistoryEntry] = []
    consumed: list[Lot] = []
    remaining = quantity

    for lot in lots:
        if remaining <= 0:
            break

        sell_quantity = min(lot.quantity, remaining)
        remaining -= sell_quantity

        buy_ratio = sell_quantity / lot.quantity
        sell_ratio = sell_quantity / quantity

        applied_buy_brokerage = buy_ratio * lot.brokerage
        applied_buy_gst = buy_ratio * lot.gst
        applied_sell_brokerage = sell_ratio * brokerage
        applied_sell_gst = sell_ratio * total_sell_gst

        total_cost = sell_quantity * lot.unit_price + applied_buy_brokerage + applied_buy_gst
        total_revenue = sell_quantity * unit_price - applied_sell_brokerage - applied_sell_gst
        profit_or_loss = total_revenue - total_cost

        # Discount needs a gain and a holding period strictly over one year
        cgt_discount = profit_or_loss > 0 and year_diff(date, lot.date) > 1
        capital_gain_or_loss = (
            profit_or_loss * CGT_DISCOUNT_RATE if cgt_discount else profit_or_loss
        )

        disposals.append(
            SellHistoryEntry(
                account_id=account.account_id,
                buy_date=lot.date,
                sell_date=date,
                quantity=sell_quantity,
                buy_price=lot.unit_price,
                sell_price=unit_price,
                applied_buy_brokerage=applied_buy_brokerage,
                applied_sell_brokerage=applied_sell_brokerage,
                applied_buy_gst=applied_buy_gst,
                applied_sell_gst=applied_sell_gst,
                total=total_revenue,
                profit_or_loss=profit_or_loss,
                capital_gain_or_loss=capital_gain_or_loss,
                cgt_discount=cgt_discount,
            )
        )

        if sell_quantity == lot.quantity:
            consumed.append(lot)
        else:
            lot.quantity -= sell_quantity
            lot.brokerage *= 1 - buy_ratio
            lot.gst *= 1 - buy_ratio

    if consumed:
        # Identity check: two lots with identical fields are distinct purchases
        company.current_shares = [
            lot for lot in company.current_shares
            if not any(lot is gone for gone in consumed)
        ]
    company.sell_history.extend(disposals)
    return disposals


def price_breakdown(
    trade_type: TradeType,
    quantity: Decimal | None,
    unit_price: Decimal | None,
    brokerage: Decimal | None,
    gst_percent: Decimal,
) -> PriceBreakdown:
    """Cost breakdown for a trade that is still being filled in.

    Missing quantity/price count as zero share value; missing brokerage
    counts as zero fees. Fees are negative for sells.
    """
    share_value = ZERO
    if quantity is not None and unit_price is not None:
        share_value = quantity * unit_price

    fee = ZERO
    gst = ZERO
    if brokerage is not None:
        sign = 1 if trade_type == TradeType.BUY else -1
        fee = sign * brokerage
        gst = gst_for(fee, gst_percent)

    return PriceBreakdown(
        share_value=share_value,
        brokerage=fee,
        gst=gst,
        total=share_value + fee + gst,
    )


class LotLedgerService:
    """Records trades against the stored company collection."""

    @staticmethod
    def _load(db: Session, code: str) -> tuple[list[Company], Company]:
        companies = PortfolioRepository.get_companies(db)
        code = normalize_code(code)
        company = PortfolioRepository.find_company(companies, code)
        if company is None:
            raise SecurityNotFoundError(code)
        return companies, company

    @staticmethod
    def _check_account(db: Session, account: Option) -> None:
        """Trades may only reference registered accounts."""
        if account.account_id is None:
            raise MissingAccountError()
        accounts = PortfolioRepository.get_accounts(db)
        if not any(a.account_id == account.account_id for a in accounts):
            raise AccountNotFoundError(account.account_id)

    @staticmethod
    def available_units(db: Session, code: str, account_id: str) -> Decimal:
        """Units the account currently holds in open lots of ``code``.

        Raises:
            SecurityNotFoundError: unknown code.
        """
        _, company = LotLedgerService._load(db, code)
        return count_available(company, account_id)

    @staticmethod
    def record_buy(
        db: Session,
        code: str,
        account: Option,
        date: datetime,
        quantity: Decimal,
        unit_price: Decimal,
        brokerage: Decimal,
        gst_percent: Decimal,
    ) -> Company:
        """Record a purchase and persist it.

        Returns the updated company.

        Raises:
            SecurityNotFoundError: unknown code.
            MissingAccountError: account has no id.
            AccountNotFoundError: account id is not registered.
        """
        companies, company = LotLedgerService._load(db, code)
        LotLedgerService._check_account(db, account)
        entry = apply_buy(
            company, account, date, quantity, unit_price, brokerage, gst_percent
        )
        PortfolioRepository.save_companies(db, companies)
        logger.info(
            "BUY %s x %s @ %s for account %s (total %s)",
            quantity,
            company.code,
            unit_price,
            account.account_id,
            entry.total,
        )
        return company

    @staticmethod
    def record_sell(
        db: Session,
        code: str,
        account: Option,
        date: datetime,
        quantity: Decimal,
        unit_price: Decimal,
        brokerage: Decimal,
        gst_percent: Decimal,
    ) -> tuple[Company, list[SellHistoryEntry]]:
        """Record a FIFO disposal and persist the lots and history together.

        Returns the updated company and the disposal records created.
        """
        companies, company = LotLedgerService._load(db, code)
        LotLedgerService._check_account(db, account)
        disposals = apply_sell(
            company, account, date, quantity, unit_price, brokerage, gst_percent
        )
        PortfolioRepository.save_companies(db, companies)
        logger.info(
            "SELL %s x %s @ %s for account %s across %d lot(s)",
            quantity,
            company.code,
            unit_price,
            account.account_id,
            len(disposals),
        )
        return company, disposals
