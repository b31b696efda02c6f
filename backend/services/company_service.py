"""Company registry: code validation and adding companies."""

import logging

from sqlalchemy.orm import Session

from schemas.company import CodeValidation, Company, CompanyCreate
from services.exceptions import InvalidCodeError, QuoteUnavailableError, SecurityNotFoundError
from services.market_data_service import MarketDataService
from services.option_service import OptionService
from services.repository import OPTION_KEYS, PortfolioRepository
from utils.ticker import is_valid_code, normalize_code

logger = logging.getLogger(__name__)

VALID = "Valid"


class CompanyService:
    """Service for listing, validating and adding companies."""

    @staticmethod
    def list_companies(db: Session) -> list[Company]:
        return PortfolioRepository.get_companies(db)

    @staticmethod
    def get_company(db: Session, code: str) -> Company:
        code = normalize_code(code)
        company = PortfolioRepository.find_company(PortfolioRepository.get_companies(db), code)
        if company is None:
            raise SecurityNotFoundError(code)
        return company

    @staticmethod
    def quick_validate_code(db: Session, code: str) -> str:
        """Check format and uniqueness without touching the quote feed.

        Returns ``"Valid"`` or the reason the code is rejected.
        """
        if not is_valid_code(code):
            return "Code must be 3-5 letters or digits"
        companies = PortfolioRepository.get_companies(db)
        if PortfolioRepository.find_company(companies, normalize_code(code)) is not None:
            return "Company already exists"
        return VALID

    @staticmethod
    def validate_code(
        db: Session, code: str, market_data: MarketDataService
    ) -> CodeValidation:
        """Quick validation followed by a quote lookup for name and price."""
        status = CompanyService.quick_validate_code(db, code)
        if status != VALID:
            return CodeValidation(status=status)

        try:
            name, quote = market_data.lookup_company(normalize_code(code))
        except QuoteUnavailableError as e:
            return CodeValidation(status=e.reason)
        return CodeValidation(status=VALID, company_name=name, unit_price=quote.price)

    @staticmethod
    def add_company(db: Session, payload: CompanyCreate) -> Company:
        """Store a new company with empty ledger collections.

        Labels not yet in their registry are registered first.

        Raises:
            InvalidCodeError: bad format or the code is already stored.
        """
        status = CompanyService.quick_validate_code(db, payload.code)
        if status != VALID:
            raise InvalidCodeError(payload.code, status)

        for key in OPTION_KEYS:
            labels = getattr(payload, key)
            if labels:
                OptionService.save_new_options(db, key, labels)

        company = Company(
            code=normalize_code(payload.code),
            operating_countries=payload.operating_countries,
            reasons_to_buy=payload.reasons_to_buy,
            reasons_not_to_buy=payload.reasons_not_to_buy,
            positives=payload.positives,
            negatives=payload.negatives,
            notes=[payload.note] if payload.note else [],
            date_notifications=[payload.date_notification] if payload.date_notification else [],
            price_notifications=[payload.price_notification] if payload.price_notification else [],
            **{key: getattr(payload, key) for key in OPTION_KEYS},
        )

        companies = PortfolioRepository.get_companies(db)
        companies.append(company)
        PortfolioRepository.save_companies(db, companies)
        logger.info("Added company %s", company.code)
        return company
