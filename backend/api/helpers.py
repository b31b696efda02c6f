"""Shared API helpers for route handlers.

Dependency providers and the mapping from domain errors to HTTP responses.
"""

from fastapi import HTTPException

from services.exceptions import (
    AccountNotFoundError,
    DuplicateNameError,
    InsufficientQuantityError,
    InvalidCodeError,
    LedgerError,
    MissingAccountError,
    NoHoldingsError,
    QuoteUnavailableError,
    SecurityNotFoundError,
    StoreWriteError,
)
from services.market_data_service import MarketDataService

_STATUS_CODES: dict[type[LedgerError], int] = {
    SecurityNotFoundError: 404,
    AccountNotFoundError: 404,
    MissingAccountError: 400,
    NoHoldingsError: 400,
    InsufficientQuantityError: 400,
    InvalidCodeError: 400,
    DuplicateNameError: 409,
    QuoteUnavailableError: 502,
    StoreWriteError: 500,
}


def get_market_data_service() -> MarketDataService:
    """Dependency for MarketDataService; overridden in tests."""
    return MarketDataService()


def http_error(error: LedgerError) -> HTTPException:
    """Translate a domain error into the HTTPException to raise.

    Args:
        error: The error raised by a service.

    Returns:
        HTTPException with the mapped status code and the error message
        as detail. Unmapped errors become 400.
    """
    status_code = _STATUS_CODES.get(type(error), 400)
    return HTTPException(status_code=status_code, detail=str(error))
