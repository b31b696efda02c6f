"""Companies API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.helpers import get_market_data_service, http_error
from database import get_db
from schemas.company import CodeValidation, Company, CompanyCreate
from services.company_service import CompanyService
from services.exceptions import LedgerError
from services.market_data_service import MarketDataService

router = APIRouter(prefix="/api/companies", tags=["companies"])


@router.get("", response_model=list[Company])
def list_companies(db: Session = Depends(get_db)):
    return CompanyService.list_companies(db)


@router.post("", response_model=Company, status_code=201)
def add_company(payload: CompanyCreate, db: Session = Depends(get_db)):
    """Add a company and register any new labels it carries."""
    try:
        return CompanyService.add_company(db, payload)
    except LedgerError as e:
        raise http_error(e)


@router.get("/validate/{code}", response_model=CodeValidation)
def validate_code(
    code: str,
    db: Session = Depends(get_db),
    market_data: MarketDataService = Depends(get_market_data_service),
):
    """Check a code's format and uniqueness, then look it up on the quote feed."""
    return CompanyService.validate_code(db, code, market_data)


@router.get("/{code}", response_model=Company)
def get_company(code: str, db: Session = Depends(get_db)):
    try:
        return CompanyService.get_company(db, code)
    except LedgerError as e:
        raise http_error(e)
