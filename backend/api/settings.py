"""User settings API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.helpers import http_error
from database import get_db
from schemas.settings import UserSettings
from services.exceptions import LedgerError
from services.repository import PortfolioRepository

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("", response_model=UserSettings)
def get_settings(db: Session = Depends(get_db)):
    return PortfolioRepository.get_settings(db)


@router.put("", response_model=UserSettings)
def save_settings(data: UserSettings, db: Session = Depends(get_db)):
    try:
        PortfolioRepository.save_settings(db, data)
    except LedgerError as e:
        raise http_error(e)
    return data
