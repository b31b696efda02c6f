"""Option registry API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from schemas.option import Option
from services.option_service import OptionService
from services.repository import OPTION_KEYS

router = APIRouter(prefix="/api/options", tags=["options"])


def _validate_key(key: str) -> None:
    """Raise 404 for keys that are not a label registry."""
    if key not in OPTION_KEYS:
        raise HTTPException(status_code=404, detail=f"Unknown option set '{key}'")


@router.get("/{key}", response_model=list[Option])
def get_options(key: str, db: Session = Depends(get_db)):
    """Get a label registry, sorted alphabetically."""
    _validate_key(key)
    return OptionService.get_options(db, key)


@router.post("/{key}", response_model=list[Option])
def save_new_options(key: str, options: list[Option], db: Session = Depends(get_db)):
    """Register labels not yet in the registry; existing labels are ignored."""
    _validate_key(key)
    return OptionService.save_new_options(db, key, options)
