"""Accounts API endpoints."""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from api.helpers import http_error
from database import get_db
from schemas.account import Account, AccountCreate, AccountRename
from services.account_service import AccountService
from services.exceptions import LedgerError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/accounts", tags=["accounts"])


@router.get("", response_model=list[Account])
def list_accounts(db: Session = Depends(get_db)):
    """List all accounts."""
    return AccountService.list_accounts(db)


@router.post("", response_model=Account, status_code=201)
def create_account(data: AccountCreate, db: Session = Depends(get_db)):
    """Create a new account with a unique name."""
    try:
        return AccountService.create_account(db, data.name)
    except LedgerError as e:
        raise http_error(e)


@router.patch("/{account_id}", response_model=Account)
def rename_account(account_id: str, data: AccountRename, db: Session = Depends(get_db)):
    """Rename an account."""
    try:
        return AccountService.rename_account(db, account_id, data.name)
    except LedgerError as e:
        raise http_error(e)


@router.delete("/{account_id}", status_code=204)
def delete_account(account_id: str, db: Session = Depends(get_db)):
    """Delete an account along with its lots and trade history."""
    try:
        AccountService.delete_account(db, account_id)
    except LedgerError as e:
        raise http_error(e)
    return Response(status_code=204)
