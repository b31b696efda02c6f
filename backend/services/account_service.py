"""Account management service."""

import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.orm import Session

from models.utils import generate_uuid
from schemas.account import Account
from schemas.company import Company
from services.exceptions import AccountNotFoundError, DuplicateNameError
from services.repository import PortfolioRepository

logger = logging.getLogger(__name__)


def generate_account_id(
    accounts: list[Account], id_factory: Callable[[], str] = generate_uuid
) -> str:
    """Generate an account id not used by any existing account."""
    used = {account.account_id for account in accounts}
    account_id = id_factory()
    while account_id in used:
        account_id = id_factory()
    return account_id


def purge_account(companies: list[Company], account_id: str) -> list[Company]:
    """Return a copy of ``companies`` with no lot or history for ``account_id``.

    The input list and its companies are left untouched.
    """
    return [
        company.model_copy(
            update={
                "current_shares": [
                    lot for lot in company.current_shares if lot.account_id != account_id
                ],
                "buy_history": [
                    e for e in company.buy_history if e.account_id != account_id
                ],
                "sell_history": [
                    e for e in company.sell_history if e.account_id != account_id
                ],
            }
        )
        for company in companies
    ]


def _ensure_unique_name(accounts: list[Account], name: str, exclude_id: str | None = None) -> None:
    for account in accounts:
        if account.name == name and account.account_id != exclude_id:
            raise DuplicateNameError(name)


class AccountService:
    """Service for managing account CRUD operations."""

    @staticmethod
    def list_accounts(db: Session) -> list[Account]:
        """List all stored accounts."""
        return PortfolioRepository.get_accounts(db)

    @staticmethod
    def create_account(
        db: Session, name: str, id_factory: Callable[[], str] = generate_uuid
    ) -> Account:
        """Create an account with a freshly generated id.

        Raises:
            DuplicateNameError: another account already uses ``name``.
        """
        accounts = PortfolioRepository.get_accounts(db)
        _ensure_unique_name(accounts, name)

        account = Account(
            account_id=generate_account_id(accounts, id_factory),
            name=name,
            created=datetime.now(),
        )
        accounts.append(account)
        PortfolioRepository.save_accounts(db, accounts)
        logger.info("Account created: %s (id=%s)", account.name, account.account_id)
        return account

    @staticmethod
    def rename_account(db: Session, account_id: str, new_name: str) -> Account:
        """Rename an account.

        Raises:
            AccountNotFoundError: unknown account id.
            DuplicateNameError: another account already uses ``new_name``.
        """
        accounts = PortfolioRepository.get_accounts(db)
        account = next((a for a in accounts if a.account_id == account_id), None)
        if account is None:
            raise AccountNotFoundError(account_id)
        _ensure_unique_name(accounts, new_name, exclude_id=account_id)

        old_name = account.name
        account.name = new_name
        PortfolioRepository.save_accounts(db, accounts)
        logger.info("Account renamed: %s -> %s (id=%s)", old_name, new_name, account_id)
        return account

    @staticmethod
    def delete_account(db: Session, account_id: str) -> list[Account]:
        """Delete an account together with every lot and trade it owns.

        Returns the remaining accounts.

        Raises:
            AccountNotFoundError: unknown account id.
        """
        accounts = PortfolioRepository.get_accounts(db)
        remaining = [a for a in accounts if a.account_id != account_id]
        if len(remaining) == len(accounts):
            raise AccountNotFoundError(account_id)

        companies = purge_account(PortfolioRepository.get_companies(db), account_id)

        PortfolioRepository.save_accounts(db, remaining)
        PortfolioRepository.save_companies(db, companies)
        logger.info("Account deleted with its trades: %s", account_id)
        return remaining
