"""Test fixtures and sample data."""
from datetime import datetime
import pytest
from sqlalchemy.orm import Session

from schemas.account import Account
from schemas.company import Company
from schemas.option import Option
from services.repository import PortfolioRepository

ACCOUNT_ID = "acc-1"
OTHER_ACCOUNT_ID = "acc-2"


def make_account_option(account_id: str = ACCOUNT_ID, label: str = "Main") -> Option:
    return Option(label=label, account_id=account_id)


def save_company(db: Session, company: Company) -> Company:
    """Append a company to the stored collection."""
    companies = PortfolioRepository.get_companies(db)
    companies.append(company)
    PortfolioRepository.save_companies(db, companies)
    return company


@pytest.fixture
def accounts(db: Session) -> list[Account]:
    """Two stored accounts."""
    stored = [
        Account(account_id=ACCOUNT_ID, name="Main", created=datetime(2023, 1, 1)),
        Account(account_id=OTHER_ACCOUNT_ID, name="Super", created=datetime(2023, 1, 2)),
    ]
    PortfolioRepository.save_accounts(db, stored)
    return stored


@pytest.fixture
def company(db: Session) -> Company:
    """A stored company with no trades."""
    return save_company(
        db,
        Company(code="CBA", products=[Option(label="Banking")]),
    )
