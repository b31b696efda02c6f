"""Typed access to the collections kept in the key/value store.

Each collection has one accessor pair returning a concrete schema. A key
that has never been written is seeded from the bundled default dataset
(``<DEFAULT_DATA_DIR>/<key>.json``, or an empty list when there is none)
and persisted before it is returned.
"""

import json
import logging
from typing import Any

from pydantic import TypeAdapter
from sqlalchemy.orm import Session

from config import settings
from schemas.account import Account
from schemas.company import Company
from schemas.option import Country, Option
from schemas.portfolio_valuation import HistoricalEntry
from schemas.settings import UserSettings
from services.store_service import StoreService

logger = logging.getLogger(__name__)

COMPANIES_KEY = "companies"
ACCOUNTS_KEY = "accounts"
COUNTRIES_KEY = "countries"
HISTORICALS_KEY = "historicals"
SETTINGS_KEY = "settings"

# Label sets attached to companies; also the Company field names.
OPTION_KEYS = (
    "financial_status",
    "mining_status",
    "monitor",
    "products",
    "recommendations",
    "resources",
)

_companies = TypeAdapter(list[Company])
_accounts = TypeAdapter(list[Account])
_options = TypeAdapter(list[Option])
_countries = TypeAdapter(list[Country])
_historicals = TypeAdapter(list[HistoricalEntry])


def _load_default(key: str) -> Any:
    path = settings.DEFAULT_DATA_DIR / f"{key}.json"
    if not path.exists():
        return [] if key != SETTINGS_KEY else {}
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _get_or_seed(db: Session, key: str) -> Any:
    data = StoreService.get(db, key)
    if data is None:
        data = _load_default(key)
        StoreService.set(db, key, data)
        logger.info("Seeded '%s' from default dataset", key)
    return data


def _check_option_key(key: str) -> None:
    if key not in OPTION_KEYS:
        raise ValueError(f"Unknown option key: {key}")


class PortfolioRepository:
    """Loads and saves every portfolio collection."""

    @staticmethod
    def get_companies(db: Session) -> list[Company]:
        return _companies.validate_python(_get_or_seed(db, COMPANIES_KEY))

    @staticmethod
    def save_companies(db: Session, companies: list[Company]) -> None:
        StoreService.set(db, COMPANIES_KEY, _companies.dump_python(companies, mode="json"))

    @staticmethod
    def get_accounts(db: Session) -> list[Account]:
        return _accounts.validate_python(_get_or_seed(db, ACCOUNTS_KEY))

    @staticmethod
    def save_accounts(db: Session, accounts: list[Account]) -> None:
        StoreService.set(db, ACCOUNTS_KEY, _accounts.dump_python(accounts, mode="json"))

    @staticmethod
    def get_options(db: Session, key: str) -> list[Option]:
        _check_option_key(key)
        return _options.validate_python(_get_or_seed(db, key))

    @staticmethod
    def save_options(db: Session, key: str, options: list[Option]) -> None:
        _check_option_key(key)
        StoreService.set(
            db, key, _options.dump_python(options, mode="json", exclude_none=True)
        )

    @staticmethod
    def get_countries(db: Session) -> list[Country]:
        return _countries.validate_python(_get_or_seed(db, COUNTRIES_KEY))

    @staticmethod
    def get_historicals(db: Session) -> list[HistoricalEntry]:
        # The price cache is never seeded; a missing key is simply empty.
        data = StoreService.get(db, HISTORICALS_KEY)
        return _historicals.validate_python(data or [])

    @staticmethod
    def save_historicals(db: Session, historicals: list[HistoricalEntry]) -> None:
        StoreService.set(
            db, HISTORICALS_KEY, _historicals.dump_python(historicals, mode="json")
        )

    @staticmethod
    def get_settings(db: Session) -> UserSettings:
        return UserSettings.model_validate(_get_or_seed(db, SETTINGS_KEY))

    @staticmethod
    def save_settings(db: Session, user_settings: UserSettings) -> None:
        StoreService.set(db, SETTINGS_KEY, user_settings.model_dump(mode="json"))

    @staticmethod
    def find_company(companies: list[Company], code: str) -> Company | None:
        """Find a company by exact (uppercase) code."""
        return next((c for c in companies if c.code == code), None)
