"""Tests for StoreService and PortfolioRepository."""

import json
from datetime import datetime
from decimal import Decimal
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from schemas.account import Account
from schemas.settings import UserSettings
from services.exceptions import StoreWriteError
from services.repository import (
    ACCOUNTS_KEY,
    HISTORICALS_KEY,
    PortfolioRepository,
)
from services.store_service import StoreService


class TestStoreService:
    def test_get_missing_key_returns_none(self, db: Session):
        assert StoreService.get(db, "missing") is None

    def test_set_then_get(self, db: Session):
        StoreService.set(db, "numbers", [1, 2, 3])
        assert StoreService.get(db, "numbers") == [1, 2, 3]

    def test_set_replaces_value(self, db: Session):
        StoreService.set(db, "doc", {"a": 1})
        StoreService.set(db, "doc", {"b": 2})
        assert StoreService.get(db, "doc") == {"b": 2}
        assert StoreService.keys(db) == ["doc"]

    def test_delete(self, db: Session):
        StoreService.set(db, "doc", {})
        assert StoreService.delete(db, "doc") is True
        assert StoreService.delete(db, "doc") is False
        assert StoreService.get(db, "doc") is None

    def test_failed_commit_raises_store_write_error(self, db: Session):
        with patch.object(db, "commit", side_effect=OperationalError("stmt", {}, Exception("disk full"))):
            with pytest.raises(StoreWriteError, match="Failed to save 'doc'"):
                StoreService.set(db, "doc", {"a": 1})


class TestPortfolioRepository:
    def test_options_seeded_from_defaults(self, db: Session):
        options = PortfolioRepository.get_options(db, "products")

        assert [o.label for o in options] == ["Batteries", "Fertiliser", "Steel"]
        assert StoreService.get(db, "products") == [
            {"label": "Batteries"},
            {"label": "Fertiliser"},
            {"label": "Steel"},
        ]

    def test_collection_without_default_seeds_empty(self, db: Session):
        assert PortfolioRepository.get_companies(db) == []
        assert PortfolioRepository.get_accounts(db) == []
        assert StoreService.get(db, ACCOUNTS_KEY) == []

    def test_custom_default_data_dir(self, db: Session, tmp_path, monkeypatch):
        (tmp_path / "monitor.json").write_text(json.dumps([{"label": "Watch"}]))
        monkeypatch.setattr("services.repository.settings.DEFAULT_DATA_DIR", tmp_path)

        assert [o.label for o in PortfolioRepository.get_options(db, "monitor")] == ["Watch"]

    def test_unknown_option_key(self, db: Session):
        with pytest.raises(ValueError, match="Unknown option key"):
            PortfolioRepository.get_options(db, "colours")

    def test_historicals_are_not_seeded(self, db: Session):
        assert PortfolioRepository.get_historicals(db) == []
        assert StoreService.get(db, HISTORICALS_KEY) is None

    def test_settings_defaults(self, db: Session):
        user_settings = PortfolioRepository.get_settings(db)
        assert user_settings.gst_percent == Decimal("10")
        assert user_settings.unit_price_auto_fill is True

    def test_settings_round_trip(self, db: Session):
        PortfolioRepository.save_settings(
            db, UserSettings(gst_percent=Decimal("15"), brokerage_auto_fill=Decimal("9.95"))
        )
        stored = PortfolioRepository.get_settings(db)
        assert stored.gst_percent == Decimal("15")
        assert stored.brokerage_auto_fill == Decimal("9.95")

    def test_decimals_stored_as_strings(self, db: Session):
        PortfolioRepository.save_accounts(
            db, [Account(account_id="a", name="Main", created=datetime(2024, 1, 1))]
        )
        PortfolioRepository.save_settings(db, UserSettings(gst_percent=Decimal("10")))
        assert StoreService.get(db, "settings")["gst_percent"] == "10"

    def test_countries(self, db: Session):
        countries = PortfolioRepository.get_countries(db)
        australia = next(c for c in countries if c.code == "AU")
        assert australia.suggested is True
