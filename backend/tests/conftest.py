"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401  (registers tables on Base.metadata)
from api.helpers import get_market_data_service
from database import Base, get_db
from main import app
from services.market_data_service import MarketDataService
# Pytest fixtures - imported to make them available to tests
from tests.fixtures import (  # noqa: F401
    accounts,
    company,
)
from tests.fixtures.mocks import MockMarketDataProvider


@pytest.fixture(name="db")
def db_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="mock_provider")
def mock_provider_fixture():
    """An empty mock market data provider; tests fill it as needed."""
    return MockMarketDataProvider()


@pytest.fixture(name="client")
def client_fixture(db, mock_provider):
    """Create a test client with the test database and mock market data."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    def override_get_market_data_service():
        return MarketDataService(provider=mock_provider, suffix=".AX")

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_market_data_service] = override_get_market_data_service
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
