"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import accounts, companies, options, portfolio, settings as settings_api, trades
from config import settings
from database import get_session_local, init_db
from logging_config import setup_logging
from services.exceptions import StoreWriteError
from services.repository import OPTION_KEYS, PortfolioRepository

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and seed the reference datasets on startup."""
    init_db()
    SessionLocal = get_session_local()
    db = SessionLocal()
    try:
        for key in OPTION_KEYS:
            PortfolioRepository.get_options(db, key)
        PortfolioRepository.get_countries(db)
        PortfolioRepository.get_settings(db)
    except StoreWriteError:
        logger.warning("Seeding default datasets failed on startup", exc_info=True)
    finally:
        db.close()
    yield


app = FastAPI(
    title="Share Portfolio",
    description="Share trade ledger, capital gains and portfolio valuation",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS configuration for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(accounts.router)
app.include_router(companies.router)
app.include_router(options.router)
app.include_router(portfolio.router)
app.include_router(settings_api.router)
app.include_router(trades.router)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
