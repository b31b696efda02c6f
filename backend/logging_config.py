"""Centralized logging configuration."""

import logging

from config import settings

# Third-party loggers that are chatty at INFO (SQL echo, HTTP requests, yfinance retries)
NOISY_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "httpx",
    "httpcore",
    "urllib3",
    "yfinance",
    "peewee",
)


def setup_logging() -> None:
    """Configure logging for the application.

    Sets root logger level from settings.LOG_LEVEL and suppresses noisy
    third-party loggers to WARNING. The thread name is included because
    price history refreshes log from worker threads.
    """
    logging.basicConfig(
        format="%(asctime)s %(levelname)-8s [%(threadName)s] %(name)s  %(message)s",
        datefmt="%H:%M:%S",
        level=getattr(logging, settings.LOG_LEVEL),
        force=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
