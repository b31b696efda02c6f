"""StoreEntry model - generic key-value store for portfolio documents."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Text

from database import Base
from models.utils import generate_uuid


class StoreEntry(Base):
    """A single named collection stored as a JSON-serialized document.

    Keys are logical collection names ("companies", "accounts",
    "historicals", "settings", one per option label set).
    """

    __tablename__ = "store_entries"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    key = Column(String, unique=True, index=True, nullable=False)
    value = Column(Text, nullable=False)  # JSON-serialized
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
