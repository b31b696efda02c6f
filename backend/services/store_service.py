"""Key/value document store backed by the ``store_entries`` table."""

import json
import logging
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from models.store_entry import StoreEntry
from services.exceptions import StoreWriteError

logger = logging.getLogger(__name__)


class StoreService:
    """Stores one JSON document per logical collection name."""

    @staticmethod
    def keys(db: Session) -> list[str]:
        """List every stored key, sorted."""
        return sorted(key for (key,) in db.query(StoreEntry.key).all())

    @staticmethod
    def get(db: Session, key: str) -> Any | None:
        """Get a document by key, or None if the key has never been set."""
        entry = db.query(StoreEntry).filter(StoreEntry.key == key).first()
        if entry is None:
            return None
        return json.loads(entry.value)

    @staticmethod
    def set(db: Session, key: str, value: Any) -> None:
        """Create or replace the document stored under ``key``.

        Raises:
            StoreWriteError: if the write cannot be committed. The session
                is rolled back; callers' in-memory objects are untouched.
        """
        serialized = json.dumps(value)
        entry = db.query(StoreEntry).filter(StoreEntry.key == key).first()

        try:
            if entry is None:
                entry = StoreEntry(key=key, value=serialized)
                db.add(entry)
                try:
                    db.commit()
                except IntegrityError:
                    db.rollback()
                    entry = db.query(StoreEntry).filter(StoreEntry.key == key).first()
                    entry.value = serialized
                    db.commit()
                    logger.debug("Updated store entry (concurrent insert): %s", key)
                else:
                    logger.debug("Created store entry: %s", key)
            else:
                entry.value = serialized
                db.commit()
                logger.debug("Updated store entry: %s", key)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to write store entry %s: %s", key, e)
            raise StoreWriteError(key, str(e)) from e

    @staticmethod
    def delete(db: Session, key: str) -> bool:
        """Delete a document by key. Returns True if deleted, False if not found."""
        entry = db.query(StoreEntry).filter(StoreEntry.key == key).first()
        if entry is None:
            return False
        db.delete(entry)
        db.commit()
        logger.info("Deleted store entry: %s", key)
        return True
