"""Label option registry (financial status, resources, ...)."""

import logging

from sqlalchemy.orm import Session

from schemas.option import Option
from services.repository import PortfolioRepository

logger = logging.getLogger(__name__)


def merge_options(existing: list[Option], candidates: list[Option]) -> list[Option] | None:
    """Merge candidate labels into an option set.

    Labels match case-sensitively on their exact text. Returns the full set
    sorted alphabetically, or None when every candidate is already present.
    """
    known = {option.label for option in existing}
    new_options: list[Option] = []
    for option in candidates:
        if option.label not in known:
            known.add(option.label)
            new_options.append(Option(label=option.label))

    if not new_options:
        return None
    return sorted(existing + new_options, key=lambda o: (o.label.casefold(), o.label))


class OptionService:
    """Reads and extends the stored option sets."""

    @staticmethod
    def get_options(db: Session, key: str) -> list[Option]:
        return PortfolioRepository.get_options(db, key)

    @staticmethod
    def save_new_options(db: Session, key: str, options: list[Option]) -> list[Option]:
        """Persist any labels not already stored under ``key``.

        Idempotent: calling again with the same labels writes nothing.
        Returns the option set after the merge.
        """
        existing = PortfolioRepository.get_options(db, key)
        merged = merge_options(existing, options)
        if merged is None:
            return existing

        PortfolioRepository.save_options(db, key, merged)
        logger.info(
            "Added %d new option(s) to %s", len(merged) - len(existing), key
        )
        return merged
