"""Domain errors raised by the ledger, registry and valuation services.

Validation-class errors abort a single mutating call before any state is
touched. ``QuoteUnavailableError`` is the only one the valuation batch
recovers from locally.
"""

from decimal import Decimal


class LedgerError(Exception):
    """Base exception for portfolio domain errors."""

    pass


class SecurityNotFoundError(LedgerError):
    """No company is stored under the given exchange code."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Could not find data for {code}")


class MissingAccountError(LedgerError):
    """A trade referenced an account without an account id."""

    def __init__(self):
        super().__init__("Account id is missing")


class AccountNotFoundError(LedgerError):
    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account not found: {account_id}")


class NoHoldingsError(LedgerError):
    """The account holds no lots of the company on or before the sell date."""

    def __init__(self, code: str, account_name: str):
        self.code = code
        self.account_name = account_name
        super().__init__(f"{account_name} has no units for {code}")


class InsufficientQuantityError(LedgerError):
    """A sell asked for more units than the eligible lots hold."""

    def __init__(self, required: Decimal, owned: Decimal):
        self.required = required
        self.owned = owned
        super().__init__(
            f"Insufficient quantity. Required: {required}. Owned: {owned}"
        )


class DuplicateNameError(LedgerError):
    """An account name is already in use."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"An account named '{name}' already exists")


class InvalidCodeError(LedgerError):
    """An exchange code failed validation (format or uniqueness)."""

    def __init__(self, code: str, reason: str):
        self.code = code
        self.reason = reason
        super().__init__(f"{code}: {reason}")


class QuoteUnavailableError(LedgerError):
    """No usable quote for a company. Non-fatal during batch valuation."""

    def __init__(self, code: str, reason: str = "quote unavailable"):
        self.code = code
        self.reason = reason
        super().__init__(f"{code}: {reason}")


class StoreWriteError(LedgerError):
    """Persisting a collection to the key/value store failed."""

    def __init__(self, key: str, reason: str):
        self.key = key
        super().__init__(f"Failed to save '{key}': {reason}")
