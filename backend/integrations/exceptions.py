"""Typed exception hierarchy for market data provider errors."""


class ProviderError(Exception):
    """Base exception for all provider-related errors.

    Carries the provider name so callers can identify which provider failed.
    """

    def __init__(self, message: str, provider_name: str = ""):
        self.provider_name = provider_name
        super().__init__(message)


class ProviderConnectionError(ProviderError):
    """Network failure or an exception raised by the provider library."""

    pass


class ProviderDataError(ProviderError):
    """Empty, malformed or unparseable response from the provider."""

    pass
